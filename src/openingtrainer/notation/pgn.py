"""PGN parsing into chapters holding position trees.

Each PGN game becomes one :class:`~openingtrainer.core.models.Chapter`. The
tree mirrors the notation: the first move written at a node is its main-line
child and every parenthesised alternative becomes a later sibling. Positions
reached by different move orders are kept apart.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from openingtrainer.core import rules
from openingtrainer.core.enums import Color
from openingtrainer.core.errors import ParseError
from openingtrainer.core.fen import STARTING_FEN
from openingtrainer.core.models import Chapter, Position, PositionNode
from openingtrainer.core.rules import MoveApplier
from openingtrainer.notation.tokenizer import Token, TokenKind, split_games, tokenize

_LOGGER = logging.getLogger(__name__)

_RESULT_RE = re.compile(r"(?<!\S)(?:1-0|0-1|1/2-1/2|\*)(?!\S)")


@dataclass(slots=True)
class _RawGame:
    """Tokens of one game before tree construction."""

    offset: int
    headers: dict[str, str] = field(default_factory=dict)
    movetext: list[Token] = field(default_factory=list)
    error: ParseError | None = None

    def fail(self, error: ParseError) -> None:
        if self.error is None:
            self.error = error


class _TreeBuilder:
    """Builds a position tree from movetext tokens.

    The cursor is the list of nodes from the root to the current node, so no
    node needs a parent pointer. Opening a variation saves the cursor and
    steps back one ply; closing it restores the saved cursor.
    """

    __slots__ = ("_apply", "_root", "_path", "_saved")

    def __init__(self, root: Position, apply: MoveApplier) -> None:
        self._apply = apply
        self._root = PositionNode(root)
        self._path: list[PositionNode] = [self._root]
        self._saved: list[list[PositionNode]] = []

    def play(self, token: Token) -> None:
        cursor = self._path[-1]
        try:
            position = self._apply(cursor.position, token.text)
        except ValueError as exc:
            raise ParseError(token.offset, str(exc)) from exc
        assert position.last_move is not None

        child = cursor.child_for(position.last_move.san)
        if child is None:
            child = PositionNode(position)
            cursor.children.append(child)
        self._path.append(child)

    def open_variation(self, token: Token) -> None:
        if len(self._path) < 2:
            raise ParseError(token.offset, "Variation opened before any move")
        self._saved.append(list(self._path))
        self._path.pop()

    def close_variation(self, token: Token) -> None:
        if not self._saved:
            raise ParseError(token.offset, "Unmatched ')'")
        self._path = self._saved.pop()

    def finish(self, offset: int) -> PositionNode:
        if self._saved:
            raise ParseError(offset, "Unterminated variation")
        return self._root


def _study_and_chapter(headers: dict[str, str]) -> tuple[str, str]:
    study, chapter = "", ""
    event = headers.get("Event", "")
    if ":" in event:
        study, chapter = event.split(":", 1)
    else:
        chapter = event
    study = headers.get("StudyName", study)
    chapter = headers.get("ChapterName", chapter)
    return study.strip(), chapter.strip()


def _orientation(headers: dict[str, str]) -> Color:
    return Color.parse(headers.get("Orientation", "")) or Color.WHITE


def _root_position(game: _RawGame) -> Position:
    fen = STARTING_FEN
    if game.headers.get("SetUp") == "1" and "FEN" in game.headers:
        fen = game.headers["FEN"]
    try:
        return Position.initial(fen)
    except ValueError as exc:
        raise ParseError(game.offset, str(exc)) from exc


def _resume_offset(chunk: str, error_at: int) -> int | None:
    """Local offset just past the result token ending a game that failed to tokenize."""
    if chunk.startswith("{", error_at):
        # An unterminated comment swallows the rest of the chunk.
        return None
    match = _RESULT_RE.search(chunk, error_at)
    return None if match is None else match.end()


def _split_into_games(chunk_offset: int, chunk: str) -> list[_RawGame]:
    """Group a chunk's tokens into games; a result token ends a game.

    A malformed game keeps its first error and tokenizing resumes after its
    result token, so later games in the chunk are still found.
    """
    games: list[_RawGame] = []
    current = _RawGame(offset=chunk_offset)
    ended = False
    position = 0

    while True:
        try:
            for token in tokenize(chunk[position:], chunk_offset + position):
                if ended:
                    games.append(current)
                    current = _RawGame(offset=token.offset)
                    ended = False

                if token.kind == TokenKind.TAG:
                    if current.movetext:
                        current.fail(ParseError(token.offset, "Tag pair inside movetext"))
                    else:
                        current.headers[token.text] = token.value
                elif token.kind == TokenKind.RESULT:
                    ended = True
                elif token.kind in (TokenKind.MOVE_NUMBER, TokenKind.NAG):
                    continue
                else:
                    current.movetext.append(token)
        except ParseError as exc:
            if ended:
                games.append(current)
                current = _RawGame(offset=exc.offset)
                ended = False
            current.fail(exc)
            resume = _resume_offset(chunk, exc.offset - chunk_offset)
            if resume is not None:
                games.append(current)
                current = _RawGame(offset=chunk_offset + resume)
                position = resume
                continue
        break

    if ended or current.headers or current.movetext or current.error is not None:
        games.append(current)
    return games


class PgnParser:
    """Converts PGN text into chapters.

    Args:
        apply_move: Move-legality collaborator; defaults to the python-chess
            backed :func:`openingtrainer.core.rules.apply_move`.
    """

    __slots__ = ("_apply",)

    def __init__(self, apply_move: MoveApplier | None = None) -> None:
        self._apply = apply_move or rules.apply_move

    def parse(self, pgn_text: str) -> list[Chapter]:
        """Parse every game in *pgn_text*.

        Raises:
            ParseError: For the first malformed game.
        """
        chapters: list[Chapter] = []
        for chunk_offset, chunk in split_games(pgn_text):
            for game in _split_into_games(chunk_offset, chunk):
                chapters.append(self._build_chapter(game, len(chapters)))
        _LOGGER.debug("Parsed %d chapter(s)", len(chapters))
        return chapters

    def parse_lenient(self, pgn_text: str) -> tuple[list[Chapter], list[ParseError]]:
        """Parse games independently, collecting errors instead of stopping.

        Chapter indexes keep counting failed games so they match the position
        of each game in the document.
        """
        chapters: list[Chapter] = []
        errors: list[ParseError] = []
        index = 0
        for chunk_offset, chunk in split_games(pgn_text):
            for game in _split_into_games(chunk_offset, chunk):
                try:
                    chapters.append(self._build_chapter(game, index))
                except ParseError as exc:
                    _LOGGER.warning("Skipping malformed game: %s", exc)
                    errors.append(exc)
                index += 1
        _LOGGER.debug(
            "Parsed %d chapter(s), skipped %d", len(chapters), len(errors)
        )
        return chapters, errors

    def _build_chapter(self, game: _RawGame, index: int) -> Chapter:
        if game.error is not None:
            raise game.error
        builder = _TreeBuilder(_root_position(game), self._apply)
        end_offset = game.offset
        for token in game.movetext:
            end_offset = token.offset
            if token.kind == TokenKind.MOVE:
                builder.play(token)
            elif token.kind == TokenKind.OPEN_VARIATION:
                builder.open_variation(token)
            elif token.kind == TokenKind.CLOSE_VARIATION:
                builder.close_variation(token)

        study_name, name = _study_and_chapter(game.headers)
        return Chapter(
            name=name,
            study_name=study_name,
            headers=dict(game.headers),
            position_tree=builder.finish(end_offset),
            orientation=_orientation(game.headers),
            index=index,
        )


def parse_pgn(pgn_text: str, *, apply_move: MoveApplier | None = None) -> list[Chapter]:
    """Parse *pgn_text* into chapters, raising :class:`ParseError` on bad input."""
    return PgnParser(apply_move).parse(pgn_text)


def parse_pgn_lenient(
    pgn_text: str, *, apply_move: MoveApplier | None = None
) -> tuple[list[Chapter], list[ParseError]]:
    """Parse *pgn_text*, skipping malformed games and returning their errors."""
    return PgnParser(apply_move).parse_lenient(pgn_text)
