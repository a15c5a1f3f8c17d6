"""PGN tokenizer: splits documents into games and games into tokens."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from openingtrainer.core.errors import ParseError

_TAG_RE = re.compile(r'\[\s*(\w+)\s+"((?:[^"\\]|\\.)*)"\s*\]')
_MOVE_NUMBER_RE = re.compile(r"^(\d+)(\.+)")
_ANNOTATION_SUFFIX_RE = re.compile(r"[!?]+$")
_RESULT_TOKENS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})
_TOKEN_STOP = "{}();[]"


class TokenKind(StrEnum):
    TAG = "tag"
    MOVE_NUMBER = "move_number"
    MOVE = "move"
    NAG = "nag"
    RESULT = "result"
    OPEN_VARIATION = "("
    CLOSE_VARIATION = ")"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical PGN element.

    For ``TAG`` tokens ``text`` is the tag name and ``value`` its value.
    """

    kind: TokenKind
    text: str
    offset: int
    value: str = ""


def split_games(pgn_text: str) -> list[tuple[int, str]]:
    """Split a PGN document into ``(offset, text)`` chunks, one per tag section.

    A line starting with ``[`` opens a new chunk once the current chunk holds
    movetext. Lines inside a multi-line brace comment never split.
    """
    chunks: list[tuple[int, str]] = []
    start = 0
    offset = 0
    has_movetext = False
    in_comment = False

    for raw_line in pgn_text.splitlines(keepends=True):
        stripped = raw_line.strip()
        if not in_comment and stripped.startswith("[") and has_movetext:
            chunks.append((start, pgn_text[start:offset]))
            start = offset
            has_movetext = False
        if stripped and not in_comment and not stripped.startswith(("[", "%")):
            has_movetext = True
        for ch in raw_line:
            if in_comment:
                in_comment = ch != "}"
            elif ch == "{":
                in_comment = True
            elif ch == ";":
                break
        offset += len(raw_line)

    if pgn_text[start:].strip():
        chunks.append((start, pgn_text[start:]))
    return chunks


def _unescape(value: str) -> str:
    return value.replace('\\"', '"').replace("\\\\", "\\")


def tokenize(pgn_text: str, base_offset: int = 0) -> Iterator[Token]:
    """Yield tokens for *pgn_text*; comments and escape lines are dropped.

    Raises:
        ParseError: On an unterminated comment or a malformed tag pair.
    """
    idx = 0
    total = len(pgn_text)

    while idx < total:
        ch = pgn_text[idx]

        if ch.isspace():
            idx += 1
            continue

        if ch == "%" and (idx == 0 or pgn_text[idx - 1] == "\n"):
            end = pgn_text.find("\n", idx)
            idx = total if end < 0 else end
            continue

        if ch == "{":
            end = pgn_text.find("}", idx + 1)
            if end < 0:
                raise ParseError(base_offset + idx, "Unterminated comment")
            idx = end + 1
            continue

        if ch == ";":
            end = pgn_text.find("\n", idx)
            idx = total if end < 0 else end
            continue

        if ch == "[":
            match = _TAG_RE.match(pgn_text, idx)
            if match is None:
                raise ParseError(base_offset + idx, "Malformed tag pair")
            key, raw_value = match.groups()
            yield Token(TokenKind.TAG, key, base_offset + idx, _unescape(raw_value))
            idx = match.end()
            continue

        if ch == "]" or ch == "}":
            raise ParseError(base_offset + idx, f"Unexpected {ch!r}")

        if ch == "(":
            yield Token(TokenKind.OPEN_VARIATION, ch, base_offset + idx)
            idx += 1
            continue

        if ch == ")":
            yield Token(TokenKind.CLOSE_VARIATION, ch, base_offset + idx)
            idx += 1
            continue

        token_end = idx
        while (
            token_end < total
            and not pgn_text[token_end].isspace()
            and pgn_text[token_end] not in _TOKEN_STOP
        ):
            token_end += 1
        yield from _classify(pgn_text[idx:token_end], base_offset + idx)
        idx = token_end


def _classify(word: str, offset: int) -> Iterator[Token]:
    if word in _RESULT_TOKENS:
        yield Token(TokenKind.RESULT, word, offset)
        return

    if word.startswith("$") and word[1:].isdigit():
        yield Token(TokenKind.NAG, word, offset)
        return

    number = _MOVE_NUMBER_RE.match(word)
    if number is not None:
        yield Token(TokenKind.MOVE_NUMBER, number.group(0), offset)
        offset += number.end()
        word = word[number.end() :]
    else:
        # "... e5" style continuation markers
        stripped = word.lstrip(".")
        offset += len(word) - len(stripped)
        word = stripped

    san = _ANNOTATION_SUFFIX_RE.sub("", word)
    if san:
        yield Token(TokenKind.MOVE, san, offset)
