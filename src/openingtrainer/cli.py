"""Command line entrypoint: inspect a repertoire, review lines, compare games."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from openingtrainer.core.enums import Color
from openingtrainer.core.errors import NoLinesAvailable, ParseError
from openingtrainer.core.models import Chapter
from openingtrainer.games import (
    build_game_tree,
    compare_to_repertoire,
    played_games_from_pgn,
)
from openingtrainer.lines import count_leaves, lines_of, lines_of_chapters
from openingtrainer.notation import parse_pgn
from openingtrainer.review import AttemptHistory, ReviewScheduler
from openingtrainer.storage import TrainerStore

PrintFn = Callable[[str], None]

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_LINES = 1
EXIT_BAD_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openingtrainer", description="Opening repertoire trainer"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    chapters = commands.add_parser("chapters", help="list chapters of a PGN file")
    chapters.add_argument("pgn", type=Path)

    lines = commands.add_parser("lines", help="list every line of a PGN file")
    lines.add_argument("pgn", type=Path)
    lines.add_argument(
        "--chapter", action="append", default=[], help="only this chapter (repeatable)"
    )

    next_line = commands.add_parser("next", help="show the next line to review")
    next_line.add_argument("pgn", type=Path)
    next_line.add_argument("--db", type=Path, help="attempt history database")
    next_line.add_argument("--seed", type=int, help="random seed")
    next_line.add_argument(
        "--chapter", action="append", default=[], help="only this chapter (repeatable)"
    )

    compare = commands.add_parser(
        "compare", help="show where played games leave the repertoire"
    )
    compare.add_argument("pgn", type=Path)
    compare.add_argument("games", type=Path, help="PGN file of played games")
    compare.add_argument("--player", required=True, help="player name in the games")
    compare.add_argument(
        "--color",
        choices=("white", "black"),
        help="side to compare (default: orientation of the first chapter)",
    )
    return parser


def _load_chapters(path: Path) -> list[Chapter]:
    _LOGGER.debug("Reading %s", path)
    return parse_pgn(path.read_text(encoding="utf-8"))


def _chapters_command(chapters: list[Chapter], print_fn: PrintFn) -> int:
    for chapter in chapters:
        study = chapter.study_name or "-"
        name = chapter.name or "-"
        count = count_leaves(chapter.position_tree)
        print_fn(f"{chapter.index + 1:>3}  {study}  {name}  ({count} lines)")
    return EXIT_OK


def _lines_command(
    chapters: list[Chapter], selected: list[str], print_fn: PrintFn
) -> int:
    for chapter in chapters:
        if selected and chapter.name not in selected:
            continue
        for line in lines_of(chapter):
            print_fn(f"[{chapter.name}] {line.movetext()}")
    return EXIT_OK


def _next_command(
    chapters: list[Chapter],
    selected: list[str],
    db_path: Path | None,
    seed: int | None,
    print_fn: PrintFn,
) -> int:
    store = TrainerStore(db_path) if db_path is not None else None
    try:
        history = store.load_history() if store is not None else AttemptHistory()
        scheduler = ReviewScheduler(history, seed=seed)
        line = scheduler.next_line(lines_of_chapters(chapters), selected)
    finally:
        if store is not None:
            store.close()
    print_fn(f"[{line.chapter_name}] {line.movetext()}")
    return EXIT_OK


def _compare_command(
    chapters: list[Chapter],
    games_text: str,
    player: str,
    color_name: str | None,
    print_fn: PrintFn,
) -> int:
    if color_name is not None:
        color = Color.WHITE if color_name == "white" else Color.BLACK
    else:
        color = chapters[0].orientation if chapters else Color.WHITE
    games = [g for g in played_games_from_pgn(games_text, player) if g.color is color]
    result = compare_to_repertoire(
        build_game_tree(games), (c.position_tree for c in chapters), color
    )
    summary = result.summary
    print_fn(
        f"{summary.total_games} games, {summary.games_with_deviations} left the repertoire"
    )
    for deviation in result.deviations:
        expected = ", ".join(m.san for m in deviation.expected_moves)
        print_fn(
            f"{deviation.ply:>3}  {deviation.deviated_by}  {deviation.played_move.san}"
            f"  expected {expected}  ({deviation.occurrences} games)"
        )
    return EXIT_OK


def _print_error(message: str) -> None:
    print(message, file=sys.stderr)


def run(
    argv: list[str] | None = None,
    print_fn: PrintFn = print,
    error_fn: PrintFn = _print_error,
) -> int:
    """Run the CLI and return its exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        chapters = _load_chapters(args.pgn)
    except OSError as exc:
        error_fn(f"Cannot read {args.pgn}: {exc}")
        return EXIT_BAD_INPUT
    except ParseError as exc:
        error_fn(f"Invalid PGN in {args.pgn}: {exc}")
        return EXIT_BAD_INPUT
    except UnicodeDecodeError as exc:
        error_fn(f"Cannot decode {args.pgn} as UTF-8: {exc}")
        return EXIT_BAD_INPUT

    if args.command == "chapters":
        return _chapters_command(chapters, print_fn)
    if args.command == "lines":
        return _lines_command(chapters, args.chapter, print_fn)
    if args.command == "compare":
        try:
            games_text = args.games.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            error_fn(f"Cannot read {args.games}: {exc}")
            return EXIT_BAD_INPUT
        return _compare_command(
            chapters, games_text, args.player, args.color, print_fn
        )
    try:
        return _next_command(chapters, args.chapter, args.db, args.seed, print_fn)
    except NoLinesAvailable as exc:
        error_fn(str(exc))
        return EXIT_NO_LINES


def main() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
