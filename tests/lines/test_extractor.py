"""Tests for line derivation and position lookups."""

from __future__ import annotations

import pytest

from openingtrainer.core import LineIntegrityError, Position, apply_move
from openingtrainer.core.models import Chapter, Line
from openingtrainer.lines import (
    count_leaves,
    find_node,
    find_path_to_position,
    lines_for_player,
    lines_of,
    lines_of_chapters,
    main_line_ply,
    verify_line,
)
from openingtrainer.notation import parse_pgn


class TestLinesOf:
    def test_main_line_first(self, sicilian_lines: list[Line]) -> None:
        assert [line.sans for line in sicilian_lines] == [
            ("e4", "c5", "Nf3", "d6", "d4", "cxd4"),
            ("e4", "c5", "c3", "d5"),
        ]

    def test_every_line_replays_to_its_leaf(self, all_lines: list[Line]) -> None:
        for line in all_lines:
            verify_line(line)

    def test_one_line_per_leaf(self, two_chapters: list[Chapter]) -> None:
        for chapter in two_chapters:
            assert len(lines_of(chapter)) == count_leaves(chapter.position_tree)

    def test_deterministic(self, sicilian: Chapter) -> None:
        assert [l.line_id for l in lines_of(sicilian)] == [
            l.line_id for l in lines_of(sicilian)
        ]

    def test_line_ids_survive_reparse(self, sicilian: Chapter) -> None:
        reparsed = parse_pgn(
            '[Event "Repertoire: Sicilian"]\n\n1. e4 c5 2. Nf3 (2. c3 d5) d6 3. d4 cxd4 *'
        )[0]
        assert [l.line_id for l in lines_of(reparsed)] == [
            l.line_id for l in lines_of(sicilian)
        ]

    def test_root_only_chapter(self) -> None:
        (chapter,) = parse_pgn('[Event "Empty"]\n\n*')
        assert lines_of(chapter) == []
        assert count_leaves(chapter.position_tree) == 0

    def test_lines_of_chapters_keeps_chapter_order(self, all_lines: list[Line]) -> None:
        assert [line.chapter_name for line in all_lines] == [
            "Open Games",
            "Open Games",
            "Queen's Gambit",
        ]

    def test_lines_of_chapters_empty(self) -> None:
        assert lines_of_chapters([]) == []

    def test_deep_tree_does_not_recurse(self) -> None:
        moves = " ".join(["Nf3 Nf6 Ng1 Ng8"] * 300)
        (chapter,) = parse_pgn(f"{moves} *")
        (line,) = lines_of(chapter)
        assert len(line) == 1200


class TestFindPath:
    def test_finds_position_in_variation(self, sicilian: Chapter) -> None:
        target = sicilian.position_tree
        for san in ("e4", "c5", "c3"):
            child = target.child_for(san)
            assert child is not None
            target = child
        path = find_path_to_position(sicilian, target.position)
        assert path is not None
        assert [m.san for m in path] == ["e4", "c5", "c3"]

    def test_root_matches_with_empty_path(self, sicilian: Chapter) -> None:
        assert find_path_to_position(sicilian, sicilian.root) == ()
        assert main_line_ply(sicilian, sicilian.root) == 0

    def test_missing_position(self, sicilian: Chapter) -> None:
        d4 = apply_move(Position.initial(), "d4")
        assert find_path_to_position(sicilian, d4) is None
        assert find_node(sicilian.position_tree, d4) is None
        assert main_line_ply(sicilian, d4.fen) is None

    def test_move_counters_ignored(self, sicilian: Chapter) -> None:
        after_e4 = sicilian.position_tree.children[0].position
        fields = after_e4.fen.split()
        fields[4:] = ["7", "42"]
        path = find_path_to_position(sicilian, " ".join(fields))
        assert path is not None
        assert [m.san for m in path] == ["e4"]

    def test_find_node(self, sicilian: Chapter) -> None:
        e4 = sicilian.position_tree.children[0]
        assert find_node(sicilian.position_tree, e4.position) is e4


class TestVerifyLine:
    def test_corrupted_line_raises(self, sicilian_lines: list[Line]) -> None:
        line = sicilian_lines[0]
        bogus = Line(
            chapter=line.chapter,
            positions=(*line.positions[:-1], line.positions[1]),
        )
        with pytest.raises(LineIntegrityError):
            verify_line(bogus)


_PLAYER_PGN = (
    "1. e4 (1. d4 d5) 1... e5 2. Nf3 Nc6 (2... d6 3. d4) 3. Bb5 (3. Bc4) 3... a6 *"
)


class TestLinesForPlayer:
    def test_white_follows_main_move_and_ends_on_own_move(self) -> None:
        (chapter,) = parse_pgn(f'[Orientation "white"]\n\n{_PLAYER_PGN}')
        assert [line.sans for line in lines_for_player(chapter)] == [
            ("e4", "e5", "Nf3", "Nc6", "Bb5"),
            ("e4", "e5", "Nf3", "d6", "d4"),
        ]

    def test_black_keeps_every_opponent_move(self) -> None:
        (chapter,) = parse_pgn(f'[Orientation "black"]\n\n{_PLAYER_PGN}')
        assert [line.sans for line in lines_for_player(chapter)] == [
            ("e4", "e5", "Nf3", "Nc6", "Bb5", "a6"),
            ("e4", "e5", "Nf3", "Nc6"),
            ("d4", "d5"),
        ]

    def test_trimmed_duplicates_are_dropped(self) -> None:
        (chapter,) = parse_pgn("1. e4 e5 (1... c5) (1... e6) *")
        assert [line.sans for line in lines_for_player(chapter)] == [("e4",)]

    def test_only_opponent_moves_gives_nothing(self) -> None:
        (chapter,) = parse_pgn('[Orientation "black"]\n\n1. e4 *')
        assert lines_for_player(chapter) == []

    def test_lines_replay(self, sicilian: Chapter) -> None:
        lines = lines_for_player(sicilian)
        assert [line.sans for line in lines] == [line.sans for line in lines_of(sicilian)]
        for line in lines:
            verify_line(line)
