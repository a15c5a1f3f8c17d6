"""Line derivation and lookups over a chapter's position tree.

All traversals use an explicit stack so deep repertoires never hit the
interpreter recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterable

from openingtrainer.core import rules
from openingtrainer.core.errors import LineIntegrityError
from openingtrainer.core.fen import fen_key
from openingtrainer.core.models import Chapter, Line, Move, Position, PositionNode
from openingtrainer.core.rules import MoveApplier


def lines_of(chapter: Chapter) -> list[Line]:
    """Return every root-to-leaf line of *chapter*, main line first.

    Children are visited in stored order, so the output is deterministic. A
    tree without moves yields no lines.
    """
    root = chapter.position_tree
    if root.is_leaf:
        return []

    lines: list[Line] = []
    stack: list[tuple[PositionNode, tuple[Position, ...]]] = [
        (root, (root.position,))
    ]
    while stack:
        node, path = stack.pop()
        if node.is_leaf:
            lines.append(Line(chapter=chapter, positions=path))
            continue
        # Reversed so the first child is popped first.
        for child in reversed(node.children):
            stack.append((child, (*path, child.position)))
    return lines


def lines_for_player(chapter: Chapter) -> list[Line]:
    """Lines to drill from the side of ``chapter.orientation``.

    Where the player is to move only the main-line reply is followed; every
    opponent alternative is kept. Each line is cut back so it ends on the
    player's own move. Lines that become empty, or identical to an earlier
    one after the cut, are dropped.
    """
    player = chapter.orientation
    root = chapter.position_tree
    lines: list[Line] = []
    seen: set[str] = set()
    stack: list[tuple[PositionNode, tuple[Position, ...]]] = [
        (root, (root.position,))
    ]
    while stack:
        node, path = stack.pop()
        if not node.is_leaf:
            children = node.children
            if node.position.turn == player:
                children = children[:1]
            for child in reversed(children):
                stack.append((child, (*path, child.position)))
            continue
        last_move = path[-1].last_move
        if last_move is not None and last_move.color != player:
            path = path[:-1]
        if len(path) < 2:
            continue
        line = Line(chapter=chapter, positions=path)
        if line.line_id not in seen:
            seen.add(line.line_id)
            lines.append(line)
    return lines


def lines_of_chapters(chapters: Iterable[Chapter]) -> list[Line]:
    """Concatenate :func:`lines_of` over *chapters* in order."""
    return [line for chapter in chapters for line in lines_of(chapter)]


def count_leaves(tree: PositionNode) -> int:
    """Number of leaves below the root (a root-only tree counts zero)."""
    if tree.is_leaf:
        return 0
    count = 0
    stack = list(tree.children)
    while stack:
        node = stack.pop()
        if node.is_leaf:
            count += 1
        else:
            stack.extend(node.children)
    return count


def _search(
    tree: PositionNode, fen: str
) -> tuple[PositionNode, tuple[Move, ...]] | None:
    target = fen_key(fen)
    stack: list[tuple[PositionNode, tuple[Move, ...]]] = [(tree, ())]
    while stack:
        node, moves = stack.pop()
        if fen_key(node.position.fen) == target:
            return node, moves
        for child in reversed(node.children):
            assert child.position.last_move is not None
            stack.append((child, (*moves, child.position.last_move)))
    return None


def find_node(tree: PositionNode, target: Position | str) -> PositionNode | None:
    """First node (depth-first, main line first) whose position matches *target*."""
    fen = target.fen if isinstance(target, Position) else target
    found = _search(tree, fen)
    return None if found is None else found[0]


def find_path_to_position(
    chapter: Chapter, target: Position | str
) -> tuple[Move, ...] | None:
    """Moves leading from the chapter root to the first node matching *target*.

    Move counters in the FEN are ignored when matching. Returns ``None`` when
    no node matches and ``()`` when the root itself matches.
    """
    fen = target.fen if isinstance(target, Position) else target
    found = _search(chapter.position_tree, fen)
    return None if found is None else found[1]


def main_line_ply(chapter: Chapter, target: Position | str) -> int | None:
    """Ply count of the path to *target*, or ``None`` when it is not in the tree."""
    path = find_path_to_position(chapter, target)
    return None if path is None else len(path)


def verify_line(line: Line, *, apply_move: MoveApplier | None = None) -> None:
    """Replay *line* from its chapter root and check it reaches the leaf.

    Raises:
        LineIntegrityError: The replay ends elsewhere or a move is rejected.
    """
    apply = apply_move or rules.apply_move
    try:
        final = rules.replay(line.chapter.root, line.moves, apply)
    except ValueError as exc:
        raise LineIntegrityError(
            f"Line {line.line_id!r} does not replay: {exc}"
        ) from exc
    if final.fen != line.leaf_fen:
        raise LineIntegrityError(
            f"Line {line.line_id!r} replays to {final.fen!r}, "
            f"expected {line.leaf_fen!r}"
        )
