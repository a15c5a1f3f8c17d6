"""Line extraction over chapter position trees."""

from openingtrainer.lines.extractor import (
    count_leaves,
    find_node,
    find_path_to_position,
    lines_for_player,
    lines_of,
    lines_of_chapters,
    main_line_ply,
    verify_line,
)

__all__ = [
    "count_leaves",
    "find_node",
    "find_path_to_position",
    "lines_for_player",
    "lines_of",
    "lines_of_chapters",
    "main_line_ply",
    "verify_line",
]
