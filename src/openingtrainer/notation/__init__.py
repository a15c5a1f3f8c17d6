"""Notation package: PGN tokenizing and parsing into chapters."""

from openingtrainer.notation.pgn import PgnParser, parse_pgn, parse_pgn_lenient
from openingtrainer.notation.tokenizer import Token, TokenKind, split_games, tokenize

__all__ = [
    "PgnParser",
    "Token",
    "TokenKind",
    "parse_pgn",
    "parse_pgn_lenient",
    "split_games",
    "tokenize",
]
