"""Module entrypoint for ``python -m openingtrainer``."""

from __future__ import annotations

from openingtrainer.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
