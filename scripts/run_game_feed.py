"""
Run the game feed pipeline from CLI.
"""

from __future__ import annotations

from gamefeed.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
