"""Allow ``python -m btshow``."""

from __future__ import annotations

from btshow.cli.main import main

if __name__ == "__main__":
    main()
