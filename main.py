#!/usr/bin/env python3
"""countchain entry point.

Run with:
    python main.py "25m + 5m"
    python -m countchain "25m + 5m"
"""

from countchain.__main__ import main


if __name__ == "__main__":
    main()
