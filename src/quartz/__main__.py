#!/usr/bin/env python3
"""
Quartz CLI entry point.
Allows running with `python -m quartz`
"""

from .cli.main import main

if __name__ == "__main__":
    main()
