"""
Entry point for running mailframe as a module.

Usage:
    python -m mailframe export design.json --output out/
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
