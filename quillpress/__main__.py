"""
Entry point for running quillpress as a module.

Usage:
    python -m quillpress convert input.xlsx --output output.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main() or 0)
