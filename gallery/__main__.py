"""
Main entry point for running the package as a module.

Usage:
    python -m gallery serve
    python -m gallery list
    python -m gallery resolve photos/cat.jpg
    python -m gallery exif photos/cat.jpg
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
