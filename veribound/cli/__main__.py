"""
VeriBound CLI entry point.

Usage:
    python -m veribound.cli verify <sealed.json>
    python -m veribound.cli verify basel <input.json>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
