"""
Entry point for running HtmlQuill as a module.

Usage:
    python -m htmlquill convert page.html --format xml --output body.xml
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
