"""
Entry point for running image_keeper as a module.

Usage:
    python -m image_keeper process rendered.docx --output final.docx
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
