"""CLI tool for translation key extraction.

Usage:
    python3 scripts/extract_translations.py --input src/app --output src/assets/i18n/en.json
    python3 scripts/extract_translations.py --config extract.yaml --clean --sort
"""

from __future__ import annotations

import sys

from translation_extract.cli import main

if __name__ == "__main__":
    sys.exit(main())
