"""Command-line entry point for translation key extraction.

Usage:
    extract-translations --input src/app --output src/assets/i18n/en.json
    extract-translations -i src -o i18n/en.json -o i18n/da.json --clean --sort
    extract-translations --config extract.yaml --verbose
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from translation_extract.compilers.factory import CatalogFormat
from translation_extract.template.errors import TemplateParseError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extract-translations",
        description="Extract translation keys from templates into JSON catalogs.",
    )
    parser.add_argument(
        "--input", "-i",
        action="extend",
        nargs="+",
        default=None,
        help="Source directories or files to scan.",
    )
    parser.add_argument(
        "--output", "-o",
        action="extend",
        nargs="+",
        default=None,
        help="Catalog file(s) to create or update.",
    )
    parser.add_argument(
        "--patterns", "-p",
        nargs="+",
        default=None,
        help="Glob patterns for source files (default: **/*.html **/*.ts).",
    )
    parser.add_argument(
        "--format", "-f",
        choices=[f.value for f in CatalogFormat],
        default=None,
        help="Catalog format (default: json).",
    )
    parser.add_argument(
        "--format-indentation", "--fi",
        dest="indentation",
        default=None,
        help="Indentation used in written catalogs (default: tab).",
    )
    parser.add_argument("--sort", "-s", action="store_true", default=None, help="Sort keys.")
    parser.add_argument(
        "--clean", "-c",
        action="store_true",
        default=None,
        help="Remove keys that are no longer found in any template.",
    )
    parser.add_argument(
        "--replace", "-r",
        action="store_true",
        default=None,
        help="Ignore existing catalog contents.",
    )
    parser.add_argument(
        "--marker", "-m",
        dest="marker_attributes",
        action="extend",
        nargs="+",
        default=None,
        help="Marker attribute name(s) (default: translate).",
    )
    parser.add_argument(
        "--pipe",
        dest="pipe_names",
        action="extend",
        nargs="+",
        default=None,
        help="Translate pipe name(s) (default: translate).",
    )
    parser.add_argument(
        "--string-as-default-value", "--d",
        dest="string_as_default_value",
        default=None,
        help="Value given to newly extracted keys.",
    )
    parser.add_argument("--config", default=None, help="YAML configuration file.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run extraction CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code: 0 on success, 1 if a template cannot be parsed,
                   2 on configuration or I/O errors.
    """
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {
        key: value
        for key, value in vars(args).items()
        if key not in ("config", "verbose") and value is not None
    }

    try:
        from translation_extract.config import ExtractorConfig, load_config
        from translation_extract.extractor import ExtractTask

        if args.config:
            config = load_config(args.config, **overrides)
        else:
            config = ExtractorConfig.model_validate(overrides)

        reports = ExtractTask(config).execute()

    except TemplateParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(json.dumps([report.model_dump() for report in reports], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
