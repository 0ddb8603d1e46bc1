"""Export the built-in catalog as a JSON catalog document.

The output is a starting point for a ``CS_CATALOG_PATH`` override file:
edit the sections to change and delete the ones to keep built in.

Usage:
    python scripts/export_catalog.py --output catalog.json
"""

import argparse
from pathlib import Path

from dialogue.catalog_loader import builtin_document, dump_catalog


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for catalog export."""
    parser = argparse.ArgumentParser(description="Export the built-in catalog")
    parser.add_argument("--output", type=str, default="", help="Output file (stdout when omitted)")
    return parser.parse_args()


def main() -> None:
    """Write the built-in catalog document."""
    args = parse_args()
    text = dump_catalog(builtin_document())
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


if __name__ == "__main__":
    main()
