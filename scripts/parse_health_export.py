"""
Parse a health-app JSON export from disk and report what it would import.

Usage:
    python scripts/parse_health_export.py export.json
    python scripts/parse_health_export.py export.json --json > batches.json
    python scripts/parse_health_export.py export.json --now-ms 1739836800000

Prints a per-metric summary by default, or the full result (the same shape
the import API returns) with --json. Exits 1 with the reason when the export
cannot be imported.
"""
from __future__ import annotations

import argparse
import json
import os
import sys

# Allow running from a checkout without installing the package.
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.logging import setup_logging  # noqa: E402
from services.health_import import HealthImportError, load_export_text, parse_export_payload  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Normalize a health-app JSON export into stream batches.")
    parser.add_argument("path", help="Path to the exported JSON (or text) file")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument(
        "--now-ms",
        type=int,
        default=None,
        help="Epoch ms stamped on records without a timestamp (default: current time)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_format="text", stream=sys.stderr)

    try:
        text = load_export_text(args.path)
        result = parse_export_payload(text, now_ms=args.now_ms)
    except FileNotFoundError:
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1
    except UnicodeDecodeError:
        print(f"Import file must be UTF-8 text: {args.path}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Cannot read {args.path}: {e.strerror or e}", file=sys.stderr)
        return 1
    except HealthImportError as e:
        print(e.message, file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(result.summary())
    window = result.import_window()
    if window:
        print(f"- window: {window[0]} -> {window[1]}")
    for batch in result.batches:
        print(f"  - {batch.metric}: {len(batch.samples)} sample(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
