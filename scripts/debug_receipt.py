"""
Debug script: run extraction on a receipt text file and print the result.

Usage:
    python scripts/debug_receipt.py receipt.txt --language fr --reference-date 2024-03-20
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from receipt_extraction.config import settings
from receipt_extraction.exceptions import ExtractionRejectedError
from receipt_extraction.models.options import ExtractionOptions
from receipt_extraction.services.extractor import ReceiptExtractor


def main() -> int:
    parser_args = argparse.ArgumentParser(
        description='Extract structured data from OCR receipt text'
    )
    parser_args.add_argument('path', type=Path, help='Text file with OCR output')
    parser_args.add_argument(
        '--language', '-l', choices=['fr', 'en', 'auto'], default=settings.DEFAULT_LANGUAGE,
        help='Receipt language (default: %(default)s)'
    )
    parser_args.add_argument(
        '--strict', '-s', action='store_true', default=settings.STRICT_VALIDATION,
        help='Reject inconsistent results instead of returning defaults'
    )
    parser_args.add_argument(
        '--reference-date', type=date.fromisoformat,
        help='Date treated as "today" (YYYY-MM-DD)'
    )
    args = parser_args.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL)

    if not args.path.exists():
        print(f"Error: file not found: {args.path}")
        return 1

    text = args.path.read_text(encoding='utf-8')
    options = ExtractionOptions(
        language=args.language,
        strict_validation=args.strict,
        reference_date=args.reference_date,
    )

    print("=" * 60)
    print(f"Receipt: {args.path.name}")
    print("=" * 60)

    try:
        result = ReceiptExtractor(settings).extract(text, options)
    except ExtractionRejectedError as e:
        print(f"\nREJECTED: {e.message}")
        print(e.to_dict())
        return 2

    print(result.model_dump_json(indent=2))
    print(f"\nSummary: {result.summary}")
    print(f"Confidence: {result.confidence}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
