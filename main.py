#!/usr/bin/env python3
"""
Invoice Scan Normalizer - command line entry point
"""

import os
import sys
import json
import base64
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.errors import ScanError
from src.invoice_normalizer import normalize_ocr_result
from src.invoice_scanner import InvoiceScanner
from src.logging_config import setup_logging
from src.ocr_client import OcrClient, StubOcrClient
from src.product_matcher import CANDIDATE_LIMIT, prepare_candidates


logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent / 'config.json'

DEFAULT_CONFIG: Dict[str, Any] = {
    'ocr_url': '',
    'api_key': '',
    'analyze_path': '/api/analyze',
    'timeout': 60,
    'max_retries': 3,
    'candidate_limit': CANDIDATE_LIMIT,
    'blend_tokens': False,
    'log_path': None,
    'log_level': 'INFO',
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the JSON config over the defaults; OCR_API_KEY fills an empty api_key."""
    config = dict(DEFAULT_CONFIG)
    config_path = Path(path) if path else CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding='utf-8') as f:
            config.update(json.load(f))
    if not config.get('api_key'):
        config['api_key'] = os.environ.get('OCR_API_KEY', '')
    return config


def create_client(config: Dict[str, Any]):
    if not config.get('ocr_url'):
        logger.warning("No ocr_url configured, using stub OCR client")
        return StubOcrClient()
    return OcrClient(
        config['ocr_url'],
        api_key=config.get('api_key') or None,
        timeout=config.get('timeout', 60),
        analyze_path=config.get('analyze_path', '/api/analyze'),
        max_retries=config.get('max_retries', 3),
    )


def read_candidates(path: Optional[str], limit: int = CANDIDATE_LIMIT) -> List[str]:
    """One catalog name per line."""
    if not path:
        return []
    lines = Path(path).read_text(encoding='utf-8').splitlines()
    return prepare_candidates(lines, limit)


def cmd_normalize(args, config: Dict[str, Any]) -> int:
    with open(args.guess, encoding='utf-8') as f:
        guess = json.load(f)
    candidates = read_candidates(args.candidates, config['candidate_limit'])
    blend = args.blend_tokens or bool(config.get('blend_tokens'))
    invoice = normalize_ocr_result(guess, candidates, blend)
    print(json.dumps(invoice.to_dict(), ensure_ascii=False, indent=2))
    return 0


def cmd_scan(args, config: Dict[str, Any]) -> int:
    image = base64.b64encode(Path(args.image).read_bytes()).decode('ascii')
    candidates = read_candidates(args.candidates, config['candidate_limit'])
    scanner = InvoiceScanner(
        create_client(config),
        candidate_limit=config['candidate_limit'],
        blend_tokens=bool(config.get('blend_tokens')),
    )
    try:
        invoice = scanner.scan(image, args.mime_type, candidates)
    except ScanError as e:
        logger.error(f"Scan failed ({e.status_code}): {e}")
        return 1
    print(json.dumps(invoice.to_dict(), ensure_ascii=False, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='invoice-scan',
        description='Normalize AI-OCR invoice guesses against a product catalog',
    )
    parser.add_argument('--config', '-c', default=None, help='Path to config JSON')
    sub = parser.add_subparsers(dest='command')

    norm = sub.add_parser('normalize', help='Normalize a saved OCR guess (JSON)')
    norm.add_argument('guess', help='OCR guess JSON file')
    norm.add_argument('--candidates', default=None, help='Catalog names, one per line')
    norm.add_argument('--blend-tokens', action='store_true', help='Blend token overlap into name scores')

    scan = sub.add_parser('scan', help='Scan an invoice image through the OCR endpoint')
    scan.add_argument('image', help='Invoice photo')
    scan.add_argument('--candidates', default=None, help='Catalog names, one per line')
    scan.add_argument('--mime-type', default=None, help='Image MIME type (default image/jpeg)')

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)
    setup_logging(log_path=config.get('log_path'), level=config.get('log_level', 'INFO'))

    if args.command == 'normalize':
        return cmd_normalize(args, config)
    return cmd_scan(args, config)


if __name__ == '__main__':
    sys.exit(main())
