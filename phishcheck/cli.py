"""Command-line front end for the PhishCheck detector.

Examples:
  phishcheck "http://192.168.1.1/login"
  phishcheck "https://paypal-security-alert.tk/" --json
  phishcheck "https://example.com" --config tables.json
"""

import argparse
import json
import logging
import sys

from phishcheck.app.config import DetectorConfig
from phishcheck.app.scanner import build_detector


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="phishcheck", description="Heuristic phishing risk scorer for URLs")
    parser.add_argument("urls", nargs="+", metavar="URL", help="absolute URL(s) to analyze")
    parser.add_argument("--json", action="store_true", dest="as_json", help="print one JSON object per URL")
    parser.add_argument("--config", help="JSON file with reference tables and thresholds")
    return parser.parse_args(argv)


def format_result(result: dict) -> str:
    lines = [
        f"URL:   {result['url']}",
        f"Risk:  {result['risk_level'].upper()} (score {result['risk_score']})",
    ]
    if result["flags"]:
        lines.append("Flags:")
        lines.extend(f"  - {flag}" for flag in result["flags"])
    else:
        lines.append("Flags: none")
    return "\n".join(lines)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.WARNING)
    args = parse_args(argv)

    config = DetectorConfig.from_env()
    if args.config:
        config = DetectorConfig.from_file(args.config, base=config)
    detector = build_detector(config)

    for i, url in enumerate(args.urls):
        result = detector.analyze(url).to_dict()
        if args.as_json:
            print(json.dumps(result, ensure_ascii=False))
            continue
        if i:
            print()
        print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
