"""Sweep a saved search-results page, removing listings Gemini marks as delete."""

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models import SessionLocal, init_db
from services.credential_store import get_credential_store
from services.sweep_pipeline import build_sweeper, sweep_html

logger = logging.getLogger(__name__)


def prompt_for_key() -> Optional[str]:
    if not sys.stdin.isatty():
        return None
    try:
        return getpass.getpass("Please enter your Gemini API key: ")
    except (EOFError, KeyboardInterrupt):
        return None


async def run(input_path: Path, output_path: Optional[Path]) -> int:
    html = input_path.read_text(encoding="utf-8")

    init_db()
    db = SessionLocal()
    try:
        sweeper = build_sweeper(get_credential_store(db), prompt_for_key=prompt_for_key)
        swept_html, result = await sweep_html(html, sweeper)
    finally:
        db.close()

    if output_path:
        output_path.write_text(swept_html, encoding="utf-8")
        logger.info(f"Wrote swept page to {output_path}")
    else:
        sys.stdout.write(swept_html)

    logger.info(
        f"Status: {result.status.value}, brands: {len(result.brands)}, removed listings: {len(result.removed)}"
    )
    return 0 if result.ok else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Remove search-result listings by brand with Gemini")
    parser.add_argument("input", type=Path, help="HTML file to sweep")
    parser.add_argument("-o", "--output", type=Path, help="Where to write the swept HTML (default: stdout)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every decision and raw response")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    sys.exit(asyncio.run(run(args.input, args.output)))


if __name__ == "__main__":
    main()
