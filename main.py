from __future__ import annotations

import argparse
import asyncio
import logging

import uvicorn

from cnam_sync.config import get_settings
from cnam_sync.pipeline import SyncService
from cnam_sync.server import create_app


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync the CNAM planning to an iCal feed and Discord events")
    parser.add_argument("--once", action="store_true", help="Run a single sync and exit instead of serving")
    parser.add_argument("--headful", action="store_true", help="Open the browser headful")
    parser.add_argument("--dry-run", action="store_true", help="Show Discord actions without applying them")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    settings = get_settings()
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.once:
        service = SyncService.from_settings(settings, headful=args.headful)
        report = asyncio.run(service.run_safely(dry_run=args.dry_run))
        if report is None:
            return 1
        logging.info("Done")
        return 0

    service = SyncService.from_settings(settings, headful=args.headful)
    app = create_app(settings, service=service)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
