from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional
from zoneinfo import ZoneInfo

from .models import RawEvent
from .parser import ParseError, parse_planning_from_html

HtmlFetcher = Callable[[], Awaitable[str]]


async def fetch_planning(
    fetch_html: HtmlFetcher,
    tz: ZoneInfo,
    debug_html_path: Optional[str | Path] = None,
) -> Optional[List[RawEvent]]:
    logging.info("Fetching planning page")
    html = await fetch_html()

    if debug_html_path:
        artifact_path = Path(debug_html_path)
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        artifact_path.write_text(html, encoding="utf-8")
        logging.debug("Saved planning page to %s", artifact_path)

    logging.info("Got planning data, parsing.")
    try:
        events = await asyncio.to_thread(parse_planning_from_html, html, tz)
    except ParseError as exc:
        logging.error("Failed to parse planning page: %s", exc)
        raise

    if events is not None:
        logging.info("Parsed %d event(s)", len(events))
    return events
