from __future__ import annotations

import logging
from typing import List, Optional
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup

from .models import RawEvent
from .utils import PARIS, normalize_date, normalize_datetime

DAY_CELL = ".PlanningCellMonth"
DAY_LABEL = ".JourInfo"
EVENT_BLOCK = ".UniteContainer"
EVENT_TIME = ".UniteTime"
EVENT_CLASSROOM = ".UniteSalle"
EVENT_NAME = ".UniteNom"
EVENT_TYPE = ".UniteType"
EVENT_TEACHER = ".UniteEnseignant"


class ParseError(Exception):
    pass


class MalformedEventMarkup(ParseError):
    """An expected element is missing inside a day-cell or event-block."""


def _extract_text(node) -> str:
    return node.get_text(" ", strip=True) if node else ""


def _require(parent, selector: str) -> str:
    node = parent.select_one(selector)
    if node is None:
        raise MalformedEventMarkup(f"Missing '{selector}' in planning markup")
    return _extract_text(node)


def _parse_event(block, day: str, tz: ZoneInfo) -> RawEvent:
    time_range = _require(block, EVENT_TIME)
    try:
        start = normalize_datetime(day, time_range, 0, tz)
        end = normalize_datetime(day, time_range, 1, tz)
    except ValueError as exc:
        raise ParseError(str(exc)) from exc
    return RawEvent(
        date=day,
        start=start,
        end=end,
        classroom=_require(block, EVENT_CLASSROOM),
        name=_require(block, EVENT_NAME),
        type=_require(block, EVENT_TYPE),
        teacher=_require(block, EVENT_TEACHER),
    )


def parse_planning_from_html(html: str, tz: ZoneInfo = PARIS) -> Optional[List[RawEvent]]:
    """
    Extract every session of the planning page in document order.

    Returns ``None`` when the page holds no day-cells at all, which means the
    browser did not land on the expected view.
    """
    soup = BeautifulSoup(html, "lxml")
    cells = soup.select(DAY_CELL)
    if not cells:
        logging.warning("Could not get day cells from planning page")
        return None

    events: List[RawEvent] = []
    for cell in cells:
        blocks = cell.select(EVENT_BLOCK)
        if not blocks:
            continue
        try:
            day = normalize_date(_require(cell, DAY_LABEL))
        except ValueError as exc:
            raise ParseError(str(exc)) from exc
        logging.debug("Day %s has %d event(s)", day, len(blocks))
        for block in blocks:
            events.append(_parse_event(block, day, tz))
    return events
