from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIMEZONE = "Europe/Paris"
MODULE_LOOKUP_URL = "https://bedeo.cnam.fr/public/unite/view"


@dataclass
class Settings:
    planning_url: str
    discord_token: str
    discord_guild_id: str
    timezone: ZoneInfo
    webhook_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    calendar_path: str = "calendar.ics"
    modules_cache_path: str = "modules.cache"
    debug_html_path: str = "debug.html"
    module_lookup_url: str = MODULE_LOOKUP_URL
    sync_interval_minutes: int = 15
    max_discord_events: int = 49
    http_timeout_seconds: float = 10.0


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_timezone() -> ZoneInfo:
    tz_name = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logging.warning("Invalid TIMEZONE %s, falling back to %s", tz_name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def get_settings() -> Settings:
    settings = Settings(
        planning_url=os.getenv("PLANNING_URL", ""),
        discord_token=os.getenv("DISCORD_TOKEN", ""),
        discord_guild_id=os.getenv("DISCORD_GUILD_ID", ""),
        timezone=get_timezone(),
        webhook_url=os.getenv("WEBHOOK_URL") or None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        debug=_env_flag("DEBUG"),
        calendar_path=os.getenv("CALENDAR_PATH", "calendar.ics"),
        modules_cache_path=os.getenv("MODULES_CACHE_PATH", "modules.cache"),
        debug_html_path=os.getenv("DEBUG_HTML_PATH", "debug.html"),
        module_lookup_url=os.getenv("MODULE_LOOKUP_URL", MODULE_LOOKUP_URL),
        sync_interval_minutes=int(os.getenv("SYNC_INTERVAL_MINUTES", "15")),
        max_discord_events=int(os.getenv("MAX_DISCORD_EVENTS", "49")),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
    )
    if not settings.planning_url:
        logging.warning("PLANNING_URL is not set")
    if not settings.discord_token:
        logging.warning("DISCORD_TOKEN is not set")
    if not settings.discord_guild_id:
        logging.warning("DISCORD_GUILD_ID is not set")
    return settings
