from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Response
from fastapi.responses import FileResponse

from .config import Settings, get_settings
from .notifier import Notifier, build_notifier
from .pipeline import SyncService

CALENDAR_MEDIA_TYPE = "text/calendar"


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[SyncService] = None,
    notifier: Optional[Notifier] = None,
    run_sync: bool = True,
) -> FastAPI:
    """
    Application factory: serves the calendar feed and, when ``run_sync`` is
    set, runs the periodic sync loop in the same event loop.
    """
    settings = settings or get_settings()
    if notifier is None:
        notifier = service.notifier if service else build_notifier(settings.webhook_url)

    app = FastAPI(title="CNAM planning sync", version="0.1.0")

    @app.get("/calendar.ics", summary="Download the planning as an iCalendar file")
    async def calendar_feed(background_tasks: BackgroundTasks):
        path = Path(settings.calendar_path)
        if not path.exists():
            logging.warning("%s does not exist", path.name)
            background_tasks.add_task(notifier.notify, f"{path.name} does not exist")
            return Response(status_code=404, background=background_tasks)
        return FileResponse(path, media_type=CALENDAR_MEDIA_TYPE, filename="calendar.ics")

    if run_sync:

        @app.on_event("startup")
        async def start_sync() -> None:  # pragma: no cover
            sync_service = service or SyncService.from_settings(settings)
            app.state.sync_task = asyncio.create_task(sync_service.run_forever())
            logging.info("Server running at http://%s:%s/", settings.host, settings.port)

        @app.on_event("shutdown")
        async def stop_sync() -> None:  # pragma: no cover
            task = getattr(app.state, "sync_task", None)
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    return app
