from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

import httpx
from bs4 import BeautifulSoup

from .config import MODULE_LOOKUP_URL

NUMERIC_SUFFIX = re.compile(r" [0-9]")


class KeyValueStore(Protocol):
    def load(self) -> Dict[str, str]: ...

    def save(self, data: Dict[str, str]) -> None: ...


class JsonFileStore:
    """Whole-file JSON store, rewritten on every save."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            logging.warning("Ignoring unreadable module cache %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logging.warning("Ignoring module cache %s: not a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


class ModuleCache:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._names = store.load()

    def __contains__(self, code: str) -> bool:
        return code in self._names

    def __len__(self) -> int:
        return len(self._names)

    def get(self, code: str) -> Optional[str]:
        return self._names.get(code)

    def set(self, code: str, name: str) -> None:
        self._names[code] = name
        self._store.save(self._names)


def clean_module_name(text: str) -> str:
    return NUMERIC_SUFFIX.sub("", text).replace("&#039;", "'").strip()


class ModuleNameResolver:
    def __init__(
        self,
        cache: ModuleCache,
        base_url: str = MODULE_LOOKUP_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def lookup_url(self, code: str) -> str:
        return f"{self._base_url}/{code}"

    async def _lookup(self, code: str) -> Optional[str]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.get(self.lookup_url(code))
        except httpx.HTTPError as exc:
            logging.warning("Module lookup for %s failed: %s", code, exc)
            return None

        if resp.status_code != 200:
            logging.warning("Cannot get module name (status=%s). Defaulting to %s", resp.status_code, code)
            return None

        lead = BeautifulSoup(resp.text, "lxml").select_one(".lead")
        if lead is None:
            logging.warning("No module name found for %s. Defaulting to %s", code, code)
            return None
        return clean_module_name(lead.get_text(" ", strip=True))

    async def resolve(self, code: str) -> str:
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        logging.info("Module %s unknown. Fetching.", code)
        fullname = await self._lookup(code)
        if not fullname:
            return code

        logging.info("Module %s is %s", code, fullname)
        self._cache.set(code, fullname)
        return fullname
