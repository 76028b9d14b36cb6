"""On-disk cookie persistence.

The robot's web server keys its session on a cookie; keeping it between
invocations lets each ``ftc-sync`` call reuse the same session. Cookies
are stored as a JSON list of ``{name, value, domain, path}`` objects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


class FileCookieStore:
    """Loads and saves an ``httpx.Cookies`` jar to a JSON file."""

    def __init__(self, path: Path | str = ".cookies") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> httpx.Cookies:
        """Read the stored cookies. A missing or empty file yields no cookies."""
        cookies = httpx.Cookies()
        if not self._path.exists():
            return cookies

        raw = self._path.read_text(encoding="utf-8").strip()
        if not raw:
            return cookies
        try:
            entries = json.loads(raw)
            for entry in entries:
                cookies.set(
                    entry["name"],
                    entry["value"],
                    domain=entry.get("domain", ""),
                    path=entry.get("path", "/"),
                )
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("Ignoring unreadable cookie file %s: %s", self._path, e)
            return httpx.Cookies()
        logger.debug("Loaded %d cookies from %s", len(entries), self._path)
        return cookies

    def save(self, cookies: httpx.Cookies) -> None:
        """Overwrite the file with the current contents of ``cookies``."""
        entries = [
            {
                "name": cookie.name,
                "value": cookie.value,
                "domain": cookie.domain,
                "path": cookie.path,
            }
            for cookie in cookies.jar
        ]
        self._path.write_text(json.dumps(entries, indent="\t") + "\n", encoding="utf-8")
        logger.debug("Saved %d cookies to %s", len(entries), self._path)
