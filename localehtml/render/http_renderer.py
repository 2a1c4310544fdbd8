"""
localehtml/render/http_renderer.py
Render collaborators backed by a remote prerender service.

The service receives the RenderRequest payload as JSON and answers with the
rendered markup as the response body. Any transport error or non-2xx answer
raises RenderError for that locale only.
"""

from __future__ import annotations

import os
from typing import Optional

import aiohttp
import requests
from aiohttp import ClientTimeout

from localehtml.errors import RenderError
from localehtml.logger import TRACE, get_logger
from localehtml.render.orchestrator import RenderRequest

logger = get_logger("localehtml.render.http")

RENDER_URL = os.getenv("LOCALEHTML_RENDER_URL", "http://127.0.0.1:8181/render")
RENDER_TIMEOUT = int(os.getenv("LOCALEHTML_RENDER_TIMEOUT", "30"))  # seconds

HEADERS = {
    "Accept": "text/html,*/*;q=0.8",
    "Content-Type": "application/json",
}


class HttpRenderer:
    """Blocking renderer; safe to share across the orchestrator's threads."""

    def __init__(self, url: str = RENDER_URL, timeout: int = RENDER_TIMEOUT, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def render(self, request: RenderRequest) -> str:
        try:
            r = self.session.post(self.url, json=request.to_payload(), headers=HEADERS, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise RenderError(request.locale, f"timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise RenderError(request.locale, str(e)) from e

        if not 200 <= r.status_code < 300:
            raise RenderError(request.locale, f"HTTP {r.status_code}: {(r.text or '')[:200]}")
        logger.log(TRACE, "Rendered %s via %s (%d chars)", request.locale, self.url, len(r.text))
        return r.text

    def close(self):
        self.session.close()


class AsyncHttpRenderer:
    """
    Awaitable renderer for render_locales_async.

    Reuses `session` when given; otherwise opens one lazily and closes it in
    close().
    """

    def __init__(self, url: str = RENDER_URL, timeout: int = RENDER_TIMEOUT, session: Optional[aiohttp.ClientSession] = None):
        self.url = url
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=HEADERS)
        return self._session

    async def render(self, request: RenderRequest) -> str:
        session = await self._get_session()
        try:
            async with session.post(self.url, json=request.to_payload(), timeout=ClientTimeout(total=self.timeout)) as resp:
                text = await resp.text(errors="ignore")
                if not 200 <= resp.status < 300:
                    raise RenderError(request.locale, f"HTTP {resp.status}: {text[:200]}")
                return text
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(request.locale, str(e) or type(e).__name__) from e

    async def close(self):
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()
