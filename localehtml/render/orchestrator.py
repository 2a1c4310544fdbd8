"""
localehtml/render/orchestrator.py

Prerender an application chunk once per locale.

Each locale is an independent unit of work: a failure is recorded against
that locale only and never stops the others. Results are assembled in
resolution order once every locale has completed.
"""

from __future__ import annotations

import os
import re
import time
import asyncio
import inspect
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from localehtml.errors import RenderError
from localehtml.logger import get_logger, event

logger = get_logger("localehtml.render")

DEFAULT_MAX_WORKERS = int(os.getenv("LOCALEHTML_MAX_WORKERS", "4"))

SEPARATORS = re.compile(r"[\\/]")


def dash_locale(locale: str) -> str:
    """`en/US` -> `en-US`"""
    return SEPARATORS.sub("-", locale)


def localized_chunk_name(chunk: str, locale: str) -> str:
    """`main.js` -> `main.en-US.js`"""
    return re.sub(r"\.js$", "." + dash_locale(locale) + ".js", chunk)


@dataclass(frozen=True)
class RenderRequest:
    locale: str
    code: str
    file: str
    server: bool = False
    externals: Optional[Sequence[str]] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "locale": self.locale,
            "code": self.code,
            "file": self.file,
            "server": self.server,
            "externals": list(self.externals) if self.externals else None,
        }


@dataclass
class RenderStatus:
    """Outcome of one build's prerender pass."""
    content: Dict[str, str] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    errors: Dict[str, BaseException] = field(default_factory=dict)

    def succeeded(self, locale: str) -> bool:
        return locale in self.content and locale not in self.errors

    def record(self, locale: str, markup: Optional[str] = None, error: Optional[BaseException] = None):
        if error is not None:
            self.failed.append(locale)
            self.errors[locale] = error
        else:
            self.content[locale] = markup if markup is not None else ""

    def failure_message(self) -> Optional[str]:
        if not self.failed:
            return None
        return "Failed to prerender localized HTML for " + ", ".join(dash_locale(l) for l in self.failed)


def build_request(locale, chunk, source, server=False, externals=None) -> RenderRequest:
    return RenderRequest(
        locale=dash_locale(locale),
        code=source,
        file=localized_chunk_name(chunk, locale),
        server=server,
        externals=externals,
    )


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _render_fn(renderer) -> Callable[[RenderRequest], Any]:
    fn = getattr(renderer, "render", renderer)
    if not callable(fn):
        raise TypeError(f"renderer {renderer!r} is not callable and has no render()")
    return fn


def _checked(locale, markup):
    """Anything but a markup string fails that locale only."""
    if isinstance(markup, str):
        return markup, None
    if inspect.iscoroutine(markup):
        markup.close()
    error = RenderError(dash_locale(locale), f"renderer returned {type(markup).__name__}, not markup")
    logger.warning("Locale %s failed to prerender: %s", locale, error)
    return None, error


def _assemble(locales, outcomes) -> RenderStatus:
    status = RenderStatus()
    for loc in locales:
        markup, error = outcomes[loc]
        if error is None:
            markup, error = _checked(loc, markup)
        status.record(loc, markup, error)
    msg = status.failure_message()
    if msg:
        logger.error(msg)
        for loc in status.failed:
            logger.debug("Prerender cause for %s: %r", loc, status.errors[loc])
    return status


# ---------------------------------------------------------------------
# Threaded runner for synchronous renderers
# ---------------------------------------------------------------------
def render_locales(
    locales: Sequence[str],
    renderer,
    chunk: str,
    source: str,
    server: bool = False,
    externals: Optional[Sequence[str]] = None,
    max_workers: Optional[int] = None,
) -> RenderStatus:
    """
    Render `source` for every locale; returns a fresh RenderStatus.

    A coroutine renderer is driven through render_locales_async on a new
    event loop. Inside a running loop that is impossible, and each locale
    then fails with a RenderError.
    """
    fn = _render_fn(renderer)
    if inspect.iscoroutinefunction(fn) and not _loop_running():
        return asyncio.run(render_locales_async(locales, renderer, chunk, source, server, externals))
    locales = list(dict.fromkeys(locales))
    event(logger, "prerender-chunk", chunk=chunk, locales=locales)
    if not locales:
        return RenderStatus()

    t0 = time.time()
    outcomes = {}
    workers = max(1, min(max_workers or DEFAULT_MAX_WORKERS, len(locales)))
    logger.info("Prerendering %s for %d locales (workers=%d)", chunk, len(locales), workers)

    with ThreadPoolExecutor(max_workers=workers) as exe:
        futures = {}
        for loc in locales:
            req = build_request(loc, chunk, source, server, externals)
            event(logger, "prerender-localized", chunk=chunk, locale=req.locale)
            futures[exe.submit(fn, req)] = loc
        for fut in as_completed(futures):
            loc = futures[fut]
            try:
                outcomes[loc] = (fut.result(), None)
                logger.debug("Locale %s rendered", loc)
            except Exception as e:
                logger.warning("Locale %s failed to prerender: %s", loc, e)
                outcomes[loc] = (None, e)

    status = _assemble(locales, outcomes)
    logger.info("Prerendered %d/%d locales in %.2fs", len(status.content), len(locales), time.time() - t0)
    return status


# ---------------------------------------------------------------------
# Coroutine runner for awaitable renderers
# ---------------------------------------------------------------------
async def render_locales_async(
    locales: Sequence[str],
    renderer,
    chunk: str,
    source: str,
    server: bool = False,
    externals: Optional[Sequence[str]] = None,
) -> RenderStatus:
    """Same contract as render_locales for `async def render(request)` collaborators."""
    fn = _render_fn(renderer)
    locales = list(dict.fromkeys(locales))
    event(logger, "prerender-chunk", chunk=chunk, locales=locales)

    async def one(loc):
        req = build_request(loc, chunk, source, server, externals)
        event(logger, "prerender-localized", chunk=chunk, locale=req.locale)
        return await fn(req)

    results = await asyncio.gather(*(one(loc) for loc in locales), return_exceptions=True)
    outcomes = {}
    for loc, res in zip(locales, results):
        # cancellation and interpreter exits are not render failures
        if isinstance(res, BaseException) and not isinstance(res, Exception):
            raise res
        if isinstance(res, Exception):
            logger.warning("Locale %s failed to prerender: %s", loc, res)
            outcomes[loc] = (None, res)
        else:
            outcomes[loc] = (res, None)
    return _assemble(locales, outcomes)
