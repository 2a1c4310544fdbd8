# localehtml/pipeline.py
"""
localehtml build pipeline.

    resolve locales -> prerender per locale -> compose startup scripts
      -> isomorphic template -> locate root -> emit index.<locale>.html
      -> standard template (index.html fallback)

One LocaleHtmlBuilder serves exactly one build. Errors are collected in
`errors` and never escape build(); only a missing root div blocks the
localized documents, and even then the fallback is still produced.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence

from localehtml.emitter import EmittedDocument, emit_localized_documents
from localehtml.errors import RootNotFoundError
from localehtml.locales.constants import DEFAULT_TARGET
from localehtml.locales.loader import resolve_locales
from localehtml.logger import get_logger, phase, event
from localehtml.metadata import localized_appinfo, localized_meta_list
from localehtml.render.orchestrator import RenderStatus, render_locales, render_locales_async
from localehtml.startup import (
    StartupVariant,
    compose_startup,
    load_startup_template,
    unresolved_placeholders,
)
from localehtml.template.root_locator import locate_root

logger = get_logger("localehtml.pipeline")

DEFAULT_OPTIONS = {
    "chunk": "main.js",
    "locales": DEFAULT_TARGET,
    "server": False,
    "externals": None,
    "screen_types": None,
    "max_workers": None,
}


class OutputMode(Enum):
    """Where assets end up; prerendering needs a real file system build."""
    FILESYSTEM = "filesystem"
    VIRTUAL = "virtual"


# ---------------------------------------------------------------------
# Templating collaborator
# ---------------------------------------------------------------------
class TemplateEngine(Protocol):
    def post_process(self, html: str, head_tags: Sequence[Dict[str, Any]]) -> str: ...


def script_tag(inner_html: str) -> Dict[str, Any]:
    return {
        "tagName": "script",
        "closeTag": True,
        "attributes": {"type": "text/javascript"},
        "innerHTML": inner_html,
    }


def render_tag(tag: Dict[str, Any]) -> str:
    attrs = "".join(f' {k}="{v}"' for k, v in (tag.get("attributes") or {}).items())
    html = f"<{tag['tagName']}{attrs}>{tag.get('innerHTML', '')}"
    if tag.get("closeTag", True):
        html += f"</{tag['tagName']}>"
    return html


class SimpleTemplateEngine:
    """Injects head tags right before </head>, or at the very top without one."""

    HEAD_CLOSE = re.compile(r"</head>", re.I)

    def post_process(self, html: str, head_tags: Sequence[Dict[str, Any]]) -> str:
        tags = "".join(render_tag(t) for t in head_tags)
        m = self.HEAD_CLOSE.search(html)
        if not m:
            return tags + html
        return html[:m.start()] + tags + html[m.start():]


# ---------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------
@dataclass
class BuildResult:
    locales: List[str]
    status: RenderStatus
    documents: List[EmittedDocument] = field(default_factory=list)
    fallback_html: str = ""
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class LocaleHtmlBuilder:
    def __init__(self, options: Optional[Dict[str, Any]] = None, context: str = ".",
                 output_mode: OutputMode = OutputMode.FILESYSTEM):
        # unset options fall back to defaults; an explicit "" still means no locales
        self.options = dict(DEFAULT_OPTIONS)
        self.options.update({k: v for k, v in (options or {}).items() if v is not None})
        self.context = context
        self.output_mode = output_mode
        self.errors: List[str] = []
        self.status = RenderStatus()
        self.documents: List[EmittedDocument] = []

        phase(logger, "resolve locales")
        # "en,en" renders and emits en once
        self.locales = list(dict.fromkeys(resolve_locales(context, self.options["locales"])))
        logger.info("Target locales (%d): %s", len(self.locales), ", ".join(self.locales) or "-")

        self._iso_template = load_startup_template(StartupVariant.ISOMORPHIC)
        self._std_template = load_startup_template(StartupVariant.STANDARD)
        self.iso_startup: Optional[str] = None
        self.std_startup: Optional[str] = None

    @property
    def prerendering(self) -> bool:
        return self.output_mode is OutputMode.FILESYSTEM

    # -- prerender ----------------------------------------------------
    def _after_prerender(self, status: RenderStatus) -> RenderStatus:
        self.status = status
        msg = status.failure_message()
        if msg:
            self.errors.append("localehtml: " + msg)
        return status

    def prerender(self, source: str, renderer) -> RenderStatus:
        if not self.prerendering:
            logger.info("Output mode %s: prerendering skipped", self.output_mode.value)
            return self.status
        phase(logger, "prerender")
        return self._after_prerender(render_locales(
            self.locales, renderer, self.options["chunk"], source,
            server=self.options["server"], externals=self.options["externals"],
            max_workers=self.options["max_workers"],
        ))

    async def prerender_async(self, source: str, renderer) -> RenderStatus:
        if not self.prerendering:
            logger.info("Output mode %s: prerendering skipped", self.output_mode.value)
            return self.status
        phase(logger, "prerender")
        return self._after_prerender(await render_locales_async(
            self.locales, renderer, self.options["chunk"], source,
            server=self.options["server"], externals=self.options["externals"],
        ))

    # -- metadata side-channel ----------------------------------------
    # outside a file system build no localized document exists to point at
    def meta_list_localized(self, loc_list: List[Any]) -> List[Any]:
        if not self.prerendering:
            return loc_list
        return localized_meta_list(loc_list, self.locales, self.status)

    def meta_localized_appinfo(self, meta: Dict[str, Any], locale: str) -> Dict[str, Any]:
        if not self.prerendering:
            return meta
        return localized_appinfo(meta, locale, self.locales, self.status)

    # -- html processing ----------------------------------------------
    def before_html_processing(self, js_assets: Sequence[str]) -> Dict[str, Any]:
        """Compose both startup scripts; the scripts load the assets themselves."""
        screen_types = self.options["screen_types"]
        self.iso_startup = compose_startup(self._iso_template, StartupVariant.ISOMORPHIC, js_assets, screen_types)
        self.std_startup = compose_startup(self._std_template, StartupVariant.STANDARD, js_assets)
        for name, script in (("isomorphic", self.iso_startup), ("standard", self.std_startup)):
            leftover = unresolved_placeholders(script)
            if leftover:
                logger.warning("Unresolved placeholders in %s startup: %s", name, leftover)
        return {"inject": "body", "js": []}

    def after_html_processing(self, html: str, engine: TemplateEngine) -> str:
        """Emit the localized documents and return the fallback index.html."""
        if self.iso_startup is None or self.std_startup is None:
            self.before_html_processing([])
        if self.prerendering:
            phase(logger, "emit localized documents")
            iso_template = engine.post_process(html, [script_tag(self.iso_startup)])
            try:
                fragments = locate_root(iso_template)
                event(logger, "locale-html-generate", chunk=self.options["chunk"], locales=self.locales)
                self.documents = emit_localized_documents(fragments, self.status, self.locales)
            except RootNotFoundError as e:
                logger.error("%s", e)
                self.errors.append("localehtml: " + str(e))
            for loc in self.status.failed:
                logger.info("Skipped %s: %s", loc, self.status.errors[loc])
        return engine.post_process(html, [script_tag(self.std_startup)])

    def _result(self, fallback: str) -> BuildResult:
        return BuildResult(
            locales=list(self.locales),
            status=self.status,
            documents=list(self.documents),
            fallback_html=fallback,
            errors=list(self.errors),
        )

    def build(self, template_html: str, js_assets: Sequence[str], source: str, renderer,
              engine: Optional[TemplateEngine] = None) -> BuildResult:
        engine = engine or SimpleTemplateEngine()
        self.prerender(source, renderer)
        self.before_html_processing(js_assets)
        return self._result(self.after_html_processing(template_html, engine))

    async def build_async(self, template_html: str, js_assets: Sequence[str], source: str, renderer,
                          engine: Optional[TemplateEngine] = None) -> BuildResult:
        engine = engine or SimpleTemplateEngine()
        await self.prerender_async(source, renderer)
        self.before_html_processing(js_assets)
        return self._result(self.after_html_processing(template_html, engine))
