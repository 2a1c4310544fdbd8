# localehtml/emitter.py
"""
Combine the located template fragments with prerendered markup into one
index.<locale>.html document per successfully rendered locale.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

from localehtml.errors import RootNotFoundError
from localehtml.logger import get_logger
from localehtml.render.orchestrator import RenderStatus, dash_locale
from localehtml.template.root_locator import TemplateFragments

logger = get_logger("localehtml.emitter")

FALLBACK_NAME = "index.html"


@dataclass(frozen=True)
class EmittedDocument:
    locale: str
    name: str
    content: str

    @property
    def size(self) -> int:
        return len(self.content)


def localized_filename(locale: str) -> str:
    return "index." + dash_locale(locale) + ".html"


def emit_localized_documents(
    fragments: Optional[TemplateFragments],
    status: RenderStatus,
    locales: Sequence[str],
) -> List[EmittedDocument]:
    """
    Raises RootNotFoundError, emitting nothing, when the template had no root div.
    Failed locales are skipped; the orchestrator already reported them.
    Each document name is emitted at most once, for its first locale.
    """
    if fragments is None:
        raise RootNotFoundError()

    docs, names = [], set()
    for loc in locales:
        name = localized_filename(loc)
        if name in names or not status.succeeded(loc):
            continue
        names.add(name)
        docs.append(EmittedDocument(loc, name, fragments.wrap(status.content[loc])))
    logger.info("Emitted %d localized documents", len(docs))
    return docs


def write_documents(documents: Sequence[EmittedDocument], output_dir: str) -> List[str]:
    os.makedirs(output_dir, exist_ok=True)
    written = []
    for doc in documents:
        path = os.path.join(output_dir, doc.name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(doc.content)
        logger.debug("Wrote %s (%d chars)", path, doc.size)
        written.append(path)
    return written
