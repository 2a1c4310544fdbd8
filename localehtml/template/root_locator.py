"""
localehtml/template/root_locator.py
Locate the root div of an HTML template and split the template around it.

The search narrows a [start, end) window between the next `<div` opening and
the last `</div>` closing until the window opens on `<div ... id="root"`.
Offsets are tied to the literal token lengths: `</div>` is 6 characters and
the opening match looks 7 characters past `end`.
"""

import re
from dataclasses import dataclass
from typing import Optional

from localehtml.logger import TRACE, get_logger

logger = get_logger("localehtml.template")

ROOT_ID = "root"
ROOT_OPEN = f'<div id="{ROOT_ID}">'
ROOT_CLOSE = "</div>"

ROOT_DIV_RE = re.compile(r'^<div[^>]+id="' + ROOT_ID + '"', re.I)


@dataclass(frozen=True)
class TemplateFragments:
    before: str
    after: str

    def wrap(self, content: str) -> str:
        """Rebuild the document with `content` inside the root div."""
        return self.before + ROOT_OPEN + content + ROOT_CLOSE + self.after


def find_root_div(html: str, start: int, end: int) -> Optional[TemplateFragments]:
    """
    Return the HTML before and after the root div (empty or with contents),
    or None when no balanced candidate exists inside [start, end).
    """
    for _ in range(len(html) + 1):
        if ROOT_DIV_RE.search(html[start:end + 7]):
            logger.debug("Root div found at %d..%d", start, end)
            return TemplateFragments(before=html[:start], after=html[end + 6:])
        a = html.find("<div", start + 4)
        b = html.rfind(ROOT_CLOSE, 0, max(end, 0) + len(ROOT_CLOSE))
        logger.log(TRACE, "Narrowing %d..%d -> %d..%d", start, end, a, b)
        if a == -1 or b == -1 or a > b:
            return None
        start, end = a, b
    return None


def locate_root(html: str) -> Optional[TemplateFragments]:
    """Search the whole template; the last `</div>` bounds the first window."""
    return find_root_div(html, 0, len(html) - len(ROOT_CLOSE))
