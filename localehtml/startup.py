# localehtml/startup.py
"""
Compose the bootstrap scripts embedded in the generated documents.

Two variants share one template contract:
  isomorphic  -> %SCREENTYPES% and %JSASSETS%  (prerendered documents)
  standard    -> %JSASSETS%                    (fallback index.html)
"""

import os
import re
import json
from enum import Enum
from typing import Any, List, Optional, Sequence

from localehtml.locales.constants import RESOURCES_DIR

SCREENTYPES = "%SCREENTYPES%"
JSASSETS = "%JSASSETS%"
PLACEHOLDERS = (SCREENTYPES, JSASSETS)

INDENT = "\t\t"
TRAILING_INDENT = "\t"

PLACEHOLDER_RE = re.compile(r"%[A-Z][A-Z0-9_]*%")


class StartupVariant(Enum):
    ISOMORPHIC = "prerendered-startup.js"
    STANDARD = "standard-startup.js"

    @property
    def placeholders(self):
        if self is StartupVariant.ISOMORPHIC:
            return PLACEHOLDERS
        return (JSASSETS,)


def load_startup_template(variant: StartupVariant, resources_dir: str = RESOURCES_DIR) -> str:
    with open(os.path.join(resources_dir, variant.value), "r", encoding="utf-8") as f:
        return f.read()


def _json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def indent_script(text: str) -> str:
    """Nest the script under its <script> tag: two tabs per line, one before the closing tag."""
    text = re.sub(r"[\n\r]+([^\n\r])", "\n" + INDENT + r"\1", text)
    text = re.sub(r"[\n\r]+\Z", "\n" + TRAILING_INDENT, text)
    return "\n" + INDENT + text


def compose_startup(
    raw: str,
    variant: StartupVariant,
    js_assets: Sequence[str],
    screen_types: Optional[Any] = None,
) -> str:
    """Substitute the variant's placeholders in one pass, then indent."""
    values = {JSASSETS: _json(list(js_assets or [])), SCREENTYPES: _json(screen_types)}
    tokens = variant.placeholders
    pattern = "|".join(re.escape(t) for t in tokens)
    # substituted values are never rescanned
    raw = re.sub(pattern, lambda m: values[m.group(0)], raw)
    return indent_script(raw)


def unresolved_placeholders(text: str) -> List[str]:
    return PLACEHOLDER_RE.findall(text)
