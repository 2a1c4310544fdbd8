"""
localehtml/locales/manifest.py
Scan an ilib resource manifest and detect the locales it uses.
"""

import json
import posixpath
from typing import List

from localehtml.logger import get_logger

logger = get_logger("localehtml.locales.manifest")


def is_locale_dir(path: str) -> bool:
    """`en` or `en/US`-shaped directories; anything else is a plain folder."""
    return len(path) == 2 or path.find("/") == 2


def segment_count(locale: str) -> int:
    return len(locale.split("/"))


def locales_in_manifest(manifest: str, include_parents: bool = False) -> List[str]:
    """
    Return the locales referenced by the manifest's `files`, least specific first.

    Dashes are rewritten to slashes before parsing so `zh-Hant/TW` and
    `zh/Hant/TW` resolve to the same locale. Any failure gives [].
    """
    try:
        with open(manifest, "r", encoding="utf-8") as f:
            meta = json.loads(f.read().replace("-", "/"))
        files = meta.get("files") or []
        locales = []
        for fn in files:
            curr = posixpath.dirname(fn)
            if include_parents:
                while curr and curr != ".":
                    if curr not in locales and is_locale_dir(curr):
                        locales.append(curr)
                    curr = posixpath.dirname(curr)
            elif curr not in locales and is_locale_dir(curr):
                locales.append(curr)
    except Exception as e:
        logger.warning("Failed to scan manifest %s: %s", manifest, e)
        return []

    # stable: equal specificity keeps manifest order
    locales.sort(key=segment_count)
    logger.debug("Manifest %s -> %d locales", manifest, len(locales))
    return locales
