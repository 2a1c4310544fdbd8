# localehtml/metadata.py
"""
Per-locale appinfo side-channel.

The metadata generator asks which localized appinfo files must exist and
lets us patch each one; prerendered locales point `main` at their document.
"""

import posixpath
from typing import Any, Dict, List, Sequence

from localehtml.emitter import localized_filename
from localehtml.render.orchestrator import RenderStatus

APPINFO = "appinfo.json"


def _listed(loc_list, locale) -> bool:
    for item in loc_list:
        if item == locale or (isinstance(item, dict) and item.get("locale") == locale):
            return True
    return False


def localized_meta_list(loc_list: List[Any], locales: Sequence[str], status: RenderStatus) -> List[Any]:
    """Request generation of appinfo for resolved locales that have none yet."""
    for loc in locales:
        if loc not in status.errors and not _listed(loc_list, loc):
            loc_list.append({"generate": posixpath.join("resources", loc, APPINFO)})
    return loc_list


def localized_appinfo(meta: Dict[str, Any], locale: str, locales: Sequence[str], status: RenderStatus) -> Dict[str, Any]:
    """Point a prerendered locale's appinfo at its index.<locale>.html."""
    if locale in locales and status.succeeded(locale):
        meta["main"] = posixpath.relpath(localized_filename(locale), posixpath.join("resources", locale))
        meta["usePrerendering"] = True
    return meta
