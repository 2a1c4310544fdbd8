"""
localehtml/locales/loader.py

Central source of truth for the target locale list of a build.
Accepts a preset name ('tv', 'signage'), 'used' for all app-level locales,
'all' for every locale the i18n library supports, a custom JSON file, a
comma-separated list, or an already resolved list.
"""

import os
import re
import json
from typing import List, Sequence, Union

from localehtml.locales.constants import PRESETS, USED, ALL, APP_MANIFEST, ILIB_MANIFEST
from localehtml.locales.manifest import locales_in_manifest
from localehtml.logger import get_logger

logger = get_logger("localehtml.locales.loader")

JSON_TARGET = re.compile(r"\.json$", re.I)


# -------------------------------------------------
# Load a {"paths": [...]} locale list
# -------------------------------------------------
def load_locale_list(path: str) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        paths = data.get("paths") or []
        logger.info(f"Loaded {len(paths)} locales from {os.path.basename(path)}")
        return list(paths)
    except Exception as e:
        logger.error(f"Failed reading locale list {path}: {e}")
        return []


# -------------------------------------------------
# Resolve the build's target locales
# -------------------------------------------------
def resolve_locales(context: str, target: Union[str, Sequence[str], None]) -> List[str]:
    """
    Return the ordered locale list for `target`. Never raises.

    context is the build's working root; it anchors the 'used' and 'all'
    manifests. Lists pass through untouched.
    """
    if not target:
        return []
    if isinstance(target, list):
        return target
    if isinstance(target, tuple):
        return list(target)
    if not isinstance(target, str):
        logger.error("Unsupported locale target %r", target)
        return []

    if target in PRESETS:
        return load_locale_list(PRESETS[target])
    if target == USED:
        return locales_in_manifest(os.path.join(context or "", APP_MANIFEST))
    if target == ALL:
        return locales_in_manifest(os.path.join(context or "", ILIB_MANIFEST))
    if JSON_TARGET.search(target):
        return load_locale_list(target)
    return target.replace("-", "/").split(",")
