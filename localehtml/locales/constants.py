"""
localehtml/locales/constants.py
Static locale target definitions.
Presets map to packaged locale-list files; manifests are scanned for "used"/"all".
"""

import os

RESOURCES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "resources")

# ---------------------------------------------------------------------
# PRESETS: name -> packaged {"paths": [...]} locale list
# ---------------------------------------------------------------------
PRESETS = {
    "tv": os.path.join(RESOURCES_DIR, "locales-tv.json"),
    "signage": os.path.join(RESOURCES_DIR, "locales-signage.json"),
}

# ---------------------------------------------------------------------
# MANIFEST TARGETS
#   used = app-level resources manifest (relative to the build context)
#   all  = manifest shipped with the i18n library
# ---------------------------------------------------------------------
USED = "used"
ALL = "all"

APP_MANIFEST = os.path.join("resources", "ilibmanifest.json")
ILIB_MANIFEST = os.getenv(
    "LOCALEHTML_ILIB_MANIFEST",
    os.path.join("node_modules", "@enact", "i18n", "ilibmanifest.json"),
)

DEFAULT_TARGET = USED
