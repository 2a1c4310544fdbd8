# localehtml/logger.py
"""
Build logger for localehtml.

Console output for build progress, a rotating INFO file, and a JSON debug
file that carries the per-locale render events. TRACE (below DEBUG) is only
recorded when LOCALEHTML_TRACE is set.
"""

import logging
import logging.handlers
import os
import sys
import json
import time

LOG_ROOT = os.getenv("LOCALEHTML_LOG_DIR", os.path.join(os.getcwd(), "logs"))
INFO_LOG = "localehtml_info.log"
DEBUG_LOG = "localehtml_debug.log"

ENABLE_COLOR = os.getenv("CI", "false").lower() != "true"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# console never shows anything below INFO
LEVEL_COLORS = (
    (logging.ERROR, "\x1b[31;21m"),
    (logging.WARNING, "\x1b[33;21m"),
)
RESET = "\x1b[0m"


class BuildConsoleFormatter(logging.Formatter):
    def format(self, record):
        line = "%s [%s] %s: %s" % (
            time.strftime("%H:%M:%S", time.localtime(record.created)),
            record.levelname, record.name, record.getMessage(),
        )
        if ENABLE_COLOR:
            for level, color in LEVEL_COLORS:
                if record.levelno >= level:
                    return color + line + RESET
        return line


class EventFormatter(logging.Formatter):
    """One JSON object per line; build events keep their fields."""
    def format(self, record):
        payload = {
            "ts": record.created,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        build_event = getattr(record, "build_event", None)
        if build_event:
            payload["event"] = build_event
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name="localehtml", level="INFO"):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(TRACE if os.getenv("LOCALEHTML_TRACE") else logging.DEBUG)
    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(getattr(logging, level.upper(), logging.INFO))
    console.setFormatter(BuildConsoleFormatter())
    logger.addHandler(console)

    try:
        os.makedirs(LOG_ROOT, exist_ok=True)
    except OSError:
        logger.warning("Log directory %s unavailable, file logging disabled", LOG_ROOT)
        return logger

    info = logging.handlers.RotatingFileHandler(
        os.path.join(LOG_ROOT, INFO_LOG), maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    info.setLevel(logging.INFO)
    info.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s"))
    logger.addHandler(info)

    debug = logging.handlers.RotatingFileHandler(
        os.path.join(LOG_ROOT, DEBUG_LOG), maxBytes=10_000_000, backupCount=3, encoding="utf-8"
    )
    debug.setLevel(TRACE)
    debug.setFormatter(EventFormatter())
    logger.addHandler(debug)
    return logger


def phase(logger, name, locales=None):
    """Mark a build step; `locales` adds the count being processed."""
    if locales is None:
        logger.info("📍 %s", name)
    else:
        logger.info("📍 %s (%d locales)", name, len(locales))


def event(logger, name, locale=None, **data):
    """Debug-file record for a build hook such as prerender-localized."""
    if locale is not None:
        data["locale"] = locale
    logger.debug("EVENT %s", name, extra={"build_event": {"name": name, **data}})


def timing(logger, label, start_time):
    elapsed = round(time.time() - start_time, 3)
    logger.info("⏱ %s: %ss", label, elapsed)
    return elapsed
