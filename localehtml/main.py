#!/usr/bin/env python3
"""
localehtml/main.py - localized index.html builder
Run:
  python -m localehtml.main --template dist/index.html --bundle dist/main.js --locales tv
"""
import os
import sys
import json
import time
import argparse
from typing import List, Optional

from localehtml.analytics.report_builder import write_report
from localehtml.emitter import FALLBACK_NAME, write_documents
from localehtml.logger import get_logger, timing
from localehtml.pipeline import LocaleHtmlBuilder, OutputMode, SimpleTemplateEngine
from localehtml.render.http_renderer import HttpRenderer, RENDER_URL, RENDER_TIMEOUT
from localehtml.render.orchestrator import DEFAULT_MAX_WORKERS

logger = get_logger("localehtml.main")

ROOT = os.getcwd()
DEFAULT_OUTPUT_DIR = os.path.join(ROOT, "dist")
REPORTS_DIR = os.path.join(ROOT, "data", "reports")


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def split_list(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [s.strip() for s in value.split(",") if s.strip()]


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Generate prerendered index.<locale>.html documents")
    p.add_argument("--template", required=True, help="base HTML template")
    p.add_argument("--bundle", required=True, help="application chunk source to prerender")
    p.add_argument("--chunk", default=None, help="chunk file name (default: bundle basename)")
    p.add_argument("--locales", default="used",
                   help="tv, signage, used, all, a locales .json file, or a comma separated list")
    p.add_argument("--js-assets", default=None, help="comma separated script URLs (default: chunk name)")
    p.add_argument("--screen-types", default=None, help="JSON file with the screen type definitions")
    p.add_argument("--render-url", default=RENDER_URL)
    p.add_argument("--render-timeout", type=int, default=RENDER_TIMEOUT)
    p.add_argument("--server", action="store_true", help="render in server mode")
    p.add_argument("--externals", default=None, help="comma separated external modules")
    p.add_argument("--context", default=ROOT, help="build root for the 'used'/'all' manifests")
    p.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR)
    p.add_argument("--max-workers", type=int, default=DEFAULT_MAX_WORKERS)
    p.add_argument("--virtual", action="store_true", help="only emit the fallback index.html")
    p.add_argument("--reports-dir", default=REPORTS_DIR)
    p.add_argument("--skip-report", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    start_all = time.time()

    try:
        template = read_text(args.template)
        source = read_text(args.bundle)
        screen_types = json.loads(read_text(args.screen_types)) if args.screen_types else None
    except (OSError, ValueError) as e:
        logger.error("Cannot read build inputs: %s", e)
        return 2

    chunk = args.chunk or os.path.basename(args.bundle)
    options = {
        "chunk": chunk,
        "locales": args.locales,
        "server": args.server,
        "externals": split_list(args.externals),
        "screen_types": screen_types,
        "max_workers": args.max_workers,
    }
    mode = OutputMode.VIRTUAL if args.virtual else OutputMode.FILESYSTEM
    builder = LocaleHtmlBuilder(options, context=args.context, output_mode=mode)

    renderer = HttpRenderer(args.render_url, timeout=args.render_timeout)
    try:
        result = builder.build(template, split_list(args.js_assets) or [chunk], source, renderer,
                               SimpleTemplateEngine())
    finally:
        renderer.close()

    written = write_documents(result.documents, args.output_dir)
    fallback_path = os.path.join(args.output_dir, FALLBACK_NAME)
    with open(fallback_path, "w", encoding="utf-8") as fh:
        fh.write(result.fallback_html)
    logger.info("Wrote %d localized documents + %s", len(written), fallback_path)

    if not args.skip_report:
        try:
            write_report(result, args.reports_dir)
        except Exception:
            logger.exception("report builder failed")

    for err in result.errors:
        logger.error(err)
    timing(logger, "Localized HTML build", start_all)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
