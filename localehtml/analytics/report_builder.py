"""
Prerender report builder.
Appends one row per target locale to data/reports/prerender_history.csv and
writes prerender_latest.json with the outcome of the most recent build.
"""
import os
import json
import time
from typing import Any, Dict, List

import pandas as pd

from localehtml.logger import get_logger

logger = get_logger("localehtml.analytics")

HISTORY_CSV = "prerender_history.csv"
LATEST_JSON = "prerender_latest.json"

COLUMNS = ["run_time", "locale", "status", "document", "bytes", "error"]


def build_report_rows(result, run_time: str = None) -> List[Dict[str, Any]]:
    run_time = run_time or time.strftime("%Y-%m-%d %H:%M:%S")
    docs = {d.locale: d for d in result.documents}
    rows = []
    for loc in result.locales:
        doc = docs.get(loc)
        if loc in result.status.errors:
            status, error = "failed", str(result.status.errors[loc])
        elif doc is not None:
            status, error = "emitted", ""
        elif result.status.succeeded(loc):
            # rendered, but the template had no root div
            status, error = "not_emitted", ""
        else:
            status, error = "skipped", ""
        rows.append({
            "run_time": run_time,
            "locale": loc,
            "status": status,
            "document": doc.name if doc else "",
            "bytes": doc.size if doc else 0,
            "error": error,
        })
    return rows


def write_report(result, reports_dir: str) -> str:
    os.makedirs(reports_dir, exist_ok=True)
    rows = build_report_rows(result)
    df = pd.DataFrame(rows, columns=COLUMNS)

    history_path = os.path.join(reports_dir, HISTORY_CSV)
    df.to_csv(history_path, mode="a", header=not os.path.exists(history_path), index=False)
    logger.info("Wrote report rows -> %s", history_path)

    counts = df["status"].value_counts().to_dict() if not df.empty else {}
    payload = {
        "generated_at": time.strftime("%Y-%m-%d %H:%M:%S"),
        "locales": len(rows),
        "emitted": int(counts.get("emitted", 0)),
        "failed": int(counts.get("failed", 0)),
        "total_bytes": int(df["bytes"].sum()) if not df.empty else 0,
        "errors": list(result.errors),
        "rows": rows,
    }
    latest_path = os.path.join(reports_dir, LATEST_JSON)
    with open(latest_path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    logger.info("✅ Prerender summary -> %s", latest_path)
    return latest_path
