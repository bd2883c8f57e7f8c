# taskflow/services/purchase.py
"""
Purchase indent tracking backed by a Google spreadsheet.

The summary sheet holds label/value rows ("Total Indents | 78"). The indent
sheet has a header row followed by one row per indent:
TimeStamp | Store Name | Item Name | Qty | Issued To | Purpose | | Indent Number |
AU | Nature | Project Name | Required in Store | Partially Issued | QTY | |
qty issued total | PENDING
"""

import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from taskflow.config import settings
from taskflow.services.cache import TimedCache
from taskflow.services.errors import SheetsUnavailable
from taskflow.services.sheets_client import SheetsClient

logger = logging.getLogger(__name__)

RECENT_INDENT_COUNT = 10

STATUS_PENDING = "Pending"
STATUS_PARTIALLY_ISSUED = "Partially Issued"
STATUS_FULLY_ISSUED = "Fully Issued"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Column key -> predicate on the lower-cased header. The first matching header wins.
COLUMN_MATCHERS: List[Tuple[str, Callable[[str], bool]]] = [
    ("timestamp", lambda h: "timestamp" in h),
    ("storeName", lambda h: "store" in h),
    ("itemName", lambda h: "item" in h),
    ("qty", lambda h: h == "qty"),
    ("issuedTo", lambda h: "issued to" in h),
    ("purpose", lambda h: "purpose" in h),
    ("indentNumber", lambda h: "indent number" in h),
    ("au", lambda h: h == "au"),
    ("nature", lambda h: "nature" in h),
    ("projectName", lambda h: "project" in h),
    ("requiredInStore", lambda h: "required in store" in h),
    ("partiallyIssued", lambda h: "partially issued" in h),
    ("qtyIssued", lambda h: "qty issued" in h),
    ("pending", lambda h: "pend" in h),
]


def leading_int(value: Any) -> int:
    """Integer prefix of a cell value, 0 when there is none"""
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else 0


def locate_columns(headers: List[str]) -> Dict[str, int]:
    lowered = [str(h).lower() for h in headers]
    columns = {}
    for key, matches in COLUMN_MATCHERS:
        columns[key] = next((i for i, header in enumerate(lowered) if matches(header)), -1)
    return columns


def indent_status(partially_issued: str, qty_issued: int, pending: int) -> str:
    if partially_issued and partially_issued != "Not Issued" and pending == 0:
        return STATUS_FULLY_ISSUED
    if qty_issued > 0 and pending > 0:
        return STATUS_PARTIALLY_ISSUED
    if pending == 0 and qty_issued > 0:
        return STATUS_FULLY_ISSUED
    return STATUS_PENDING


def parse_summary(rows: List[List[str]]) -> Dict[str, int]:
    summary = {"totalIndents": 0, "approved": 0, "pending": 0}
    for row in rows:
        label = str(row[0] if row else "").lower().strip()
        value = leading_int(row[1] if len(row) > 1 else "")
        if "total indent" in label:
            summary["totalIndents"] = value
        elif "approved" in label:
            summary["approved"] = value
        elif "pending" in label:
            summary["pending"] = value
    return summary


def parse_indent_rows(rows: List[List[str]]) -> List[Dict[str, Any]]:
    if len(rows) < 2:
        return []

    columns = locate_columns(rows[0])
    records = []
    for index, row in enumerate(rows[1:]):
        def cell(key: str) -> str:
            idx = columns[key]
            return row[idx] if 0 <= idx < len(row) and row[idx] else ""

        partially_issued = cell("partiallyIssued")
        pending = leading_int(cell("pending"))
        qty_issued = leading_int(cell("qtyIssued"))

        record = {
            "id": index + 1,
            "timestamp": cell("timestamp"),
            "storeName": cell("storeName"),
            "itemName": cell("itemName"),
            "qty": leading_int(cell("qty")),
            "issuedTo": cell("issuedTo"),
            "purpose": cell("purpose"),
            "indentNumber": cell("indentNumber"),
            "unit": cell("au"),
            "nature": cell("nature"),
            "projectName": cell("projectName"),
            "requiredInStore": cell("requiredInStore"),
            "partiallyIssued": partially_issued,
            "qtyIssued": qty_issued,
            "pending": pending,
            "status": indent_status(partially_issued, qty_issued, pending),
        }
        # Skip blank rows
        if record["indentNumber"]:
            records.append(record)
    return records


def build_dashboard(summary: Dict[str, int], records: List[Dict[str, Any]]) -> Dict[str, Any]:
    fully_issued = sum(1 for r in records if r["status"] == STATUS_FULLY_ISSUED)
    partially_issued = sum(1 for r in records if r["status"] == STATUS_PARTIALLY_ISSUED)
    pending = sum(1 for r in records if r["status"] == STATUS_PENDING)

    store_stats: Dict[str, Dict[str, int]] = {}
    for record in records:
        store = record["storeName"] or "Unknown"
        stats = store_stats.setdefault(store, {"total": 0, "pending": 0, "issued": 0})
        stats["total"] += 1
        if record["status"] == STATUS_PENDING:
            stats["pending"] += 1
        else:
            stats["issued"] += 1

    return {
        "success": True,
        "metrics": {
            # Sheet summary figures win unless they are missing or zero
            "totalIndents": summary["totalIndents"] or len(records),
            "approved": summary["approved"] or (fully_issued + partially_issued),
            "pending": summary["pending"] or pending,
            "fullyIssued": fully_issued,
            "partiallyIssued": partially_issued,
            "urgentCount": sum(1 for r in records if r["nature"].lower() == "urgent"),
            "normalCount": sum(1 for r in records if r["nature"].lower() == "normal"),
        },
        "storeStats": [{"name": name, **stats} for name, stats in store_stats.items()],
        "recentIndents": records[:RECENT_INDENT_COUNT],
        "allIndents": records,
    }


def filter_indents(
    records: List[Dict[str, Any]],
    store: Optional[str] = None,
    status: Optional[str] = None,
    nature: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    if store:
        records = [r for r in records if store.lower() in r["storeName"].lower()]
    if status:
        records = [r for r in records if r["status"].lower() == status.lower()]
    if nature:
        records = [r for r in records if r["nature"].lower() == nature.lower()]
    if search:
        needle = search.lower()
        records = [
            r for r in records
            if needle in r["indentNumber"].lower()
            or needle in r["itemName"].lower()
            or needle in r["issuedTo"].lower()
            or needle in r["projectName"].lower()
        ]
    return records


def paginate(records: List[Dict[str, Any]], page: int, limit: int) -> Dict[str, Any]:
    start = (page - 1) * limit
    return {
        "success": True,
        "total": len(records),
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(len(records) / limit),
        "records": records[start:start + limit],
    }


class PurchaseService:
    """Reads and shapes purchase indent data from the spreadsheet"""

    def __init__(
        self,
        client: SheetsClient,
        summary_sheet: Optional[str] = None,
        indent_sheet: Optional[str] = None,
    ):
        self.client = client
        self.summary_sheet = summary_sheet or settings.PURCHASE_SUMMARY_SHEET
        self.indent_sheet = indent_sheet or settings.PURCHASE_INDENT_SHEET

    def fetch_summary(self) -> Dict[str, int]:
        return parse_summary(self.client.get_values(f"'{self.summary_sheet}'!A1:B10"))

    def fetch_indent_records(self) -> List[Dict[str, Any]]:
        return parse_indent_rows(self.client.get_values(f"'{self.indent_sheet}'!A:Q"))

    def get_dashboard_data(self) -> Dict[str, Any]:
        summary = self.fetch_summary()
        records = self.fetch_indent_records()
        logger.info(f"Loaded {len(records)} purchase indents from Google Sheets")
        return build_dashboard(summary, records)


def load_dashboard(service: PurchaseService, cache: TimedCache) -> Dict[str, Any]:
    """Fresh cached data, else a new fetch, else the last known data marked as cached"""
    cached = cache.get()
    if cached is not None:
        logger.debug("Serving purchase dashboard from cache")
        return cached

    try:
        data = service.get_dashboard_data()
    except SheetsUnavailable:
        stale, age = cache.get_stale()
        if stale is None:
            raise
        logger.warning(f"Serving stale purchase dashboard ({round(age)}s old)")
        return {**stale, "cached": True, "cacheAge": round(age)}

    cache.set(data)
    return data


def refresh_dashboard(service: PurchaseService, cache: TimedCache) -> Dict[str, Any]:
    cache.invalidate()
    data = service.get_dashboard_data()
    cache.set(data)
    return data


def fallback_dashboard(message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "message": "Unable to fetch data from Google Sheets",
        "error": message,
        "fallback": True,
        "metrics": {
            "totalIndents": 0,
            "approved": 0,
            "pending": 0,
            "fullyIssued": 0,
            "partiallyIssued": 0,
            "urgentCount": 0,
            "normalCount": 0,
        },
        "storeStats": [],
        "recentIndents": [],
        "allIndents": [],
    }
