"""
Flat tabular export of analysis results (CSV, every field quoted).
"""

import csv
import io
import logging
from typing import Iterable

from .analyzer import AnalysisResult
from .scoring import round_half_up

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Address",
    "Purchase Price",
    "Original Lot Size",
    "New Lot Size",
    "Buildable Area",
    "Estimated Profit",
    "Profit Margin",
    "Status",
    "Score",
]


def to_record(result: AnalysisResult) -> dict:
    """Flatten a result into one export row."""
    feasibility = result.feasibility
    return {
        "Address": result.address,
        "Purchase Price": result.price,
        "Original Lot Size": result.lot_area,
        "New Lot Size": feasibility.new_lot_area or 0,
        "Buildable Area": round_half_up(feasibility.buildable_area or 0),
        "Estimated Profit": round_half_up(result.financial.profit),
        "Profit Margin": f"{result.financial.profit_margin:.2f}",
        "Status": result.status,
        "Score": result.score,
    }


def export_csv(results: Iterable[AnalysisResult]) -> str:
    """Render results as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=EXPORT_COLUMNS, quoting=csv.QUOTE_ALL, lineterminator="\n",
    )
    writer.writeheader()
    count = 0
    for result in results:
        writer.writerow(to_record(result))
        count += 1
    logger.debug(f"Exported {count} results")
    return buffer.getvalue()


def read_export(text: str) -> list[dict]:
    """Parse exported CSV back into rows with numeric columns restored."""
    rows = []
    for row in csv.DictReader(io.StringIO(text)):
        rows.append({
            "address": row["Address"],
            "price": float(row["Purchase Price"]),
            "lot_area": float(row["Original Lot Size"]),
            "new_lot_area": float(row["New Lot Size"]),
            "buildable_area": float(row["Buildable Area"]),
            "profit": float(row["Estimated Profit"]),
            "profit_margin": float(row["Profit Margin"]),
            "status": row["Status"],
            "score": int(row["Score"]),
        })
    return rows
