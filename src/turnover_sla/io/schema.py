# src/turnover_sla/io/schema.py
from __future__ import annotations


# Monthly export consumed by external spreadsheet tooling: do not rename or reorder.
MONTHLY_EXPORT_COLUMNS = ["month", "shipped", "onTime",
                          "late", "onTimeRate", "averageTurnover"]

INCLUDED_ROW_EXPORT_COLUMNS = [
    "orderDate",
    "shippingDate",
    "requiredArrivalDate",
    "status",
    "method",
    "product",
    "destinationCountry",
    "orderId",
    "customer",
    "turnoverDays",
    "isOnTime",
    "monthKey",
]

MISMATCH_ROW_EXPORT_COLUMNS = [
    "orderId",
    "product",
    "orderDate",
    "shippingDate",
    "requiredArrivalDate",
    "slaDays",
    "calculatedRequiredArrivalDate",
    "isOnTime",
    "isOnTimeCalculated",
    "mismatchType",
    "monthKey",
]

EXCLUDED_ROW_EXPORT_COLUMNS = ["reason"] + [
    c for c in INCLUDED_ROW_EXPORT_COLUMNS if c != "isOnTime"]

SHEET_MONTHLY = "monthly_summary"
SHEET_INCLUDED = "included_rows"
SHEET_MISMATCH = "mismatch_rows"
SHEET_EXCLUDED = "excluded_rows"

SUMMARY_CSV_HEADER = ["Month", "Shipped", "On-time",
                      "Late", "On-time %", "Avg turnover"]
