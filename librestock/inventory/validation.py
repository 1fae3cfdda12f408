from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Tuple

from ..models import FIELD_NAMES

MIN_BARCODE_LENGTH = 8

_TEXT_FIELDS = ("name", "barcode", "category")
_FLOAT_FIELDS = ("cost_price", "sell_price")
_INT_FIELDS = ("stock", "min_stock")


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("not a finite number")
    return number


def _coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    number = _coerce_float(value)
    if not number.is_integer():
        raise ValueError("not a whole number")
    return int(number)


def parse_product_payload(payload: Mapping[str, Any], partial: bool = False) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Translate a camelCase JSON body into Product attributes and validate it.

    Returns ``(fields, errors)``. With ``partial`` only supplied keys are
    checked; otherwise name, barcode, category and costPrice are required.
    Unknown keys and server-owned keys (id, dates) are ignored.
    """
    fields: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    for json_key, attr in FIELD_NAMES.items():
        if attr in ("id", "date_added", "last_updated") or json_key not in payload:
            continue
        value = payload[json_key]
        if attr in _TEXT_FIELDS:
            fields[attr] = "" if value is None else str(value).strip()
        elif attr in _FLOAT_FIELDS:
            try:
                fields[attr] = _coerce_float(value)
            except (TypeError, ValueError):
                errors[json_key] = "Must be a number."
        elif attr in _INT_FIELDS:
            try:
                fields[attr] = _coerce_int(value)
            except (TypeError, ValueError):
                errors[json_key] = "Must be a whole number."

    def _required(attr: str) -> bool:
        return attr in fields or not partial

    if _required("name") and not fields.get("name"):
        errors.setdefault("name", "Name is required.")

    if _required("barcode"):
        barcode = fields.get("barcode") or ""
        if not barcode:
            errors.setdefault("barcode", "Barcode is required.")
        elif len(barcode) < MIN_BARCODE_LENGTH:
            errors.setdefault("barcode", f"Barcode must have at least {MIN_BARCODE_LENGTH} digits.")

    if _required("category") and not fields.get("category"):
        errors.setdefault("category", "Select a category.")

    if _required("cost_price") and "costPrice" not in errors:
        if fields.get("cost_price", 0) <= 0:
            errors["costPrice"] = "Cost price must be greater than 0."

    if "sellPrice" not in errors and fields.get("sell_price", 0) < 0:
        errors["sellPrice"] = "Sale price cannot be negative."
    if "stock" not in errors and fields.get("stock", 0) < 0:
        errors["stock"] = "Stock cannot be negative."
    if "minStock" not in errors and fields.get("min_stock", 0) < 0:
        errors["minStock"] = "Minimum stock cannot be negative."

    return fields, errors
