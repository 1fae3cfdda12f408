from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from ..extensions import app_settings
from ..inventory.filters import STOCK_FILTERS, ProductFilter
from ..inventory.pricing import price_breakdown, sell_price
from ..inventory.store import ProductNotFound, get_store
from ..inventory.validation import parse_product_payload
from ..models import CATEGORIES, CURRENCIES
from ..scanner import ManualEntryScanner
from ..utils.analytics import dashboard_payload

api_bp = Blueprint("api", __name__, url_prefix="/api")

ERROR_HEADER = "X-Inventory-Error"


def _json_body() -> Tuple[Dict[str, Any] | None, Any]:
    if not request.is_json:
        return None, (jsonify({"error": "Expected JSON payload."}), 400)
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None, (jsonify({"error": "Invalid data for this request."}), 400)
    return payload, None


def _header_value(message: str) -> str:
    # header values must be one latin-1 line
    return " ".join(message.split()).encode("latin-1", "replace").decode("latin-1")


def _mutation_failed(message: str, exc: Exception):
    body = {"error": message, "details": str(exc)}
    if isinstance(exc, ProductNotFound):
        body["code"] = "not_found"
    return jsonify(body), 500


@api_bp.get("/ping")
def ping():
    return jsonify({"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()})


@api_bp.get("/products")
def list_products():
    stock_filter = (request.args.get("stock") or "all").strip().lower()
    if stock_filter not in STOCK_FILTERS:
        return jsonify({"error": f"stock must be one of: {', '.join(STOCK_FILTERS)}."}), 400
    criteria = ProductFilter(
        search=request.args.get("search") or "",
        category=request.args.get("category") or "all",
        stock=stock_filter,
    )

    try:
        result = get_store().list_all()
        products = criteria.apply(result.products)
        response = jsonify([product.to_dict() for product in products])
    except Exception as exc:
        current_app.logger.exception("GET /api/products failed: %s", exc)
        return jsonify({"error": "Error loading products"}), 500

    if result.error:
        response.headers[ERROR_HEADER] = _header_value(result.error)
    return response


@api_bp.post("/products")
def create_product():
    payload, error = _json_body()
    if error:
        return error

    fields, errors = parse_product_payload(payload)
    if errors:
        return jsonify({"error": "Invalid product.", "errors": errors}), 400

    settings = app_settings.get()
    if "sell_price" not in fields:
        fields["sell_price"] = sell_price(fields["cost_price"], settings.profit_margin)

    try:
        product = get_store().append(fields)
    except Exception as exc:
        current_app.logger.exception("POST /api/products failed: %s", exc)
        return _mutation_failed("Error adding product", exc)
    return jsonify(product.to_dict())


@api_bp.put("/products/<product_id>")
def update_product(product_id: str):
    payload, error = _json_body()
    if error:
        return error

    fields, errors = parse_product_payload(payload, partial=True)
    if errors:
        return jsonify({"error": "Invalid product.", "errors": errors}), 400

    if "cost_price" in fields and "sell_price" not in fields:
        fields["sell_price"] = sell_price(fields["cost_price"], app_settings.get().profit_margin)

    try:
        get_store().replace(product_id, fields)
    except Exception as exc:
        current_app.logger.error("PUT /api/products/%s failed: %s", product_id, exc)
        return _mutation_failed("Error updating product", exc)
    return jsonify({"success": True})


@api_bp.delete("/products/<product_id>")
def delete_product(product_id: str):
    try:
        get_store().remove(product_id)
    except Exception as exc:
        current_app.logger.error("DELETE /api/products/%s failed: %s", product_id, exc)
        return _mutation_failed("Error deleting product", exc)
    return jsonify({"success": True})


@api_bp.post("/scan")
def scan():
    payload, error = _json_body()
    if error:
        return error

    barcode = ManualEntryScanner().submit(payload.get("barcode"))
    if not barcode:
        return jsonify({"error": "barcode is required."}), 400

    try:
        product = get_store().find_by_barcode(barcode)
    except Exception as exc:
        current_app.logger.exception("Barcode lookup for %s failed: %s", barcode, exc)
        return jsonify({"error": "Error looking up barcode", "details": str(exc)}), 500
    return jsonify({"barcode": barcode, "product": product.to_dict() if product else None})


@api_bp.get("/categories")
def categories():
    result = get_store().list_all()
    in_use = sorted({product.category for product in result.products if product.category})
    response = jsonify({"preset": list(CATEGORIES), "inUse": in_use})
    if result.error:
        response.headers[ERROR_HEADER] = _header_value(result.error)
    return response


@api_bp.get("/dashboard")
def dashboard():
    result = get_store().list_all()
    payload = dashboard_payload(result.products, app_settings.get())
    payload["error"] = result.error
    return jsonify(payload)


@api_bp.get("/settings")
def get_settings():
    body = app_settings.get().to_dict()
    body["currencies"] = [{"value": symbol, "label": label} for symbol, label in CURRENCIES.items()]
    return jsonify(body)


def _parse_settings(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
    changes: Dict[str, Any] = {}
    errors: Dict[str, str] = {}

    if "profitMargin" in payload:
        raw = payload["profitMargin"]
        try:
            if isinstance(raw, bool):
                raise TypeError
            margin = float(raw)
        except (TypeError, ValueError):
            errors["profitMargin"] = "Must be a number."
        else:
            if not math.isfinite(margin) or margin < 0:
                errors["profitMargin"] = "Must be zero or greater."
            else:
                changes["profit_margin"] = margin

    if "currency" in payload:
        currency = str(payload["currency"] or "").strip()
        if not currency:
            errors["currency"] = "Currency symbol is required."
        else:
            changes["currency"] = currency

    if "lowStockAlert" in payload:
        if not isinstance(payload["lowStockAlert"], bool):
            errors["lowStockAlert"] = "Must be true or false."
        else:
            changes["low_stock_alert"] = payload["lowStockAlert"]

    return changes, errors


@api_bp.put("/settings")
def save_settings():
    payload, error = _json_body()
    if error:
        return error

    changes, errors = _parse_settings(payload)
    if errors:
        return jsonify({"error": "Invalid settings.", "errors": errors}), 400

    saved = app_settings.update(**changes)
    current_app.logger.info("Settings saved: %s", saved)
    return jsonify(saved.to_dict())


@api_bp.get("/settings/price-preview")
def price_preview():
    try:
        cost = float(request.args.get("cost", 10))
    except (TypeError, ValueError):
        return jsonify({"error": "cost must be numeric."}), 400
    if not math.isfinite(cost) or cost < 0:
        return jsonify({"error": "cost must be a finite number, zero or greater."}), 400
    return jsonify(price_breakdown(cost, app_settings.get()).to_dict())


@api_bp.post("/sheet/init")
def init_sheet():
    try:
        get_store().initialize_sheet()
    except Exception as exc:
        current_app.logger.exception("Sheet initialisation failed: %s", exc)
        return jsonify({"error": "Error initialising sheet", "details": str(exc)}), 500
    return jsonify({"success": True})
