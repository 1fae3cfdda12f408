from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any

from flask import current_app

from .models import AppSettings


class _SettingsState:
    def __init__(self, settings: AppSettings) -> None:
        self.lock = threading.Lock()
        self.settings = settings


class SettingsHolder:
    """AppSettings for each app, seeded from config and kept in memory only."""

    def init_app(self, app) -> None:
        cfg = app.config
        seeded = AppSettings(
            profit_margin=float(cfg.get("DEFAULT_PROFIT_MARGIN", 30)),
            currency=cfg.get("DEFAULT_CURRENCY") or "$",
            low_stock_alert=bool(cfg.get("DEFAULT_LOW_STOCK_ALERT", True)),
        )
        app.extensions["librestock.settings"] = _SettingsState(seeded)

    def _state(self) -> _SettingsState:
        return current_app.extensions["librestock.settings"]

    def get(self) -> AppSettings:
        return self._state().settings

    def update(self, **changes: Any) -> AppSettings:
        state = self._state()
        with state.lock:
            state.settings = replace(state.settings, **changes)
            return state.settings
