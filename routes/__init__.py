"""HTTP blueprints."""

from __future__ import annotations

from flask import Flask


def register_blueprints(app: Flask) -> None:
    """Register every airwatch blueprint on the app."""
    from .wifi_monitor import wifi_monitor_bp

    app.register_blueprint(wifi_monitor_bp)
