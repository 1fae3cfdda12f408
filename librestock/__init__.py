import logging

from flask import Flask

from .api import api_bp, register_errors
from .cli import register_cli
from .config import Config
from .extensions import app_settings, sheets


def _configure_logging(app: Flask) -> None:
    level = logging.getLevelName(str(app.config.get('LOG_LEVEL', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO
    app.logger.setLevel(level)


def create_app(config_object: type[Config] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    _configure_logging(app)

    sheets.init_app(app)
    app_settings.init_app(app)
    register_cli(app)

    app.register_blueprint(api_bp)
    register_errors(app)

    @app.get('/health')
    def health():
        return {'status': 'ok', 'version': app.config.get('APP_VERSION')}, 200

    app.logger.info(
        'LibreStock ready (backend=%s, sheet=%s)',
        app.config.get('SHEETS_BACKEND'),
        app.config.get('SHEET_NAME'),
    )
    return app
