import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / '.env', override=False)

LOCAL_ENV = BASE_DIR / '.env.local'
if LOCAL_ENV.exists():
    load_dotenv(LOCAL_ENV, override=True)


def _env_flag(name: str, default: str = 'on') -> bool:
    return os.getenv(name, default).strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


class BaseConfig:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    APP_VERSION = os.getenv('APP_VERSION', '1.0.0')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    SHEETS_BACKEND = os.getenv('SHEETS_BACKEND', 'google').lower()
    GOOGLE_SHEETS_ID = os.getenv('GOOGLE_SHEETS_ID') or os.getenv('NEXT_PUBLIC_GOOGLE_SHEETS_ID', '')
    GOOGLE_SHEETS_CLIENT_EMAIL = os.getenv('GOOGLE_SHEETS_CLIENT_EMAIL')
    GOOGLE_SHEETS_PRIVATE_KEY = os.getenv('GOOGLE_SHEETS_PRIVATE_KEY')
    GOOGLE_APPLICATION_CREDENTIALS = os.getenv('GOOGLE_APPLICATION_CREDENTIALS')
    SHEET_NAME = os.getenv('SHEET_NAME', 'Productos')
    SHEET_GRID_ID = _env_int('SHEET_GRID_ID')

    DEFAULT_PROFIT_MARGIN = float(os.getenv('DEFAULT_PROFIT_MARGIN', '30'))
    DEFAULT_CURRENCY = os.getenv('DEFAULT_CURRENCY', '$')
    DEFAULT_LOW_STOCK_ALERT = _env_flag('DEFAULT_LOW_STOCK_ALERT')


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG').upper()


class ProdConfig(BaseConfig):
    DEBUG = False


class TestConfig(BaseConfig):
    TESTING = True
    SHEETS_BACKEND = 'memory'
    GOOGLE_SHEETS_ID = 'test-spreadsheet'
    SHEET_GRID_ID = 0
    DEFAULT_PROFIT_MARGIN = 30.0
    DEFAULT_CURRENCY = '$'
    DEFAULT_LOW_STOCK_ALERT = True


Config = DevConfig if os.getenv('FLASK_ENV') != 'production' else ProdConfig
