from .settings import SettingsHolder
from .sheets.client import SheetsExtension


sheets = SheetsExtension()
app_settings = SettingsHolder()
