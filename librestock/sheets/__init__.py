from .client import GoogleSheetsClient, MemorySheetsClient, SheetsError, SheetsExtension, StoreNotConfigured
from .codec import COLUMN_COUNT, HEADERS, DecodeIssue, decode_row, encode_row

__all__ = [
    "COLUMN_COUNT",
    "HEADERS",
    "DecodeIssue",
    "GoogleSheetsClient",
    "MemorySheetsClient",
    "SheetsError",
    "SheetsExtension",
    "StoreNotConfigured",
    "decode_row",
    "encode_row",
]
