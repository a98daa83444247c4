# cdp/errors.py

from __future__ import annotations

from typing import Optional


class DirectoryError(RuntimeError):
    """Base class for everything that aborts a directory load."""


class ConfigError(DirectoryError):
    pass


class FetchError(DirectoryError):
    def __init__(self, sheet: str, status_code: Optional[int], reason: str = ""):
        self.sheet = sheet
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            msg = f"Failed to fetch {sheet}: {reason}"
        else:
            msg = f"Failed to fetch {sheet}: {status_code} {reason}".rstrip()
        super().__init__(msg)


class ParseError(DirectoryError):
    def __init__(self, sheet: str, message: str):
        self.sheet = sheet
        super().__init__(f"Failed to parse response from {sheet}: {message}")


class MissingColumnError(DirectoryError):
    def __init__(self, column: str, sheet: str = ""):
        self.column = column
        self.sheet = sheet
        where = f" in {sheet} sheet" if sheet else " in sheet"
        super().__init__(f'Required column "{column}" not found{where}')


class CampaignNotFoundError(DirectoryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Campaign "{name}" not found in campaigns sheet')


class EmptyDatasetError(DirectoryError):
    def __init__(self, sheet: str):
        self.sheet = sheet
        super().__init__(f"No data found in the {sheet} sheet")


class ContactStoreError(DirectoryError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to update contact status at {path}: {reason}")
