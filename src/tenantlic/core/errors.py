# src/tenantlic/core/errors.py
from __future__ import annotations


class LicenseToolError(Exception):
    code = "license_tool_error"; hint = ""
    def __init__(self, message: str = "", *, hint: str | None = None):
        super().__init__(message or self.__class__.__name__)
        if hint: self.hint = hint


class UserNotFoundError(LicenseToolError):
    code = "user_not_found"; hint = "Check the UPN or object id."
    def __init__(self, user: str, message: str = ""):
        super().__init__(message or f"User '{user}' not found.")
        self.user = user


class EmptyCatalogError(LicenseToolError):
    code = "empty_catalog"
    hint = "Graph returned no subscribed SKUs; check Organization.Read.All consent."


class SnapshotReadError(LicenseToolError):
    code = "snapshot_read_error"
    hint = "Fix or delete the snapshot file; it is recreated on the next run."


class SnapshotWriteError(LicenseToolError):
    code = "snapshot_write_error"; hint = "Check the snapshot path and its permissions."
