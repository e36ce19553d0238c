"""Shared utilities for the translation routes."""

from transcore.utils.auth import admin_required
from transcore.utils.responses import error_response, handle_core_errors, get_language, snapshots_from_json

__all__ = [
    'admin_required',
    'error_response',
    'handle_core_errors',
    'get_language',
    'snapshots_from_json',
]
