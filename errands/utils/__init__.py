"""Shared utilities for the errands backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from errands.utils.auth import (
    token_required,
    admin_required,
    get_user_from_token,
    get_user_from_request,
)

__all__ = [
    'token_required',
    'admin_required',
    'get_user_from_token',
    'get_user_from_request',
]
