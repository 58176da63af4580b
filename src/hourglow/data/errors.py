"""Errors raised by the persistence layer."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for persistence failures that carry a user-facing message."""

    status_code = 500


class InvalidRequestError(StoreError):
    status_code = 400


class NotFoundError(StoreError):
    status_code = 404


class ConflictError(StoreError):
    status_code = 409
