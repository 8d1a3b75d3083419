"""Exception hierarchy shared by services, adapters and the CLI.

Services and adapters raise; the CLI is the only layer that turns these into
messages and exit codes.
"""

from __future__ import annotations


class CmsMigrateError(Exception):
    """Base class for every error raised on purpose by cms-migrate."""


class MigrationLoadError(CmsMigrateError):
    """A migration script could not be found, imported, or has no `migrate`."""


class MigrationValidationError(CmsMigrateError):
    """A migration declared something Contentful would reject."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class ContentTypeExistsError(CmsMigrateError):
    """The content type a migration creates already exists remotely."""

    def __init__(self, content_type_id: str) -> None:
        self.content_type_id = content_type_id
        super().__init__(f"Content type '{content_type_id}' already exists in the target environment")


class ContentfulAPIError(CmsMigrateError):
    """Non-2xx response from the Content Management API."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        error_id: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_id = error_id
        self.request_id = request_id
        detail = f"HTTP {status_code}"
        if error_id:
            detail += f" {error_id}"
        text = f"{detail}: {message}"
        if request_id:
            text += f" (request id {request_id})"
        super().__init__(text)


class ContentfulConnectionError(CmsMigrateError):
    """The Content Management API could not be reached (DNS, refused, timeout)."""
