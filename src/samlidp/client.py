"""Remote client contract and error taxonomy.

The lifecycle controller only talks to the identity platform through an
``IdpClient``. The HTTP implementation lives in ``okta_client``; tests use an
in-memory fake with the same surface.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import SamlIdentityProvider


class RemoteClientError(Exception):
    """Raised when a call to the identity platform fails.

    Attributes:
        status_code: HTTP status, or None for transport failures.
        error_code: Platform error code (e.g. ``E0000007``), if any.
        causes: Human-readable error causes returned by the platform.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str | None = None,
        causes: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.causes = causes or []


class RemoteNotFoundError(RemoteClientError):
    """The referenced resource no longer exists remotely."""

    pass


class RemoteRejectedError(RemoteClientError):
    """The platform rejected the submitted object (validation, conflicts)."""

    pass


class IdpClient(Protocol):
    """Operations the lifecycle controller needs from the platform."""

    def create_idp(self, idp: SamlIdentityProvider) -> SamlIdentityProvider: ...

    def get_idp(self, idp_id: str) -> SamlIdentityProvider: ...

    def update_idp(self, idp_id: str, idp: SamlIdentityProvider) -> SamlIdentityProvider: ...

    def delete_idp(self, idp_id: str) -> None: ...

    def activate_idp(self, idp_id: str) -> Any: ...

    def deactivate_idp(self, idp_id: str) -> Any: ...
