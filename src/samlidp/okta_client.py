"""HTTP client for the Okta identity provider API.

Thin wrapper over ``requests``: one request per call, no retries. HTTP
failures are translated into the error taxonomy in ``client`` so callers
never see transport-specific exceptions.

Endpoints:
    POST   /api/v1/idps
    GET    /api/v1/idps/{id}
    PUT    /api/v1/idps/{id}
    DELETE /api/v1/idps/{id}
    POST   /api/v1/idps/{id}/lifecycle/activate
    POST   /api/v1/idps/{id}/lifecycle/deactivate
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from . import __version__
from .client import RemoteClientError, RemoteNotFoundError, RemoteRejectedError
from .config import Config
from .models import SamlIdentityProvider

logger = logging.getLogger(__name__)

IDPS_PATH = "/api/v1/idps"


def _error_from_response(method: str, path: str, response: requests.Response) -> RemoteClientError:
    """Translate an error response into the matching exception."""
    error_code = None
    summary = response.reason or "request failed"
    causes: list[str] = []

    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error_code = body.get("errorCode")
        summary = body.get("errorSummary") or summary
        causes = [
            cause["errorSummary"]
            for cause in body.get("errorCauses") or []
            if isinstance(cause, dict) and cause.get("errorSummary")
        ]

    message = f"{method} {path} returned {response.status_code}: {summary}"
    if causes:
        message += " (" + "; ".join(causes) + ")"

    status = response.status_code
    if status == 404:
        error_class: type[RemoteClientError] = RemoteNotFoundError
    elif 400 <= status < 500:
        error_class = RemoteRejectedError
    else:
        error_class = RemoteClientError

    return error_class(message, status_code=status, error_code=error_code, causes=causes)


class OktaIdpClient:
    """Okta implementation of ``IdpClient``.

    Args:
        org_url: Org origin, e.g. ``https://example.okta.com``.
        api_token: API token, sent as ``Authorization: SSWS <token>``.
        timeout: Per-request timeout in seconds.
        session: Optional pre-configured session (tests inject a mock).
    """

    def __init__(
        self,
        org_url: str,
        api_token: str,
        *,
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = org_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"SSWS {api_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": f"samlidp/{__version__}",
            }
        )

    @classmethod
    def from_config(cls, config: Config) -> OktaIdpClient:
        return cls(config.org_url, config.api_token, timeout=config.request_timeout_seconds)

    def create_idp(self, idp: SamlIdentityProvider) -> SamlIdentityProvider:
        data = self._request("POST", IDPS_PATH, idp.to_payload())
        return SamlIdentityProvider.from_remote(data or {})

    def get_idp(self, idp_id: str) -> SamlIdentityProvider:
        data = self._request("GET", f"{IDPS_PATH}/{idp_id}")
        return SamlIdentityProvider.from_remote(data or {})

    def update_idp(self, idp_id: str, idp: SamlIdentityProvider) -> SamlIdentityProvider:
        data = self._request("PUT", f"{IDPS_PATH}/{idp_id}", idp.to_payload())
        return SamlIdentityProvider.from_remote(data or {})

    def delete_idp(self, idp_id: str) -> None:
        self._request("DELETE", f"{IDPS_PATH}/{idp_id}")

    def activate_idp(self, idp_id: str) -> SamlIdentityProvider:
        data = self._request("POST", f"{IDPS_PATH}/{idp_id}/lifecycle/activate")
        return SamlIdentityProvider.from_remote(data or {})

    def deactivate_idp(self, idp_id: str) -> SamlIdentityProvider:
        data = self._request("POST", f"{IDPS_PATH}/{idp_id}/lifecycle/deactivate")
        return SamlIdentityProvider.from_remote(data or {})

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Execute one request and return the decoded JSON body, if any.

        Raises:
            RemoteNotFoundError: On 404.
            RemoteRejectedError: On any other 4xx.
            RemoteClientError: On 5xx, transport failures and undecodable bodies.
        """
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(method, url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise RemoteClientError(f"{method} {path} failed: {e}") from e

        logger.debug(
            "Okta API call",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )

        if response.status_code >= 400:
            raise _error_from_response(method, path, response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteClientError(
                f"{method} {path} returned invalid JSON", status_code=response.status_code
            ) from e

        if not isinstance(data, dict):
            raise RemoteClientError(
                f"{method} {path} returned a non-object body", status_code=response.status_code
            )
        return data
