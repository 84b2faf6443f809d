"""InContact admin API integration: API tokens and recording files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from callsentiment.config.settings import IncontactConfig, settings
from callsentiment.utils import job_context

from .errors import AuthError, DeleteError, FetchError
from .http import create_async_client, read_json, send_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthToken:
    """Bearer token plus the resource server it is valid for."""

    access_token: str
    base_uri: str


class TokenProvider:
    """Exchange the static InContact credentials for a fresh API token.

    Tokens are not cached: every call performs one password-grant request.
    """

    def __init__(
        self,
        *,
        token_url: str,
        basic_auth_key: str,
        username: str,
        password: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_url = token_url
        self._basic_auth_key = basic_auth_key
        self._username = username
        self._password = password
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: IncontactConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TokenProvider":
        config = config or settings.incontact
        return cls(
            token_url=config.token_url,
            basic_auth_key=config.basic_auth_key,
            username=config.username,
            password=config.password.get_secret_value(),
            transport=transport,
        )

    async def get_token(self, contact_id: str) -> AuthToken:
        """Request a token; raise :class:`AuthError` on any failure."""

        body = {
            "grant_type": "password",
            "username": self._username,
            "password": self._password,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"basic {self._basic_auth_key}",
        }

        try:
            async with create_async_client(self._transport) as client:
                response = await send_request(
                    client,
                    "POST",
                    self._token_url,
                    error=AuthError,
                    contact_id=contact_id,
                    json=body,
                    headers=headers,
                )
            payload = read_json(response, error=AuthError, contact_id=contact_id)
            token = _parse_token(payload)
            if token is None:
                raise AuthError(contact_id, "Missing token and/or uri")
        except AuthError as exc:
            logger.error(
                "contact_id=%s stage=token - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "token"),
            )
            raise

        logger.info(
            "contact_id=%s stage=token - token received",
            contact_id,
            extra=job_context(contact_id, "token"),
        )
        return token


def _parse_token(payload: Any) -> AuthToken | None:
    if not isinstance(payload, Mapping):
        return None
    access_token = payload.get("access_token")
    base_uri = payload.get("resource_server_base_uri")
    if not isinstance(access_token, str) or not access_token:
        return None
    if not isinstance(base_uri, str) or not base_uri:
        return None
    return AuthToken(access_token=access_token, base_uri=base_uri)


class RecordingClient:
    """Fetch and delete recording files through the InContact files API."""

    def __init__(
        self,
        *,
        version: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._version = version
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: IncontactConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "RecordingClient":
        config = config or settings.incontact
        return cls(version=config.version, transport=transport)

    def files_url(self, base_uri: str, file_name: str) -> str:
        """Build the files endpoint URL for ``file_name`` under ``base_uri``."""

        return (
            f"{base_uri.rstrip('/')}/services/{self._version}/files"
            f"?fileName={quote(file_name, safe='')}"
        )

    async def fetch_file(
        self,
        contact_id: str,
        token: AuthToken,
        file_name: str,
    ) -> Mapping[str, Any]:
        """Return the ``files`` object describing ``file_name``, unchanged."""

        url = self.files_url(token.base_uri, file_name)
        try:
            async with create_async_client(self._transport) as client:
                response = await send_request(
                    client,
                    "GET",
                    url,
                    error=FetchError,
                    contact_id=contact_id,
                    headers={"Authorization": f"bearer {token.access_token}"},
                )
            payload = read_json(response, error=FetchError, contact_id=contact_id)
            files = payload.get("files") if isinstance(payload, Mapping) else None
            if not isinstance(files, Mapping):
                raise FetchError(contact_id, "Missing files object")
        except FetchError as exc:
            logger.error(
                "contact_id=%s stage=fetch - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "fetch"),
            )
            raise

        file_field = files.get("file")
        logger.info(
            "contact_id=%s stage=fetch - length:%s",
            contact_id,
            len(file_field) if isinstance(file_field, (str, list)) else "-",
            extra=job_context(contact_id, "fetch"),
        )
        return files

    @staticmethod
    def audio_payload(contact_id: str, files: Mapping[str, Any]) -> str:
        """Extract the base64 audio carried in a fetched ``files`` object."""

        audio = files.get("file")
        if not isinstance(audio, str) or not audio:
            exc = FetchError(contact_id, "Missing file content")
            logger.error(
                "contact_id=%s stage=fetch - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "fetch"),
            )
            raise exc
        return audio

    async def delete_file(
        self,
        contact_id: str,
        token: AuthToken,
        file_name: str,
    ) -> str:
        """Delete ``file_name`` and return the response status text."""

        url = self.files_url(token.base_uri, file_name)
        try:
            async with create_async_client(self._transport) as client:
                response = await send_request(
                    client,
                    "DELETE",
                    url,
                    error=DeleteError,
                    contact_id=contact_id,
                    headers={"Authorization": f"bearer {token.access_token}"},
                )
        except DeleteError as exc:
            logger.error(
                "contact_id=%s stage=delete - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "delete"),
            )
            raise

        logger.info(
            "contact_id=%s stage=delete - file deleted",
            contact_id,
            extra=job_context(contact_id, "delete"),
        )
        return response.reason_phrase


__all__ = ["AuthToken", "TokenProvider", "RecordingClient"]
