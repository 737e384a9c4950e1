"""HTTP client for the search cluster's index and template APIs."""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from indexsync.adapters.http_resilience import ResilientClient
from indexsync.domain.errors import AcknowledgementError, IndexNotFoundError, TransportError

from .schema import (
    AcknowledgedResponse,
    CatIndexRow,
    ErrorResponse,
    MappingResponse,
    SettingsResponse,
)

if TYPE_CHECKING:
    from types import TracebackType

    from indexsync.config.cluster import ClusterConfig
    from indexsync.domain.ports import DeclarativeCluster
    from indexsync.domain.reconciliation.contracts import JsonObject

log = getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}
_INDEX_NOT_FOUND = "index_not_found_exception"


class TemplateApi(StrEnum):
    """Endpoint family used for index templates."""

    COMPOSABLE = "_index_template"
    LEGACY = "_template"


def _path(*segments: str) -> str:
    return "/" + "/".join(quote(segment, safe=",*") for segment in segments)


class ClusterClient:
    """Cluster state reader and writer backed by a retrying ``httpx`` client.

    Reads are never cached. Every call goes to the cluster, so consecutive
    reconciliations always see the current state.
    """

    def __init__(
        self,
        config: ClusterConfig,
        *,
        template_api: TemplateApi | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.template_api = template_api or (
            TemplateApi.LEGACY if config.legacy_templates else TemplateApi.COMPOSABLE
        )
        self._http = ResilientClient(config.resilience, transport=transport)

    def __enter__(self) -> ClusterClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # state reader

    def exists(self, name: str) -> bool:
        return self._exists(_path(name), name)

    def get_mapping(self, name: str) -> JsonObject:
        response = self._checked("GET", _path(name, "_mapping"), name=name)
        payload = self._parse(response, MappingResponse)
        return payload.entry_for(name).mappings

    def get_settings(self, name: str, path_filter: str) -> JsonObject:
        segments = (name, "_settings", path_filter) if path_filter else (name, "_settings")
        response = self._checked("GET", _path(*segments), name=name)
        payload = self._parse(response, SettingsResponse)
        return payload.entry_for(name).settings.index

    def creation_date(self, name: str) -> int:
        """Return the index creation time in epoch milliseconds."""

        response = self._checked(
            "GET",
            _path("_cat", "indices", name),
            name=name,
            params={"h": "index,creation.date", "format": "json"},
        )
        rows = self._parse_json(response)
        if not isinstance(rows, list) or not rows:
            raise TransportError(f"No creation date reported for index [{name}]")
        return CatIndexRow.model_validate(rows[0]).creation_date

    # index writer

    def create_index(self, name: str, body: str | None) -> None:
        self._acknowledged("PUT", _path(name), name=name, operation="create index", body=body)

    def delete_index(self, name: str) -> None:
        self._acknowledged("DELETE", _path(name), name=name, operation="delete index")

    def update_settings(self, name: str, body: str) -> None:
        log.debug("Updating settings for index [%s]", name)
        self._acknowledged(
            "PUT",
            _path(name, "_settings"),
            name=name,
            operation="update settings of index",
            body=body,
        )

    # template gateway

    def template_exists(self, name: str) -> bool:
        return self._exists(_path(self.template_api.value, name), name)

    def put_template(self, name: str, body: str) -> None:
        self._acknowledged(
            "PUT",
            _path(self.template_api.value, name),
            name=name,
            operation="put template",
            body=body,
        )

    # plumbing

    def _send(
        self,
        method: str,
        path: str,
        *,
        body: str | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        log.debug("%s %s", method, path)
        try:
            if body is None:
                return self._http.request(method, path, params=params)
            return self._http.request(
                method, path, params=params, content=body.encode("utf-8"), headers=_JSON_HEADERS
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

    def _exists(self, path: str, name: str) -> bool:
        response = self._send("HEAD", path)
        if response.status_code == httpx.codes.OK:
            return True
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        raise TransportError(
            f"Unexpected status {response.status_code} checking whether [{name}] exists",
            status_code=response.status_code,
        )

    def _checked(
        self,
        method: str,
        path: str,
        *,
        name: str,
        body: str | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        response = self._send(method, path, body=body, params=params)
        if response.is_success:
            return response

        error = _error_payload(response)
        reason = error.reason if error is not None else response.reason_phrase
        message = f"{method} {path} returned {response.status_code}: {reason}"
        log.warning("%s", message)
        if response.status_code == httpx.codes.NOT_FOUND and (
            error is None or error.error_type == _INDEX_NOT_FOUND
        ):
            raise IndexNotFoundError(f"Index [{name}] not found: {reason}", status_code=404)
        raise TransportError(message, status_code=response.status_code)

    def _acknowledged(
        self,
        method: str,
        path: str,
        *,
        name: str,
        operation: str,
        body: str | None = None,
    ) -> None:
        response = self._checked(method, path, name=name, body=body)
        result = self._parse(response, AcknowledgedResponse)
        if not result.acknowledged:
            log.warning("Could not %s [%s]", operation, name)
            raise AcknowledgementError(name, operation)

    def _parse_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed JSON from {response.request.method} {response.request.url.path}",
                status_code=response.status_code,
            ) from exc

    def _parse[M: BaseModel](self, response: httpx.Response, model: type[M]) -> M:
        try:
            return model.model_validate(self._parse_json(response))
        except ValidationError as exc:
            raise TransportError(
                f"Unexpected payload from {response.request.method} {response.request.url.path}",
                status_code=response.status_code,
            ) from exc


def _error_payload(response: httpx.Response) -> ErrorResponse | None:
    try:
        return ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return None


if TYPE_CHECKING:

    def _cluster_check(client: ClusterClient) -> DeclarativeCluster:
        return client
