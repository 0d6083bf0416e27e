"""
HTTP Registry Session

Cursor access to a remote variable server over its JSON/HTTP API.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from varquery.config.settings import Config, get_log_level
from varquery.query.types import (
    Cursor,
    Found,
    InvalidArgument,
    MatchResult,
    NotFound,
    RegistryReply,
    SearchSpecification,
    TransportError,
)
from varquery.registry.session import RegistrySession
from varquery.utils import Logger


def spec_to_payload(spec: SearchSpecification) -> Dict[str, Any]:
    """Serialize a specification for the query endpoints."""
    return {
        "type": spec.mask,
        "criteria": sorted(kind.name for kind in spec.criteria),
        "match": spec.name_pattern,
        "tagspec": spec.tag_spec,
        "flags": spec.flags_mask,
        "instance_id": spec.instance_id,
    }


class HttpRegistrySession(RegistrySession):
    """
    Registry session backed by httpx.

    Endpoints:
    - POST /query/first  -> 200 match | 404 none | 400/422 rejected
    - POST /query/next   -> same, body also carries the cursor
    - GET  /vars/{handle}/value -> value as text
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        logger: Optional[Logger] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.logger = logger or Logger("varquery-registry", level=get_log_level())
        self._owns_client = client is None
        self.client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: Config, logger: Optional[Logger] = None) -> "HttpRegistrySession":
        """Open a session against the configured variable server."""
        return cls(config.server_url, timeout=config.request_timeout, logger=logger)

    def get_first(self, spec: SearchSpecification) -> RegistryReply:
        return self._query("/query/first", spec_to_payload(spec))

    def get_next(self, spec: SearchSpecification, cursor: Cursor) -> RegistryReply:
        payload = spec_to_payload(spec)
        payload["cursor"] = cursor.position
        return self._query("/query/next", payload)

    def render_value(self, handle: Any, sink) -> None:
        response = self._request("GET", f"/vars/{quote(str(handle), safe='')}/value")
        if response.status_code != 200:
            raise TransportError(
                f"Value request for handle {handle} failed with HTTP {response.status_code}"
            )
        sink.write(response.text)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            return self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            self.logger.error(f"Variable server request {method} {path} failed: {e}")
            raise TransportError(f"Variable server unreachable at {self.base_url}: {e}") from e

    def _query(self, path: str, payload: Dict[str, Any]) -> RegistryReply:
        response = self._request("POST", path, json=payload)

        if response.status_code == 404:
            return NotFound()

        if response.status_code in (400, 422):
            return InvalidArgument(_error_message(response))

        if response.status_code != 200:
            raise TransportError(
                f"Unexpected HTTP {response.status_code} from {path}: {_error_message(response)}"
            )

        try:
            data = response.json()
            match = MatchResult(
                name=data["name"],
                instance_id=int(data.get("instance_id") or 0),
                handle=data.get("handle"),
            )
            cursor = Cursor(position=data["cursor"])
        except (ValueError, KeyError, TypeError) as e:
            raise TransportError(f"Malformed reply from {path}: {e}") from e

        return Found(match=match, cursor=cursor)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.text
