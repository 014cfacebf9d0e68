"""Kubernetes ConfigMap backend over the REST API (httpx).

One record maps to one ConfigMap in a namespace. Connection details come
from the constructor, then the environment (a `.env` file is honoured), or
from a pre-configured `httpx.Client` supplied by the host.

Env:
- KV_K8S_API_URL: API server base URL (default: https://kubernetes.default.svc)
- KV_K8S_NAMESPACE: namespace (default: default)
- KV_K8S_TOKEN: bearer token
- KV_K8S_CA_CERT: CA bundle path used for TLS verification
- KV_K8S_TIMEOUT: request timeout in seconds (default: 10)
"""

from __future__ import annotations

import base64
from os import getenv
from typing import Any, Optional
from urllib.parse import quote

import httpx
from dotenv import load_dotenv

from backends.base import RecordBackend
from backends.types import Record, RecordNotFoundError
from common.logger import get_logger

load_dotenv()

DEFAULT_API_URL = "https://kubernetes.default.svc"
DEFAULT_NAMESPACE = "default"
DEFAULT_TIMEOUT = 10.0


def _is_text(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def record_to_configmap(record: Record) -> dict[str, Any]:
    """Build a v1 ConfigMap body from a record.

    Server metadata fetched with the record (annotations, ownerReferences,
    ...) is sent back, minus resourceVersion, so updates are unconditional
    replaces. Values holding escaped non-UTF-8 bytes go to binaryData.
    """
    metadata = dict(record.get("metadata") or {})
    metadata.pop("resourceVersion", None)
    metadata["name"] = record["name"]
    metadata["labels"] = dict(record.get("labels") or {})

    data: dict[str, str] = {}
    binary: dict[str, str] = {}
    for key, value in (record.get("data") or {}).items():
        if _is_text(value):
            data[key] = value
        else:
            raw = value.encode("utf-8", "surrogateescape")
            binary[key] = base64.b64encode(raw).decode("ascii")

    body: dict[str, Any] = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": metadata,
        "data": data,
    }
    if binary:
        body["binaryData"] = binary
    return body


def configmap_to_record(body: dict[str, Any]) -> Record:
    metadata = dict(body.get("metadata") or {})
    name = metadata.pop("name", "")
    labels = metadata.pop("labels", None)
    data = body.get("data")
    binary = body.get("binaryData")

    record_data: Optional[dict[str, str]] = dict(data) if data is not None else None
    if binary:
        record_data = record_data or {}
        for key, encoded in binary.items():
            raw = base64.b64decode(encoded)
            record_data[key] = raw.decode("utf-8", "surrogateescape")

    return {
        "name": name,
        "labels": dict(labels or {}),
        "data": record_data,
        "metadata": metadata,
    }


class ConfigMapBackend(RecordBackend):
    """Stores records as ConfigMaps (max ~1MB each, enforced by the API server)."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        namespace: Optional[str] = None,
        api_url: Optional[str] = None,
        token: Optional[str] = None,
        ca_cert: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.namespace = namespace or getenv("KV_K8S_NAMESPACE") or DEFAULT_NAMESPACE
        self._owns_client = client is None
        if client is None:
            client = self._build_client(api_url, token, ca_cert, timeout)
        self.client = client

    @staticmethod
    def _build_client(
        api_url: Optional[str],
        token: Optional[str],
        ca_cert: Optional[str],
        timeout: Optional[float],
    ) -> httpx.Client:
        base_url = api_url or getenv("KV_K8S_API_URL") or DEFAULT_API_URL
        token = token or getenv("KV_K8S_TOKEN")
        ca_cert = ca_cert or getenv("KV_K8S_CA_CERT")
        if timeout is None:
            raw = getenv("KV_K8S_TIMEOUT")
            try:
                timeout = float(raw) if raw else DEFAULT_TIMEOUT
            except ValueError:
                raise ValueError(f"Invalid KV_K8S_TIMEOUT: {raw!r}")

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return httpx.Client(
            base_url=base_url,
            headers=headers,
            verify=ca_cert or True,
            timeout=timeout,
        )

    def _collection_path(self) -> str:
        return f"/api/v1/namespaces/{quote(self.namespace, safe='')}/configmaps"

    def _item_path(self, name: str) -> str:
        return f"{self._collection_path()}/{quote(name, safe='')}"

    def fetch(self, name: str) -> Record:
        log = get_logger(__name__)
        resp = self.client.get(self._item_path(name))
        if resp.status_code == 404:
            log.debug("configmap backend: not found namespace=%s name=%s", self.namespace, name)
            raise RecordNotFoundError(name)
        resp.raise_for_status()
        return configmap_to_record(resp.json())

    def create(self, record: Record) -> Record:
        resp = self.client.post(self._collection_path(), json=record_to_configmap(record))
        resp.raise_for_status()
        get_logger(__name__).info(
            "configmap backend: created namespace=%s name=%s", self.namespace, record["name"]
        )
        return configmap_to_record(resp.json())

    def update(self, record: Record) -> Record:
        resp = self.client.put(self._item_path(record["name"]), json=record_to_configmap(record))
        resp.raise_for_status()
        return configmap_to_record(resp.json())

    def delete(self, name: str) -> None:
        resp = self.client.delete(self._item_path(name))
        resp.raise_for_status()
        get_logger(__name__).info(
            "configmap backend: deleted namespace=%s name=%s", self.namespace, name
        )

    def close(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "ConfigMapBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
