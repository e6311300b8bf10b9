from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol
from uuid import uuid4

from azure.cosmos import CosmosClient, PartitionKey
from pydantic import BaseModel

from event_document_relay.models import WriteResult

LOGGER = logging.getLogger(__name__)


class ContainerClient(Protocol):
    client_connection: Any

    def upsert_item(self, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        ...


def open_container(
    client: Any,
    *,
    database: str,
    collection: str,
    create_if_missing: bool,
    partition_key_path: str = "/id",
) -> ContainerClient:
    """Return the container client, creating database and container when allowed."""

    if create_if_missing:
        database_client = client.create_database_if_not_exists(id=database)
        container = database_client.create_container_if_not_exists(
            id=collection,
            partition_key=PartitionKey(path=partition_key_path),
        )
        LOGGER.info(
            "cosmos_container_ready",
            extra={"database": database, "collection": collection},
        )
        return container

    database_client = client.get_database_client(database)
    return database_client.get_container_client(collection)


def to_document(record: Any) -> dict[str, Any]:
    if isinstance(record, BaseModel):
        document = record.model_dump(mode="json")
    elif isinstance(record, Mapping):
        document = dict(record)
    else:
        raise TypeError(f"Cannot store {type(record).__name__} as a document")

    # Cosmos requires a string id on every item.
    if document.get("id") is None:
        document["id"] = str(uuid4())
    else:
        document["id"] = str(document["id"])
    return document


class CosmosDocumentSink:
    def __init__(self, *, container: ContainerClient) -> None:
        self._container = container

    @classmethod
    def from_connection_string(
        cls,
        connection_string: str,
        *,
        database: str,
        collection: str,
        create_if_missing: bool,
        partition_key_path: str = "/id",
    ) -> CosmosDocumentSink:
        client = CosmosClient.from_connection_string(connection_string)
        container = open_container(
            client,
            database=database,
            collection=collection,
            create_if_missing=create_if_missing,
            partition_key_path=partition_key_path,
        )
        return cls(container=container)

    def write(self, record: Any) -> WriteResult:
        document = to_document(record)
        stored = self._container.upsert_item(body=document)
        document_id = str((stored or {}).get("id", document["id"]))
        request_charge = _request_charge(self._container.client_connection.last_response_headers)
        LOGGER.debug(
            "cosmos_document_upserted",
            extra={"document_id": document_id, "request_charge": request_charge},
        )
        return WriteResult(document_id=document_id, request_charge=request_charge)


def _request_charge(headers: Mapping[str, Any] | None) -> float | None:
    value = (headers or {}).get("x-ms-request-charge")
    if value is None:
        return None
    return float(value)
