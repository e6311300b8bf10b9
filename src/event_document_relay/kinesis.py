from __future__ import annotations

import json
import logging
import time
from collections import deque
from typing import Any, Protocol

import boto3

from event_document_relay.errors import RecordDecodeError, StreamClosedError
from event_document_relay.models import InboundRecord

LOGGER = logging.getLogger(__name__)


class KinesisClient(Protocol):
    def get_shard_iterator(
        self,
        *,
        StreamName: str,
        ShardId: str,
        ShardIteratorType: str,
    ) -> dict[str, Any]:
        ...

    def get_records(self, *, ShardIterator: str, Limit: int) -> dict[str, Any]:
        ...


def create_kinesis_client(*, region_name: str) -> KinesisClient:
    return boto3.client("kinesis", region_name=region_name)


class KinesisConsumer:
    """Reads JSON records from one Kinesis shard, one record per ``receive``."""

    def __init__(
        self,
        *,
        client: KinesisClient,
        stream_name: str,
        shard_id: str,
        iterator_type: str = "LATEST",
        limit: int = 100,
        poll_interval_s: float = 1.0,
    ) -> None:
        if limit <= 0:
            raise ValueError("limit must be > 0")
        if poll_interval_s <= 0:
            raise ValueError("poll_interval_s must be > 0")

        self._client = client
        self._stream_name = stream_name
        self._shard_id = shard_id
        self._iterator_type = iterator_type
        self._limit = limit
        self._poll_interval_s = poll_interval_s
        self._iterator: str | None = None
        self._closed = False
        self._fetched: deque[dict[str, Any]] = deque()

    def receive(self) -> InboundRecord:
        while not self._fetched:
            if self._closed:
                raise StreamClosedError(
                    f"Shard {self._shard_id} of stream {self._stream_name} is closed"
                )
            if not self._fetch() and not self._closed:
                time.sleep(self._poll_interval_s)

        return decode_record(self._fetched.popleft())

    def _fetch(self) -> bool:
        if self._iterator is None:
            response = self._client.get_shard_iterator(
                StreamName=self._stream_name,
                ShardId=self._shard_id,
                ShardIteratorType=self._iterator_type,
            )
            self._iterator = response["ShardIterator"]

        response = self._client.get_records(ShardIterator=self._iterator, Limit=self._limit)
        records = response.get("Records", [])
        next_iterator = response.get("NextShardIterator")
        if next_iterator is None:
            self._closed = True
        else:
            self._iterator = next_iterator

        LOGGER.debug(
            "kinesis_get_records",
            extra={
                "stream_name": self._stream_name,
                "shard_id": self._shard_id,
                "record_count": len(records),
                "millis_behind_latest": response.get("MillisBehindLatest"),
            },
        )
        self._fetched.extend(records)
        return bool(records)


def decode_record(raw: dict[str, Any]) -> InboundRecord:
    sequence_number = str(raw.get("SequenceNumber", ""))
    data = raw.get("Data", b"")
    if isinstance(data, str):
        data = data.encode("utf-8")

    try:
        body = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RecordDecodeError(
            f"Record {sequence_number} is not a UTF-8 JSON document"
        ) from exc

    return InboundRecord(
        body=body,
        sequence_number=sequence_number,
        partition_key=str(raw.get("PartitionKey", "")),
        arrived_at=raw.get("ApproximateArrivalTimestamp"),
    )
