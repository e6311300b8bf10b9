from __future__ import annotations

import logging
import os
from typing import Any

from event_document_relay.cosmos import CosmosDocumentSink
from event_document_relay.kinesis import KinesisConsumer, create_kinesis_client
from event_document_relay.relay import Consumer, Relay
from event_document_relay.settings import Settings, resolve_credential
from event_document_relay.transforms import resolve_function

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_relay(settings: Settings) -> tuple[Relay[Any, Any], Consumer]:
    config = settings.relay_config
    transform = resolve_function(settings.function_name)

    sink = CosmosDocumentSink.from_connection_string(
        resolve_credential(config.credential_ref),
        database=config.sink_database,
        collection=config.sink_collection,
        create_if_missing=config.create_if_missing,
        partition_key_path=settings.sink_partition_key_path,
    )
    consumer = KinesisConsumer(
        client=create_kinesis_client(region_name=settings.aws_region),
        stream_name=config.stream_name,
        shard_id=settings.shard_id,
        iterator_type=settings.shard_iterator_type,
        limit=settings.get_records_limit,
        poll_interval_s=settings.poll_interval_s,
    )
    return Relay(transform=transform, sink=sink), consumer


def run(*, max_invocations: int | None = None) -> int:
    """Invoke the relay once per incoming record until stopped.

    Returns the number of completed invocations. A failed invocation ends the
    loop by re-raising its error.
    """

    configure_logging()
    settings = Settings()
    relay, consumer = build_relay(settings)

    LOGGER.info(
        "service_start",
        extra={
            "stream_name": settings.stream_name,
            "sink_database": settings.sink_database,
            "sink_collection": settings.sink_collection,
            "function_name": settings.function_name,
        },
    )

    completed = 0
    while max_invocations is None or completed < max_invocations:
        relay.invoke(consumer, function_name=settings.function_name)
        completed += 1

    LOGGER.info("service_stop", extra={"invocations": completed})
    return completed
