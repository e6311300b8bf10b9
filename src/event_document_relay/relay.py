from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from event_document_relay.models import InboundRecord, InvocationContext, WriteResult

LOGGER = logging.getLogger(__name__)

InT = TypeVar("InT")
OutT = TypeVar("OutT")
OutT_contra = TypeVar("OutT_contra", contravariant=True)


class Consumer(Protocol):
    def receive(self) -> InboundRecord:
        ...


class Sink(Protocol[OutT_contra]):
    def write(self, record: OutT_contra) -> WriteResult:
        ...


class Relay(Generic[InT, OutT]):
    """Passes one input record through a transformation into a document sink.

    The relay is stateless between invocations. Transformation and sink
    errors reach the caller unchanged and nothing is retried here.
    """

    def __init__(self, *, transform: Callable[[InT], OutT | None], sink: Sink[OutT]) -> None:
        self._transform = transform
        self._sink = sink

    def handle(self, record: InT, context: InvocationContext) -> OutT | None:
        log = context.logger
        fields = {
            "invocation_id": context.invocation_id,
            "function_name": context.function_name,
        }

        output = self._transform(record)
        if output is None:
            log.info("invocation_no_output", extra=fields)
            return None

        result = self._sink.write(output)
        log.info(
            "invocation_complete",
            extra={**fields, "document_id": result.document_id},
        )
        return output

    def invoke(self, consumer: Consumer, *, function_name: str) -> OutT | None:
        context = InvocationContext.new(function_name=function_name, logger=LOGGER)
        sequence_number: str | None = None

        try:
            inbound = consumer.receive()
            sequence_number = inbound.sequence_number
            LOGGER.debug(
                "invocation_start",
                extra={
                    "invocation_id": context.invocation_id,
                    "sequence_number": sequence_number,
                    "partition_key": inbound.partition_key,
                },
            )
            return self.handle(inbound.body, context)
        except Exception:
            # sequence_number stays None when the record itself could not be received.
            LOGGER.exception(
                "invocation_failed",
                extra={
                    "invocation_id": context.invocation_id,
                    "sequence_number": sequence_number,
                },
            )
            raise
