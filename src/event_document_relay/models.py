from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _new_invocation_id() -> str:
    return uuid4().hex


class InboundRecord(BaseModel):
    """Single decoded record delivered by an event source."""

    model_config = ConfigDict(frozen=True)

    body: Any
    sequence_number: str
    partition_key: str
    arrived_at: datetime | None = None


class InvocationContext(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    invocation_id: str = Field(default_factory=_new_invocation_id)
    function_name: str
    logger: logging.Logger

    @classmethod
    def new(cls, *, function_name: str, logger: logging.Logger) -> InvocationContext:
        return cls(function_name=function_name, logger=logger)


class WriteResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_id: str
    request_charge: float | None = None
