from __future__ import annotations

import os
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from event_document_relay.errors import RelayConfigurationError

_ENV_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class RelayConfig(BaseModel):
    """Where the relay reads from and writes to."""

    model_config = ConfigDict(frozen=True)

    stream_name: str
    sink_database: str
    sink_collection: str
    create_if_missing: bool = True
    credential_ref: str

    @field_validator("stream_name", "sink_database", "sink_collection")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value

    @field_validator("credential_ref")
    @classmethod
    def _validate_credential_ref(cls, value: str) -> str:
        # References an environment variable; the secret itself never lives in config.
        if not _ENV_NAME_PATTERN.fullmatch(value):
            raise ValueError("credential_ref must be an environment variable name")
        return value


def resolve_credential(ref: str) -> str:
    value = os.environ.get(ref, "").strip()
    if not value:
        raise RelayConfigurationError(
            f"Credential environment variable '{ref}' is missing or empty"
        )
    return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    stream_name: str = Field(default="events", alias="STREAM_NAME")
    sink_database: str = Field(default="inventory", alias="SINK_DATABASE")
    sink_collection: str = Field(default="messages", alias="SINK_COLLECTION")
    sink_create_if_missing: bool = Field(default=True, alias="SINK_CREATE_IF_MISSING")
    sink_credential_ref: str = Field(
        default="PRODUCT_ITEMS_DOCUMENTDB_CONNECTION_STRING",
        alias="SINK_CREDENTIAL_REF",
    )
    sink_partition_key_path: str = Field(default="/id", alias="SINK_PARTITION_KEY_PATH")

    function_name: str = Field(default="uppercase", alias="FUNCTION_NAME")

    aws_region: str = Field(alias="AWS_REGION")
    shard_id: str = Field(default="shardId-000000000000", alias="SHARD_ID")
    shard_iterator_type: Literal["LATEST", "TRIM_HORIZON"] = Field(
        default="LATEST",
        alias="SHARD_ITERATOR_TYPE",
    )
    poll_interval_s: float = Field(default=1.0, alias="POLL_INTERVAL_S")
    get_records_limit: int = Field(default=100, alias="GET_RECORDS_LIMIT")

    @field_validator("sink_partition_key_path")
    @classmethod
    def _validate_partition_key_path(cls, value: str) -> str:
        if not value.startswith("/") or len(value) < 2:
            raise ValueError("SINK_PARTITION_KEY_PATH must look like '/field'")
        return value

    @field_validator("poll_interval_s")
    @classmethod
    def _validate_poll_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("POLL_INTERVAL_S must be > 0")
        return value

    @field_validator("get_records_limit")
    @classmethod
    def _validate_records_limit(cls, value: int) -> int:
        if value < 1 or value > 10_000:
            raise ValueError("GET_RECORDS_LIMIT must be between 1 and 10_000")
        return value

    @property
    def relay_config(self) -> RelayConfig:
        return RelayConfig(
            stream_name=self.stream_name,
            sink_database=self.sink_database,
            sink_collection=self.sink_collection,
            create_if_missing=self.sink_create_if_missing,
            credential_ref=self.sink_credential_ref,
        )
