"""Binding pydantic models tagged through ``json_schema_extra``."""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, List

import pytest
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from envbind import Duration, InvalidNumberError, process


class CollectionSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    request_timeout: timedelta = Field(
        default=timedelta(seconds=30),
        json_schema_extra={"env": "key=COLLECTOR_TIMEOUT"},
    )
    max_concurrent_requests: PositiveInt = Field(
        default=8,
        json_schema_extra={"env": "key=COLLECTOR_CONCURRENCY"},
    )
    languages: List[str] = Field(
        default_factory=lambda: ["en"],
        json_schema_extra={"env": "key=COLLECTOR_LANGUAGES default=[en,es]"},
    )


class Settings(BaseModel):
    collection: CollectionSettings = Field(default_factory=CollectionSettings)
    domain_overrides: Dict[str, List[str]] = Field(
        default_factory=dict,
        json_schema_extra={"env": "key=DOMAIN_OVERRIDES decode=json default={}"},
    )
    poll_interval: Duration = Field(
        default=Duration(0),
        json_schema_extra={"env": "key=POLL_INTERVAL default=250ms"},
    )
    environment: str = "development"


class FrozenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", json_schema_extra={"env": "key=NAME"})


def test_model_fields_are_bound() -> None:
    environ = {
        "COLLECTOR_TIMEOUT": "45s",
        "COLLECTOR_CONCURRENCY": "16",
        "DOMAIN_OVERRIDES": "{example.org: [a, b]}",
    }
    settings = process(Settings(), environ=environ)
    assert settings.collection.request_timeout == timedelta(seconds=45)
    assert settings.collection.max_concurrent_requests == 16
    assert settings.collection.languages == ["en", "es"]
    assert settings.domain_overrides == {"example.org": ["a", "b"]}
    assert settings.poll_interval == 250_000_000
    assert settings.environment == "development"


def test_pydantic_constraints_are_enforced_before_assignment() -> None:
    settings = Settings()
    with pytest.raises(InvalidNumberError) as excinfo:
        process(settings, environ={"COLLECTOR_CONCURRENCY": "0"})
    assert excinfo.value.field == "collection.max_concurrent_requests"
    assert settings.collection.max_concurrent_requests == 8


def test_bound_model_still_validates() -> None:
    settings = process(Settings(), environ={"COLLECTOR_CONCURRENCY": "4"})
    dumped = settings.model_dump()
    assert dumped["collection"]["max_concurrent_requests"] == 4
    assert Settings.model_validate(dumped).collection.max_concurrent_requests == 4


def test_frozen_model_rejected() -> None:
    with pytest.raises(TypeError):
        process(FrozenSettings())
