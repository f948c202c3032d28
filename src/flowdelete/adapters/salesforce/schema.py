"""Pydantic models describing ``sf data query --json`` output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SalesforceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FlowDefinitionRef(SalesforceBaseModel):
    developer_name: str = Field(alias="DeveloperName")


class FlowVersionRecord(SalesforceBaseModel):
    id: str | None = Field(default=None, alias="Id")
    definition: FlowDefinitionRef = Field(alias="Definition")
    version_number: int = Field(alias="VersionNumber")
    status: str = Field(default="", alias="Status")

    @field_validator("status", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class QueryResult(SalesforceBaseModel):
    # records are validated one at a time so a bad record does not sink the batch
    records: list[Any] = Field(default_factory=list)
    total_size: int | None = Field(default=None, alias="totalSize")
    done: bool = True


class QueryResponse(SalesforceBaseModel):
    status: int
    result: QueryResult | None = None
    name: str | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == 0 and self.result is not None

    def error_detail(self) -> str:
        detail = self.message or self.name or "no message"
        return f"status {self.status}: {detail}"
