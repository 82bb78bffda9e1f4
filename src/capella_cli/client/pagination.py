"""Cursor-based pagination over Capella list endpoints.

Every list endpoint answers with ``{"data": [...], "cursor": {...}}``;
:func:`get_paginated` follows ``cursor.pages.next`` until it is zero and
returns the concatenated ``data`` in fetch order.
"""

from __future__ import annotations

import enum
from typing import Any, Generic, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from capella_cli.client.context import CallContext
from capella_cli.client.errors import (
    ERR_UNMARSHALLING_RESPONSE,
    CapellaError,
    DecodeError,
    PaginationError,
    RequestExecutionError,
)
from capella_cli.client.executor import EndpointCfg, RetryingExecutor
from capella_cli.config.constants import DEFAULT_MAX_PAGES, DEFAULT_PER_PAGE

T = TypeVar("T")


class SortBy(str, enum.Enum):
    """Sort keys accepted by list endpoints."""

    ID = "id"
    NAME = "name"


class Pages(BaseModel):
    """Position of one page inside the full result set."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = 0
    next: int = 0
    previous: int = 0
    last: int = 0
    per_page: int = Field(default=0, alias="perPage")
    total_items: int = Field(default=0, alias="totalItems")

    @field_validator("page", "next", "previous", "last", "per_page", "total_items", mode="before")
    @classmethod
    def _null_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class HRefs(BaseModel):
    """Navigation links for the neighbouring pages."""

    first: str = ""
    last: str = ""
    previous: str = ""
    next: str = ""

    @field_validator("first", "last", "previous", "next", mode="before")
    @classmethod
    def _null_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Cursor(BaseModel):
    hrefs: HRefs = Field(default_factory=HRefs)
    pages: Pages = Field(default_factory=Pages)

    @property
    def is_last(self) -> bool:
        return self.pages.next == 0


class Envelope(BaseModel, Generic[T]):
    """Wrapper returned by every paginated endpoint."""

    data: list[T] = Field(default_factory=list)
    cursor: Cursor = Field(default_factory=Cursor)

    @field_validator("data", "cursor", mode="before")
    @classmethod
    def _null_is_default(cls, v: Any, info: pydantic.ValidationInfo) -> Any:
        if v is None:
            return [] if info.field_name == "data" else {}
        return v


def get_paginated(
    ctx: CallContext,
    executor: RetryingExecutor,
    token: str | None,
    cfg: EndpointCfg,
    item_type: type[T] = dict,  # type: ignore[assignment]
    sort_by: SortBy | str | None = None,
    *,
    per_page: int = DEFAULT_PER_PAGE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[T]:
    """Fetch every page of a list endpoint and return all items in order.

    The call is all-or-nothing: any failure raises and no partial list is
    returned.

    Raises:
        RequestExecutionError: a page request failed (cause chained).
        DecodeError: a page body was not a valid envelope.
        PaginationError: the server revisited a page or exceeded *max_pages*.
    """
    adapter: TypeAdapter[Envelope[Any]] = TypeAdapter(Envelope[item_type])  # type: ignore[valid-type]
    sort_key = sort_by.value if isinstance(sort_by, SortBy) else sort_by
    results: list[T] = []
    visited: set[int] = set()
    page = 1
    while True:
        if page in visited:
            raise PaginationError(f"server returned page {page} twice for {cfg.url}")
        if len(visited) >= max_pages:
            raise PaginationError(f"more than {max_pages} pages returned for {cfg.url}")
        visited.add(page)

        page_cfg = cfg.model_copy(update={"method": "GET"}).with_query(
            page=page, perPage=per_page, sortBy=sort_key or None,
        )
        try:
            outcome = executor.execute(ctx, page_cfg, None, token)
        except CapellaError as exc:
            raise RequestExecutionError(exc) from exc

        try:
            envelope = adapter.validate_json(outcome.body)
        except pydantic.ValidationError as exc:
            raise DecodeError(f"{ERR_UNMARSHALLING_RESPONSE}: {exc}") from exc

        results.extend(envelope.data)
        if envelope.cursor.is_last:
            return results
        page = envelope.cursor.pages.next
