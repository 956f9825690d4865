from __future__ import annotations

from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")

FailureReason = Literal["transport", "timeout", "status", "parse"]


class FetchError(BaseModel):
    reason: FailureReason
    detail: str
    url: str = ""


class FetchResult(BaseModel, Generic[ItemT]):
    """Outcome of one retrieval: either the fetched items or why it failed.

    A failed result always has an empty ``items`` list, so an empty collection
    alone does not tell a caller whether the fetch worked. Check ``ok``.
    """

    items: List[ItemT] = []
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, items: List[ItemT]) -> "FetchResult[ItemT]":
        return cls(items=items)

    @classmethod
    def failure(cls, reason: FailureReason, detail: str, url: str = "") -> "FetchResult[ItemT]":
        return cls(error=FetchError(reason=reason, detail=detail, url=url))
