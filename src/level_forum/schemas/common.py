"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    """One page of a larger, newest-first or sorted result set."""

    items: list[ItemT] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Number of matching rows across all pages.")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
