"""Shared typed return types for backend services."""

from typing import Literal, TypedDict

from notehub.models.note import Note

Visibility = Literal["public", "private"]
VoteChoice = Literal["upvote", "downvote"]
SortMode = Literal["latest", "top", "bottom"]


class VoteTally(TypedDict):
    upvotes: int
    downvotes: int


class CatalogPage(TypedDict):
    items: list[Note]
    total: int
    page: int
    page_size: int
    page_count: int
