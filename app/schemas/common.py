"""Shared schema pieces: camelCase wire format and pagination envelope."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    total_items: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None = None
    prev_page: int | None = None
    limit: int


class MessageResponse(CamelModel):
    """Generic success message response."""
    message: str
