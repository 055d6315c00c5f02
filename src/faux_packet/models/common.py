"""
Shared model pieces: entity references, list metadata and list options.
"""

from pydantic import BaseModel, Field


class Href(BaseModel):
    """Reference to another entity, as the Packet API embeds them."""

    id: str = Field(description="Referenced entity ID")
    href: str = Field(description="API path of the referenced entity")


class ListMeta(BaseModel):
    """Collection metadata returned alongside paginated listings."""

    total: int = Field(default=0, description="Number of entities before slicing")


class ListOptions(BaseModel):
    """
    Pagination options of a listing.

    ``page`` is a start offset into the id-ordered collection, not a page
    number; ``per_page`` of zero or less means no limit.
    """

    page: int | None = Field(default=None, description="Start offset")
    per_page: int | None = Field(default=None, description="Maximum entries returned")
