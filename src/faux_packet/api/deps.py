"""
API dependencies.

The store and the metadata device live on ``app.state`` so every app
built by ``create_app`` owns its own graph.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request, status

from faux_packet.exceptions import InvalidListOptionsError
from faux_packet.models.common import ListOptions
from faux_packet.services.metadata import MetadataProjector
from faux_packet.services.pagination import parse_list_options
from faux_packet.services.store import MemoryStore


def get_store(request: Request) -> MemoryStore:
    """The store owned by the running application."""
    return request.app.state.store


def get_metadata_projector(
    request: Request,
    store: Annotated[MemoryStore, Depends(get_store)],
) -> MetadataProjector:
    """Projector bound to the deployment's metadata device."""
    return MetadataProjector(store, request.app.state.metadata_device)


def get_list_options(
    page: Annotated[str | None, Query(description="Start offset")] = None,
    per_page: Annotated[str | None, Query(description="Page size")] = None,
) -> ListOptions:
    """
    Parse pagination query parameters.

    Values are taken as strings so a bad numeral is reported with the
    offending parameter rather than as a generic validation failure.
    """
    try:
        return parse_list_options(page=page, per_page=per_page)
    except InvalidListOptionsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid query parameters: {e}",
        )


StoreDep = Annotated[MemoryStore, Depends(get_store)]
ListOptionsDep = Annotated[ListOptions, Depends(get_list_options)]
