"""
Device metadata endpoint.

The endpoint has no way for the caller to say which device it is, so it
always describes the device chosen at deployment time.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from faux_packet.api.deps import get_metadata_projector
from faux_packet.models.metadata import DeviceMetadata
from faux_packet.services.metadata import MetadataProjector

router = APIRouter()


@router.get("/metadata", response_model=DeviceMetadata)
async def get_metadata(
    projector: Annotated[MetadataProjector, Depends(get_metadata_projector)],
) -> DeviceMetadata:
    """Storage topology of the configured metadata device."""
    view = projector.project()
    if view is None:
        raise HTTPException(status_code=404, detail="No metadata device configured or device not found")
    return view
