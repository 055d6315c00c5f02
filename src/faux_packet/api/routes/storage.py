"""
Block storage endpoints.

Volumes are created and listed under a project; attachments bind a volume
to a device and are detached by attachment ID.
"""

from fastapi import APIRouter, HTTPException, Response, status

from faux_packet.api.deps import ListOptionsDep, StoreDep
from faux_packet.models.common import ListMeta
from faux_packet.models.volume import (
    Volume,
    VolumeAttachment,
    VolumeAttachRequest,
    VolumeCreate,
    VolumeList,
)

router = APIRouter()


@router.get("/projects/{project_id}/storage", response_model=VolumeList)
async def list_volumes(
    project_id: str,
    store: StoreDep,
    options: ListOptionsDep,
) -> VolumeList:
    """
    List the volumes of a project.

    Volumes are ordered by ID; ``page`` is a start offset and ``per_page``
    limits the number returned.
    """
    volumes, total = store.list_volumes(project_id, options)
    return VolumeList(volumes=volumes, meta=ListMeta(total=total))


@router.post(
    "/projects/{project_id}/storage",
    response_model=Volume,
    status_code=status.HTTP_201_CREATED,
)
async def create_volume(project_id: str, request: VolumeCreate, store: StoreDep) -> Volume:
    """Create a volume."""
    return store.create_volume(project_id, request)


@router.get("/storage/attachments/{attachment_id}", response_model=VolumeAttachment)
async def get_attachment(attachment_id: str, store: StoreDep) -> VolumeAttachment:
    """Get an attachment by ID."""
    attachment = store.get_attachment(attachment_id)
    if not attachment:
        raise HTTPException(status_code=404, detail=f"Attachment {attachment_id} not found")
    return attachment


@router.delete("/storage/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def detach_volume(attachment_id: str, store: StoreDep) -> Response:
    """Detach a volume by removing its attachment."""
    if not store.detach_volume(attachment_id):
        raise HTTPException(status_code=404, detail=f"Attachment {attachment_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/storage/{volume_id}", response_model=Volume)
async def get_volume(volume_id: str, store: StoreDep) -> Volume:
    """Get a volume by ID."""
    volume = store.get_volume(volume_id)
    if not volume:
        raise HTTPException(status_code=404, detail=f"Volume {volume_id} not found")
    return volume


@router.delete("/storage/{volume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_volume(volume_id: str, store: StoreDep) -> Response:
    """Delete a volume, detaching it from every device."""
    if not store.delete_volume(volume_id):
        raise HTTPException(status_code=404, detail=f"Volume {volume_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/storage/{volume_id}/attachments", response_model=VolumeAttachment)
async def attach_volume(
    volume_id: str,
    request: VolumeAttachRequest,
    store: StoreDep,
) -> VolumeAttachment:
    """
    Attach a volume to a device.

    Responds 404 when either the volume or the device does not exist.
    """
    attachment = store.attach_volume(volume_id, request.device_id)
    if not attachment:
        raise HTTPException(
            status_code=404,
            detail=f"Volume {volume_id} or device {request.device_id} not found",
        )
    return attachment
