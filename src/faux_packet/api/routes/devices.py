"""
Device endpoints.

Devices are created and listed under a project and addressed directly by
ID everywhere else.
"""

from fastapi import APIRouter, HTTPException, Response, status

from faux_packet.api.deps import ListOptionsDep, StoreDep
from faux_packet.exceptions import EntityNotFoundError, InvalidReferenceError
from faux_packet.models.common import ListMeta
from faux_packet.models.device import Device, DeviceCreate, DeviceList, DeviceUpdate

router = APIRouter()


@router.get("/projects/{project_id}/devices", response_model=DeviceList)
async def list_devices(
    project_id: str,
    store: StoreDep,
    options: ListOptionsDep,
) -> DeviceList:
    """
    List the devices of a project.

    Devices are ordered by ID; ``page`` is a start offset and ``per_page``
    limits the number returned.
    """
    devices, total = store.list_devices(project_id, options)
    return DeviceList(devices=devices, meta=ListMeta(total=total))


@router.post(
    "/projects/{project_id}/devices",
    response_model=Device,
    status_code=status.HTTP_201_CREATED,
)
async def create_device(project_id: str, request: DeviceCreate, store: StoreDep) -> Device:
    """
    Provision a device.

    ``facility`` accepts a facility ID or code and ``plan`` a plan ID or
    slug. The device is active immediately.
    """
    facility = store.resolve_facility(request.facility)
    plan_id = None
    if request.plan:
        plan = store.resolve_plan(request.plan)
        # an unresolvable plan is passed through so the store rejects it
        plan_id = plan.id if plan else request.plan

    try:
        return store.create_device(
            project_id,
            request.hostname,
            facility.id if facility else None,
            plan_id,
        )
    except InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/devices/{device_id}", response_model=Device)
async def get_device(device_id: str, store: StoreDep) -> Device:
    """Get a device by ID."""
    device = store.get_device(device_id)
    if not device:
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")
    return device


@router.put("/devices/{device_id}", response_model=Device)
async def update_device(device_id: str, request: DeviceUpdate, store: StoreDep) -> Device:
    """Update a device's hostname."""
    try:
        return store.update_device(device_id, request)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/devices/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_device(device_id: str, store: StoreDep) -> Response:
    """Delete a device, detaching its volumes."""
    if not store.delete_device(device_id):
        raise HTTPException(status_code=404, detail=f"Device {device_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
