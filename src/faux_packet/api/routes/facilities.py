"""Facility and plan catalog endpoints."""

from fastapi import APIRouter, HTTPException, status

from faux_packet.api.deps import StoreDep
from faux_packet.exceptions import DuplicateEntityError
from faux_packet.models.catalog import (
    Facility,
    FacilityCreate,
    FacilityList,
    Plan,
    PlanCreate,
    PlanList,
)

router = APIRouter()


@router.get("/facilities", response_model=FacilityList)
async def list_facilities(store: StoreDep) -> FacilityList:
    """
    List all facilities.

    An empty catalog still reports the default ewr1 facility.
    """
    return FacilityList(facilities=store.list_facilities())


@router.post("/facilities", response_model=Facility, status_code=status.HTTP_201_CREATED)
async def create_facility(request: FacilityCreate, store: StoreDep) -> Facility:
    """Create a facility."""
    try:
        return store.create_facility(request.name, request.code)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/facilities/{facility_id}", response_model=Facility)
async def get_facility(facility_id: str, store: StoreDep) -> Facility:
    """Get a facility by ID."""
    facility = store.get_facility(facility_id)
    if not facility:
        raise HTTPException(status_code=404, detail=f"Facility {facility_id} not found")
    return facility


@router.get("/plans", response_model=PlanList)
async def list_plans(store: StoreDep) -> PlanList:
    """List all plans."""
    return PlanList(plans=store.list_plans())


@router.post("/plans", response_model=Plan, status_code=status.HTTP_201_CREATED)
async def create_plan(request: PlanCreate, store: StoreDep) -> Plan:
    """Create a plan."""
    try:
        return store.create_plan(request.slug, request.name)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
