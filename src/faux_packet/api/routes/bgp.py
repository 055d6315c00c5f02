"""BGP configuration endpoints."""

from fastapi import APIRouter, HTTPException, status

from faux_packet.api.deps import StoreDep
from faux_packet.exceptions import DuplicateEntityError
from faux_packet.models.bgp import BGPConfig, BGPConfigRequest

router = APIRouter()


@router.post(
    "/projects/{project_id}/bgp-configs",
    response_model=BGPConfig,
    status_code=status.HTTP_201_CREATED,
)
async def enable_bgp(project_id: str, request: BGPConfigRequest, store: StoreDep) -> BGPConfig:
    """
    Enable BGP for a project.

    BGP cannot be disabled once enabled.
    """
    try:
        return store.enable_bgp(project_id, request)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/projects/{project_id}/bgp-config", response_model=BGPConfig)
async def get_bgp_config(project_id: str, store: StoreDep) -> BGPConfig:
    """Get the BGP config of a project."""
    config = store.get_bgp_config(project_id)
    if not config:
        raise HTTPException(status_code=404, detail=f"BGP is not enabled for project {project_id}")
    return config
