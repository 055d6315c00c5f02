"""BGP configuration models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from faux_packet.config import PacketDefaults


class BGPDeploymentType(str, Enum):
    """Where BGP sessions announce routes."""

    LOCAL = "local"
    GLOBAL = "global"


class BGPConfigRequest(BaseModel):
    """Request model for enabling BGP on a project."""

    deployment_type: BGPDeploymentType = Field(
        ...,
        description="local or global",
    )
    asn: int = Field(
        ...,
        ge=1,
        le=4294967295,
        description="Customer autonomous system number",
    )
    md5: str | None = Field(
        default=None,
        min_length=1,
        max_length=20,
        description="BGP session password",
    )


class BGPConfig(BaseModel):
    """BGP configuration of a project."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique BGP config ID")
    href: str = Field(description="API path")
    project_id: str = Field(description="Project the config belongs to")
    deployment_type: BGPDeploymentType
    asn: int
    md5: str | None = Field(default=None, exclude=True)
    status: str = Field(default=PacketDefaults.BGP_STATUS)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
