"""
Block storage models.

Volumes and attachments reference each other through ``Href`` entries
rather than nested objects, so the serialized graph has no cycles.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from faux_packet.config import PacketDefaults
from faux_packet.models.common import Href, ListMeta


class BillingCycle(str, Enum):
    """Billing cycles accepted by the storage API."""

    HOURLY = "hourly"
    MONTHLY = "monthly"


class VolumeCreate(BaseModel):
    """Request model for creating a volume."""

    size: int = Field(..., ge=1, description="Size in GB")
    description: str = Field(default="", description="Free-form description")
    plan_id: str | None = Field(default=None, description="Storage plan ID")
    facility_id: str | None = Field(default=None, description="Facility ID")
    billing_cycle: BillingCycle = Field(
        default=BillingCycle.HOURLY,
        description="Billing cycle",
    )
    locked: bool = Field(default=False, description="Protect against deletion")


class VolumeAttachRequest(BaseModel):
    """Request body for attaching a volume to a device."""

    device_id: str = Field(..., min_length=1, description="Target device ID")


class AttachmentSummary(BaseModel):
    """Attachment entry as listed on its volume."""

    id: str = Field(description="Attachment ID")
    href: str = Field(description="API path")
    device: Href = Field(description="Attached device")


class Volume(BaseModel):
    """Complete representation of a volume."""

    id: str = Field(description="Unique volume ID")
    href: str = Field(description="API path")
    name: str = Field(description="Derived name, volume-<first id segment>")
    description: str = Field(default="", description="Free-form description")
    size: int = Field(description="Size in GB")
    state: str = Field(
        default=PacketDefaults.VOLUME_STATE,
        description="Volume state",
    )
    locked: bool = Field(default=False, description="Protect against deletion")
    billing_cycle: BillingCycle = Field(default=BillingCycle.HOURLY)
    project_id: str | None = Field(default=None, description="Owning project")
    plan: Href | None = Field(default=None, description="Storage plan")
    facility: Href | None = Field(default=None, description="Facility")
    attachments: list[AttachmentSummary] = Field(
        default_factory=list,
        description="Attachments, earliest first",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp",
    )


class VolumeSnapshot(BaseModel):
    """State of a volume captured when an attachment was made."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    name: str
    description: str = ""
    size: int
    state: str = PacketDefaults.VOLUME_STATE


class VolumeAttachment(BaseModel):
    """A single device-volume binding."""

    id: str = Field(description="Unique attachment ID")
    href: str = Field(description="API path")
    device: Href = Field(description="Attached device")
    volume: VolumeSnapshot = Field(description="Volume as it was at attach time")


class VolumeList(BaseModel):
    """Response model for listing volumes."""

    volumes: list[Volume] = Field(default_factory=list)
    meta: ListMeta = Field(default_factory=ListMeta)
