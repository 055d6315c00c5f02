"""
Device models.

A device is a provisioned bare-metal server. Its ``volumes`` list holds one
reference per attachment, in attach order.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from faux_packet.config import PacketDefaults
from faux_packet.models.catalog import Facility, Plan
from faux_packet.models.common import Href, ListMeta


class DeviceCreate(BaseModel):
    """Request model for provisioning a device."""

    hostname: str = Field(
        ...,
        min_length=1,
        max_length=253,
        description="Device hostname",
    )
    facility: str = Field(
        ...,
        min_length=1,
        description="Facility ID or code",
    )
    plan: str | None = Field(
        default=None,
        description="Plan ID or slug",
    )


class DeviceUpdate(BaseModel):
    """Request model for updating a device."""

    hostname: str | None = Field(
        default=None,
        min_length=1,
        max_length=253,
        description="New hostname",
    )


class Device(BaseModel):
    """Complete representation of a device."""

    id: str = Field(description="Unique device ID")
    href: str = Field(description="API path")
    hostname: str = Field(description="Device hostname")
    state: str = Field(
        default=PacketDefaults.DEVICE_STATE,
        description="Provisioning state",
    )
    project_id: str | None = Field(default=None, description="Owning project")
    facility: Facility = Field(description="Facility the device lives in")
    plan: Plan | None = Field(default=None, description="Device plan")
    volumes: list[Href] = Field(
        default_factory=list,
        description="Attached volumes, one entry per attachment",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp",
    )


class DeviceList(BaseModel):
    """Response model for listing devices."""

    devices: list[Device] = Field(default_factory=list)
    meta: ListMeta = Field(default_factory=ListMeta)
