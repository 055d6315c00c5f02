"""
Device metadata service models.

Shapes follow what a device reads from its metadata endpoint to discover
the iSCSI targets of its attached volumes.
"""

from pydantic import BaseModel, Field, IPvAnyAddress, field_serializer

from faux_packet.config import PacketDefaults


class VolumeCapacity(BaseModel):
    """Capacity of a volume."""

    size: int = Field(description="Size in units")
    unit: str = Field(default=PacketDefaults.CAPACITY_UNIT)

    @field_serializer("size")
    def serialize_size(self, size: int) -> str:
        # Metadata clients decode the size from a JSON string
        return str(size)


class VolumeInfo(BaseModel):
    """Storage topology entry for one attached volume."""

    name: str = Field(description="Volume name")
    iqn: str = Field(description="iSCSI target name")
    ips: list[IPvAnyAddress] = Field(description="iSCSI portal addresses")
    capacity: VolumeCapacity


class DeviceMetadata(BaseModel):
    """Metadata view of the configured device."""

    id: str = Field(description="Device ID")
    hostname: str = Field(description="Device hostname")
    facility: str = Field(description="Facility code")
    volumes: list[VolumeInfo] = Field(default_factory=list)
