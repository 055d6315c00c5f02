"""
Data models for Faux Packet.

These models follow the JSON shapes of the Packet API so unmodified
clients (packngo and friends) can decode the responses.
"""

from faux_packet.models.bgp import BGPConfig, BGPConfigRequest, BGPDeploymentType
from faux_packet.models.catalog import (
    Facility,
    FacilityCreate,
    FacilityList,
    Plan,
    PlanCreate,
    PlanList,
)
from faux_packet.models.common import Href, ListMeta, ListOptions
from faux_packet.models.device import Device, DeviceCreate, DeviceList, DeviceUpdate
from faux_packet.models.metadata import DeviceMetadata, VolumeCapacity, VolumeInfo
from faux_packet.models.volume import (
    AttachmentSummary,
    BillingCycle,
    Volume,
    VolumeAttachment,
    VolumeAttachRequest,
    VolumeCreate,
    VolumeList,
    VolumeSnapshot,
)

__all__ = [
    # Common
    "Href",
    "ListMeta",
    "ListOptions",
    # Catalog
    "Facility",
    "FacilityCreate",
    "FacilityList",
    "Plan",
    "PlanCreate",
    "PlanList",
    # Devices
    "Device",
    "DeviceCreate",
    "DeviceList",
    "DeviceUpdate",
    # Storage
    "AttachmentSummary",
    "BillingCycle",
    "Volume",
    "VolumeAttachment",
    "VolumeAttachRequest",
    "VolumeCreate",
    "VolumeList",
    "VolumeSnapshot",
    # Metadata
    "DeviceMetadata",
    "VolumeCapacity",
    "VolumeInfo",
    # BGP
    "BGPConfig",
    "BGPConfigRequest",
    "BGPDeploymentType",
]
