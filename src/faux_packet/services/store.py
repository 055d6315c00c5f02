"""
In-memory entity store for Faux Packet.

Holds facilities, plans, devices, volumes, attachments and BGP configs as
an arena of records keyed by id. Relations are kept as explicit id lists
and resolved into API models at read time:

- a volume lists its attachment ids, earliest first
- a device lists its attachment ids, in attach order; its ``volumes`` are
  the volumes of those attachments

Every public method runs under one re-entrant lock, so each multi-step
mutation is applied completely or not at all.
"""

import bisect
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator

from faux_packet.config import PacketDefaults, settings
from faux_packet.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidReferenceError,
)
from faux_packet.logging_config import LogEventType, log_event
from faux_packet.models.bgp import BGPConfig, BGPConfigRequest
from faux_packet.models.catalog import Facility, Plan
from faux_packet.models.common import Href, ListOptions
from faux_packet.models.device import Device, DeviceUpdate
from faux_packet.models.volume import (
    AttachmentSummary,
    BillingCycle,
    Volume,
    VolumeAttachment,
    VolumeCreate,
    VolumeSnapshot,
)
from faux_packet.naming import href, volume_id_to_name
from faux_packet.services.pagination import paginate

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _remove_stable(ids: list[str], target: str) -> list[str]:
    """Drop ``target`` from ``ids`` keeping the order of the rest."""
    return [x for x in ids if x != target]


@dataclass
class _DeviceRecord:
    id: str
    hostname: str
    facility_id: str
    plan_id: str | None
    project_id: str | None
    state: str = PacketDefaults.DEVICE_STATE
    attachment_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class _VolumeRecord:
    id: str
    name: str
    description: str
    size: int
    plan_id: str | None
    facility_id: str | None
    project_id: str | None
    billing_cycle: BillingCycle
    locked: bool
    state: str = PacketDefaults.VOLUME_STATE
    attachment_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class _AttachmentRecord:
    id: str
    device_id: str
    volume_id: str
    volume: VolumeSnapshot


class _KeyIndex:
    """Sorted list of ids kept next to a dict, so listings need no re-sort."""

    def __init__(self) -> None:
        self._keys: list[str] = []

    def add(self, key: str) -> None:
        bisect.insort(self._keys, key)

    def remove(self, key: str) -> None:
        i = bisect.bisect_left(self._keys, key)
        if i < len(self._keys) and self._keys[i] == key:
            del self._keys[i]

    def __iter__(self):
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)


class MemoryStore:
    """
    In-memory backend for the Packet API.

    Provides:
    - Facility and plan catalogs with code/slug lookup
    - Device and volume CRUD with project scoping
    - Volume attach/detach keeping both sides of the relation consistent
    - Per-project BGP configuration
    """

    def __init__(
        self,
        partition_by_project: bool = False,
        require_device_plan: bool = False,
        attachment_iqn: str = PacketDefaults.ATTACHMENT_IQN,
        attachment_ips: tuple[str, str] = PacketDefaults.ATTACHMENT_IPS,
    ) -> None:
        self.partition_by_project = partition_by_project
        self.require_device_plan = require_device_plan
        self.attachment_iqn = attachment_iqn
        self.attachment_ips = tuple(attachment_ips)

        self._lock = threading.RLock()
        self._facilities: dict[str, Facility] = {}
        self._plans: dict[str, Plan] = {}
        self._devices: dict[str, _DeviceRecord] = {}
        self._volumes: dict[str, _VolumeRecord] = {}
        self._attachments: dict[str, _AttachmentRecord] = {}
        self._bgp_configs: dict[str, BGPConfig] = {}  # project_id -> config

        self._facility_keys = _KeyIndex()
        self._device_keys = _KeyIndex()
        self._volume_keys = _KeyIndex()

    @classmethod
    def from_settings(cls) -> "MemoryStore":
        """Build a store configured from the global settings."""
        return cls(
            partition_by_project=settings.partition_by_project,
            require_device_plan=settings.require_device_plan,
            attachment_iqn=settings.attachment_iqn,
            attachment_ips=tuple(str(ip) for ip in settings.attachment_ips),
        )

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the store lock across several calls for a consistent read."""
        with self._lock:
            yield

    def _in_scope(self, project_id: str | None, owner: str | None) -> bool:
        if not self.partition_by_project or project_id is None:
            return True
        return owner == project_id

    # ==================== Facilities ====================

    def create_facility(self, name: str, code: str) -> Facility:
        """
        Create a facility.

        Raises:
            DuplicateEntityError: If the code is already taken
        """
        with self._lock:
            if self._find_facility_by_code(code) is not None:
                raise DuplicateEntityError(f"Facility with code '{code}' already exists")

            facility_id = _new_id()
            facility = Facility(
                id=facility_id,
                name=name,
                code=code,
                href=href("facilities", facility_id),
            )
            self._facilities[facility.id] = facility
            self._facility_keys.add(facility.id)

        log_event(
            logger,
            LogEventType.FACILITY_CREATE,
            f"Created facility {facility.code} ({facility.id})",
            resource_type="facility",
            resource_id=facility.id,
        )
        return facility

    def list_facilities(self) -> list[Facility]:
        """
        List facilities ordered by id.

        An empty catalog reports the default ewr1 facility, which is not
        stored and cannot be referenced by devices.
        """
        with self._lock:
            if self._facilities:
                return [self._facilities[k] for k in self._facility_keys]
        return [
            Facility(
                id=PacketDefaults.DEFAULT_FACILITY_ID,
                name=PacketDefaults.DEFAULT_FACILITY_NAME,
                code=PacketDefaults.DEFAULT_FACILITY_CODE,
                href=href("facilities", PacketDefaults.DEFAULT_FACILITY_ID),
            )
        ]

    def get_facility(self, facility_id: str) -> Facility | None:
        """Get a facility by ID."""
        with self._lock:
            return self._facilities.get(facility_id)

    def get_facility_by_code(self, code: str) -> Facility | None:
        """Get a facility by its code."""
        with self._lock:
            return self._find_facility_by_code(code)

    def _find_facility_by_code(self, code: str) -> Facility | None:
        for facility in self._facilities.values():
            if facility.code == code:
                return facility
        return None

    def resolve_facility(self, ref: str) -> Facility | None:
        """Resolve a facility given either its ID or its code."""
        with self._lock:
            return self._facilities.get(ref) or self._find_facility_by_code(ref)

    # ==================== Plans ====================

    def create_plan(self, slug: str, name: str) -> Plan:
        """
        Create a plan.

        Raises:
            DuplicateEntityError: If the slug is already taken
        """
        with self._lock:
            if self._find_plan_by_slug(slug) is not None:
                raise DuplicateEntityError(f"Plan with slug '{slug}' already exists")

            plan_id = _new_id()
            plan = Plan(id=plan_id, name=name, slug=slug, href=href("plans", plan_id))
            self._plans[plan.id] = plan

        log_event(
            logger,
            LogEventType.PLAN_CREATE,
            f"Created plan {plan.slug} ({plan.id})",
            resource_type="plan",
            resource_id=plan.id,
        )
        return plan

    def list_plans(self) -> list[Plan]:
        """List plans ordered by id."""
        with self._lock:
            return [self._plans[k] for k in sorted(self._plans)]

    def get_plan(self, plan_id: str) -> Plan | None:
        """Get a plan by ID."""
        with self._lock:
            return self._plans.get(plan_id)

    def get_plan_by_slug(self, slug: str) -> Plan | None:
        """Get a plan by its slug."""
        with self._lock:
            return self._find_plan_by_slug(slug)

    def _find_plan_by_slug(self, slug: str) -> Plan | None:
        for plan in self._plans.values():
            if plan.slug == slug:
                return plan
        return None

    def resolve_plan(self, ref: str) -> Plan | None:
        """Resolve a plan given either its ID or its slug."""
        with self._lock:
            return self._plans.get(ref) or self._find_plan_by_slug(ref)

    # ==================== Devices ====================

    def create_device(
        self,
        project_id: str | None,
        hostname: str,
        facility_id: str | None,
        plan_id: str | None = None,
    ) -> Device:
        """
        Create a device in state ``active``.

        Args:
            project_id: Owning project
            hostname: Device hostname
            facility_id: ID of an existing facility
            plan_id: ID of an existing plan

        Raises:
            InvalidReferenceError: If the facility is missing or unknown, if a
                given plan is unknown, or if a plan is required but missing
        """
        with self._lock:
            if not facility_id or facility_id not in self._facilities:
                raise InvalidReferenceError("must include a valid facility")
            if plan_id is None:
                if self.require_device_plan:
                    raise InvalidReferenceError("must include a valid plan")
            elif plan_id not in self._plans:
                raise InvalidReferenceError("must include a valid plan")

            record = _DeviceRecord(
                id=_new_id(),
                hostname=hostname,
                facility_id=facility_id,
                plan_id=plan_id,
                project_id=project_id,
            )
            self._devices[record.id] = record
            self._device_keys.add(record.id)
            device = self._render_device(record)

        log_event(
            logger,
            LogEventType.DEVICE_CREATE,
            f"Created device {hostname} ({device.id})",
            resource_type="device",
            resource_id=device.id,
            project_id=project_id,
        )
        return device

    def get_device(self, device_id: str) -> Device | None:
        """Get a device by ID."""
        with self._lock:
            record = self._devices.get(device_id)
            return self._render_device(record) if record else None

    def find_device_by_hostname(self, hostname: str) -> Device | None:
        """Get the first device (in id order) with the given hostname."""
        with self._lock:
            for key in self._device_keys:
                record = self._devices[key]
                if record.hostname == hostname:
                    return self._render_device(record)
        return None

    def list_devices(
        self,
        project_id: str | None = None,
        options: ListOptions | None = None,
    ) -> tuple[list[Device], int]:
        """
        List devices ordered by id.

        Returns:
            Tuple of (page of devices, total before slicing)
        """
        with self._lock:
            records = [
                self._devices[k]
                for k in self._device_keys
                if self._in_scope(project_id, self._devices[k].project_id)
            ]
            page = paginate(records, options)
            return [self._render_device(r) for r in page], len(records)

    def update_device(self, device_id: str, update: DeviceUpdate) -> Device:
        """
        Update mutable device fields.

        Raises:
            EntityNotFoundError: If the device does not exist
        """
        with self._lock:
            record = self._devices.get(device_id)
            if record is None:
                raise EntityNotFoundError(f"Device {device_id} not found")
            if update.hostname is not None:
                record.hostname = update.hostname
            device = self._render_device(record)

        log_event(
            logger,
            LogEventType.DEVICE_UPDATE,
            f"Updated device {device_id}",
            resource_type="device",
            resource_id=device_id,
        )
        return device

    def delete_device(self, device_id: str) -> bool:
        """
        Delete a device, detaching all of its volumes first.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            record = self._devices.get(device_id)
            if record is None:
                return False
            for attachment_id in list(record.attachment_ids):
                self._detach(attachment_id)
            del self._devices[device_id]
            self._device_keys.remove(device_id)

        log_event(
            logger,
            LogEventType.DEVICE_DELETE,
            f"Deleted device {device_id}",
            resource_type="device",
            resource_id=device_id,
        )
        return True

    def _render_device(self, record: _DeviceRecord) -> Device:
        volumes = []
        for attachment_id in record.attachment_ids:
            volume_id = self._attachments[attachment_id].volume_id
            volumes.append(Href(id=volume_id, href=href("storage", volume_id)))
        return Device(
            id=record.id,
            href=href("devices", record.id),
            hostname=record.hostname,
            state=record.state,
            project_id=record.project_id,
            facility=self._facilities[record.facility_id],
            plan=self._plans.get(record.plan_id) if record.plan_id else None,
            volumes=volumes,
            created_at=record.created_at,
        )

    # ==================== Volumes ====================

    def create_volume(self, project_id: str | None, request: VolumeCreate) -> Volume:
        """
        Create a volume.

        The plan and facility IDs are recorded as given; the storage API
        does not validate them.
        """
        with self._lock:
            volume_id = _new_id()
            record = _VolumeRecord(
                id=volume_id,
                name=volume_id_to_name(volume_id),
                description=request.description,
                size=request.size,
                plan_id=request.plan_id,
                facility_id=request.facility_id,
                project_id=project_id,
                billing_cycle=request.billing_cycle,
                locked=request.locked,
            )
            self._volumes[volume_id] = record
            self._volume_keys.add(volume_id)
            volume = self._render_volume(record)

        log_event(
            logger,
            LogEventType.VOLUME_CREATE,
            f"Created volume {volume.name} ({volume.size} GB)",
            resource_type="volume",
            resource_id=volume.id,
            project_id=project_id,
        )
        return volume

    def get_volume(self, volume_id: str) -> Volume | None:
        """Get a volume by ID."""
        with self._lock:
            record = self._volumes.get(volume_id)
            return self._render_volume(record) if record else None

    def list_volumes(
        self,
        project_id: str | None = None,
        options: ListOptions | None = None,
    ) -> tuple[list[Volume], int]:
        """
        List volumes ordered by id.

        Returns:
            Tuple of (page of volumes, total before slicing)
        """
        with self._lock:
            records = [
                self._volumes[k]
                for k in self._volume_keys
                if self._in_scope(project_id, self._volumes[k].project_id)
            ]
            page = paginate(records, options)
            return [self._render_volume(r) for r in page], len(records)

    def delete_volume(self, volume_id: str) -> bool:
        """
        Delete a volume, detaching it from every device first.

        Returns:
            True if deleted, False if not found
        """
        with self._lock:
            record = self._volumes.get(volume_id)
            if record is None:
                return False
            for attachment_id in list(record.attachment_ids):
                self._detach(attachment_id)
            del self._volumes[volume_id]
            self._volume_keys.remove(volume_id)

        log_event(
            logger,
            LogEventType.VOLUME_DELETE,
            f"Deleted volume {volume_id}",
            resource_type="volume",
            resource_id=volume_id,
        )
        return True

    def _render_volume(self, record: _VolumeRecord) -> Volume:
        attachments = []
        for attachment_id in record.attachment_ids:
            device_id = self._attachments[attachment_id].device_id
            attachments.append(
                AttachmentSummary(
                    id=attachment_id,
                    href=href("storage/attachments", attachment_id),
                    device=Href(id=device_id, href=href("devices", device_id)),
                )
            )
        return Volume(
            id=record.id,
            href=href("storage", record.id),
            name=record.name,
            description=record.description,
            size=record.size,
            state=record.state,
            locked=record.locked,
            billing_cycle=record.billing_cycle,
            project_id=record.project_id,
            plan=Href(id=record.plan_id, href=href("plans", record.plan_id))
            if record.plan_id
            else None,
            facility=Href(id=record.facility_id, href=href("facilities", record.facility_id))
            if record.facility_id
            else None,
            attachments=attachments,
            created_at=record.created_at,
        )

    # ==================== Attachments ====================

    def attach_volume(self, volume_id: str, device_id: str) -> VolumeAttachment | None:
        """
        Attach a volume to a device.

        A volume may be attached to several devices at once.

        Returns:
            The new attachment, or None if the volume or device does not exist
        """
        with self._lock:
            volume = self._volumes.get(volume_id)
            device = self._devices.get(device_id)
            if volume is None or device is None:
                return None

            attachment_id = _new_id()
            record = _AttachmentRecord(
                id=attachment_id,
                device_id=device_id,
                volume_id=volume_id,
                volume=VolumeSnapshot(
                    id=volume.id,
                    href=href("storage", volume.id),
                    name=volume.name,
                    description=volume.description,
                    size=volume.size,
                    state=volume.state,
                ),
            )
            self._attachments[attachment_id] = record
            volume.attachment_ids.append(attachment_id)
            device.attachment_ids.append(attachment_id)
            attachment = self._render_attachment(record)

        log_event(
            logger,
            LogEventType.VOLUME_ATTACH,
            f"Attached volume {volume_id} to device {device_id}",
            resource_type="attachment",
            resource_id=attachment_id,
        )
        return attachment

    def get_attachment(self, attachment_id: str) -> VolumeAttachment | None:
        """Get an attachment by ID."""
        with self._lock:
            record = self._attachments.get(attachment_id)
            return self._render_attachment(record) if record else None

    def detach_volume(self, attachment_id: str) -> bool:
        """
        Remove an attachment from its volume and device.

        Returns:
            True if detached, False if the attachment does not exist
        """
        with self._lock:
            if not self._detach(attachment_id):
                return False

        log_event(
            logger,
            LogEventType.VOLUME_DETACH,
            f"Detached attachment {attachment_id}",
            resource_type="attachment",
            resource_id=attachment_id,
        )
        return True

    def _detach(self, attachment_id: str) -> bool:
        record = self._attachments.get(attachment_id)
        if record is None:
            return False

        volume = self._volumes.get(record.volume_id)
        if volume is not None:
            volume.attachment_ids = _remove_stable(volume.attachment_ids, attachment_id)
        device = self._devices.get(record.device_id)
        if device is not None:
            device.attachment_ids = _remove_stable(device.attachment_ids, attachment_id)

        del self._attachments[attachment_id]
        return True

    def get_attachment_metadata(self, attachment_id: str) -> tuple[str, list[str]]:
        """
        Transport metadata of an attachment.

        Every attachment reports the same iSCSI target and portals.

        Returns:
            Tuple of (iqn, [portal ip, portal ip])
        """
        return self.attachment_iqn, list(self.attachment_ips)

    def _render_attachment(self, record: _AttachmentRecord) -> VolumeAttachment:
        return VolumeAttachment(
            id=record.id,
            href=href("storage/attachments", record.id),
            device=Href(id=record.device_id, href=href("devices", record.device_id)),
            volume=record.volume,
        )

    def volume_attachment_ids(self, volume_id: str) -> list[str]:
        """Attachment ids of a volume, earliest first; empty if unknown."""
        with self._lock:
            record = self._volumes.get(volume_id)
            return list(record.attachment_ids) if record else []

    # ==================== BGP ====================

    def enable_bgp(self, project_id: str, request: BGPConfigRequest) -> BGPConfig:
        """
        Enable BGP for a project. There is no disable.

        Raises:
            DuplicateEntityError: If the project already has a BGP config
        """
        with self._lock:
            if project_id in self._bgp_configs:
                raise DuplicateEntityError(f"BGP is already enabled for project {project_id}")

            config_id = _new_id()
            config = BGPConfig(
                id=config_id,
                href=href("bgp-configs", config_id),
                project_id=project_id,
                deployment_type=request.deployment_type,
                asn=request.asn,
                md5=request.md5,
            )
            self._bgp_configs[project_id] = config

        log_event(
            logger,
            LogEventType.BGP_ENABLE,
            f"Enabled {config.deployment_type.value} BGP with ASN {config.asn}",
            resource_type="bgp_config",
            resource_id=config.id,
            project_id=project_id,
        )
        return config

    def get_bgp_config(self, project_id: str) -> BGPConfig | None:
        """Get the BGP config of a project."""
        with self._lock:
            return self._bgp_configs.get(project_id)
