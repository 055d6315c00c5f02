"""
Seed topology loader.

Device ids are generated at creation, so a deployment cannot know the id
of the metadata device in advance. A seed file describes the starting
topology by codes, slugs and hostnames instead, and names the metadata
device by hostname:

    facilities:
      - {name: "Parsippany, NJ", code: ewr1}
    plans:
      - {name: Standard, slug: baremetal_0}
    devices:
      - {hostname: node-1, facility: ewr1, plan: baremetal_0, project: p1}
    volumes:
      - {size: 10, description: data, project: p1, attach_to: [node-1]}
    metadata_device_hostname: node-1
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from faux_packet.logging_config import LogEventType, log_event
from faux_packet.models.catalog import FacilityCreate, PlanCreate
from faux_packet.models.volume import VolumeCreate
from faux_packet.services.store import MemoryStore

logger = logging.getLogger(__name__)


class SeedError(ValueError):
    """The seed file is unreadable or references unknown entities."""


class SeedDevice(BaseModel):
    """Device entry of a seed file."""

    hostname: str = Field(..., min_length=1)
    facility: str = Field(..., description="Facility code")
    plan: str | None = Field(default=None, description="Plan slug")
    project: str | None = Field(default=None, description="Project ID")


class SeedVolume(VolumeCreate):
    """Volume entry of a seed file."""

    project: str | None = Field(default=None, description="Project ID")
    attach_to: list[str] = Field(
        default_factory=list,
        description="Hostnames to attach the volume to, in order",
    )


class SeedFile(BaseModel):
    """Top-level layout of a seed file."""

    facilities: list[FacilityCreate] = Field(default_factory=list)
    plans: list[PlanCreate] = Field(default_factory=list)
    devices: list[SeedDevice] = Field(default_factory=list)
    volumes: list[SeedVolume] = Field(default_factory=list)
    metadata_device_hostname: str | None = None


class SeedResult(BaseModel):
    """Ids of everything a seed created."""

    facility_ids: list[str] = Field(default_factory=list)
    plan_ids: list[str] = Field(default_factory=list)
    device_ids: dict[str, str] = Field(
        default_factory=dict,
        description="hostname -> device ID",
    )
    volume_ids: list[str] = Field(default_factory=list)
    attachment_ids: list[str] = Field(default_factory=list)
    metadata_device: str | None = None


def read_seed_file(path: Path | str) -> SeedFile:
    """
    Read and validate a seed file.

    Raises:
        SeedError: If the file is missing or is not a valid seed document
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SeedError(f"Cannot read seed file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SeedError(f"Seed file {path} must contain a mapping")
    try:
        return SeedFile(**data)
    except ValueError as e:
        raise SeedError(f"Invalid seed file {path}: {e}") from e


def apply_seed(store: MemoryStore, seed: SeedFile) -> SeedResult:
    """
    Create the seeded topology through the store's public operations.

    References are checked before anything is created, so a bad seed
    leaves the store untouched.

    Raises:
        SeedError: If a device, volume or metadata entry references an
            unknown facility, plan or hostname
    """
    facility_codes = {f.code for f in seed.facilities}
    plan_slugs = {p.slug for p in seed.plans}
    hostnames = {d.hostname for d in seed.devices}

    if len(facility_codes) != len(seed.facilities):
        raise SeedError("Seed file repeats a facility code")
    if len(plan_slugs) != len(seed.plans):
        raise SeedError("Seed file repeats a plan slug")
    if len(hostnames) != len(seed.devices):
        raise SeedError("Seed file repeats a device hostname")
    for code in facility_codes:
        if store.get_facility_by_code(code):
            raise SeedError(f"Facility {code} already exists")
    for slug in plan_slugs:
        if store.get_plan_by_slug(slug):
            raise SeedError(f"Plan {slug} already exists")

    for device in seed.devices:
        if device.plan is None and store.require_device_plan:
            raise SeedError(f"Device {device.hostname} needs a plan")
        if device.facility not in facility_codes and not store.get_facility_by_code(device.facility):
            raise SeedError(f"Device {device.hostname} references unknown facility {device.facility}")
        if device.plan and device.plan not in plan_slugs and not store.get_plan_by_slug(device.plan):
            raise SeedError(f"Device {device.hostname} references unknown plan {device.plan}")
    for volume in seed.volumes:
        for hostname in volume.attach_to:
            if hostname not in hostnames:
                raise SeedError(f"Volume attachment references unknown hostname {hostname}")
    if seed.metadata_device_hostname and seed.metadata_device_hostname not in hostnames:
        raise SeedError(
            f"Metadata device hostname {seed.metadata_device_hostname} is not seeded"
        )

    result = SeedResult()
    with store.locked():
        for request in seed.facilities:
            result.facility_ids.append(store.create_facility(request.name, request.code).id)
        for request in seed.plans:
            result.plan_ids.append(store.create_plan(request.slug, request.name).id)

        for entry in seed.devices:
            facility = store.get_facility_by_code(entry.facility)
            plan = store.get_plan_by_slug(entry.plan) if entry.plan else None
            device = store.create_device(
                entry.project,
                entry.hostname,
                facility.id if facility else None,
                plan.id if plan else None,
            )
            result.device_ids[entry.hostname] = device.id

        for entry in seed.volumes:
            volume = store.create_volume(
                entry.project,
                VolumeCreate(**entry.model_dump(exclude={"project", "attach_to"})),
            )
            result.volume_ids.append(volume.id)
            for hostname in entry.attach_to:
                attachment = store.attach_volume(volume.id, result.device_ids[hostname])
                if attachment is not None:
                    result.attachment_ids.append(attachment.id)

    if seed.metadata_device_hostname:
        result.metadata_device = result.device_ids[seed.metadata_device_hostname]

    log_event(
        logger,
        LogEventType.SEED_LOAD,
        f"Seeded {len(result.facility_ids)} facilities, {len(result.plan_ids)} plans, "
        f"{len(result.device_ids)} devices, {len(result.volume_ids)} volumes",
    )
    return result


def load_seed(store: MemoryStore, path: Path | str) -> SeedResult:
    """Read a seed file and apply it to ``store``."""
    return apply_seed(store, read_seed_file(path))
