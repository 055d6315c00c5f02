"""
Metadata service projection.

A real device asks its metadata endpoint which iSCSI targets belong to it.
The endpoint cannot identify the caller, so the device is fixed when the
projector is built.
"""

import logging

from faux_packet.logging_config import LogEventType, log_event
from faux_packet.models.metadata import DeviceMetadata, VolumeCapacity, VolumeInfo
from faux_packet.naming import volume_id_to_name
from faux_packet.services.store import MemoryStore

logger = logging.getLogger(__name__)


class MetadataProjector:
    """Builds the storage view of one device from the store's attachments."""

    def __init__(self, store: MemoryStore, device_id: str | None = None) -> None:
        self._store = store
        self.device_id = device_id or None

    def project(self) -> DeviceMetadata | None:
        """
        Project the configured device's volumes.

        For each volume on the device, in device order, the volume's first
        (earliest) attachment provides the transport metadata. Volumes
        without attachments are skipped.

        Returns:
            The metadata view, or None if no device is configured or the
            device does not exist
        """
        if not self.device_id:
            return None

        with self._store.locked():
            return self._project(self.device_id)

    def _project(self, device_id: str) -> DeviceMetadata | None:
        device = self._store.get_device(device_id)
        if device is None:
            logger.warning(f"Metadata device {device_id} does not exist")
            return None

        volumes = []
        for ref in device.volumes:
            volume = self._store.get_volume(ref.id)
            if volume is None or not volume.attachments:
                log_event(
                    logger,
                    LogEventType.METADATA_SKIP,
                    f"Volume {ref.id} has no attachments, leaving it out of the metadata",
                    level=logging.WARNING,
                    resource_type="volume",
                    resource_id=ref.id,
                )
                continue

            iqn, ips = self._store.get_attachment_metadata(volume.attachments[0].id)
            volumes.append(
                VolumeInfo(
                    name=volume_id_to_name(volume.id),
                    iqn=iqn,
                    ips=ips[:2],
                    capacity=VolumeCapacity(size=volume.size),
                )
            )

        log_event(
            logger,
            LogEventType.METADATA_SERVE,
            f"Serving metadata for device {device.id} with {len(volumes)} volumes",
            level=logging.DEBUG,
            resource_type="device",
            resource_id=device.id,
        )
        return DeviceMetadata(
            id=device.id,
            hostname=device.hostname,
            facility=device.facility.code,
            volumes=volumes,
        )
