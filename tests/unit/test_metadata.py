"""
Unit tests for the metadata projection.
"""

import logging
from unittest.mock import MagicMock

import pytest

from faux_packet.models.catalog import Facility
from faux_packet.models.common import Href
from faux_packet.models.device import Device
from faux_packet.models.volume import Volume
from faux_packet.services.metadata import MetadataProjector
from faux_packet.services.store import MemoryStore


class TestMetadataProjector:
    """Tests for MetadataProjector."""

    @pytest.mark.unit
    def test_no_device_configured(self, store, make_device):
        """Test projection without a configured device yields nothing."""
        make_device()

        assert MetadataProjector(store).project() is None
        assert MetadataProjector(store, "").project() is None

    @pytest.mark.unit
    def test_unknown_device(self, store):
        """Test a configured but missing device yields nothing."""
        assert MetadataProjector(store, "missing").project() is None

    @pytest.mark.unit
    def test_device_without_volumes(self, store, make_device):
        """Test a bare device projects an empty volume list."""
        device = make_device(hostname="node-1")

        metadata = MetadataProjector(store, device.id).project()

        assert metadata.id == device.id
        assert metadata.hostname == "node-1"
        assert metadata.facility == device.facility.code
        assert metadata.volumes == []

    @pytest.mark.unit
    @pytest.mark.critical
    def test_attached_volume_projection(self, store, make_facility, make_device, make_volume):
        """Test an attached volume shows up with its transport metadata."""
        facility = make_facility(code="ewr1")
        device = make_device(hostname="node-1", facility=facility)
        volume = make_volume(size=10)
        store.attach_volume(volume.id, device.id)

        metadata = MetadataProjector(store, device.id).project()
        data = metadata.model_dump(mode="json")

        assert data["facility"] == "ewr1"
        assert data["volumes"] == [
            {
                "name": f"volume-{volume.id.split('-')[0]}",
                "iqn": "iqn.2013-05.com.daterainc:tc:01:sn:73d3e29022fddba4",
                "ips": ["10.144.32.8", "10.144.48.8"],
                "capacity": {"size": "10", "unit": "gb"},
            }
        ]

    @pytest.mark.unit
    def test_volumes_in_device_order(self, store, make_device, make_volume):
        """Test volumes follow the order they were attached in."""
        device = make_device()
        volumes = [make_volume(size=s) for s in (5, 7, 9)]
        for volume in reversed(volumes):
            store.attach_volume(volume.id, device.id)

        metadata = MetadataProjector(store, device.id).project()

        assert [v.capacity.size for v in metadata.volumes] == [9, 7, 5]

    @pytest.mark.unit
    def test_shared_volume_visible_to_second_device(self, store, make_device, make_volume):
        """Test a multi-attached volume appears on every attached device."""
        first, second = make_device(), make_device()
        volume = make_volume()
        store.attach_volume(volume.id, first.id)
        store.attach_volume(volume.id, second.id)

        metadata = MetadataProjector(store, second.id).project()

        assert [v.name for v in metadata.volumes] == [volume.name]

    @pytest.mark.unit
    def test_detached_volume_disappears(self, store, make_device, make_volume):
        """Test detaching removes the volume from the projection."""
        device = make_device()
        attachment = store.attach_volume(make_volume().id, device.id)
        store.detach_volume(attachment.id)

        assert MetadataProjector(store, device.id).project().volumes == []

    @pytest.mark.unit
    def test_volume_without_attachments_is_skipped(self, caplog):
        """Test a volume listed on the device but with no attachments is left out."""
        facility = Facility(id="f", name="F1", code="f1", href="/facilities/f")
        device = Device(
            id="d",
            href="/devices/d",
            hostname="d1",
            project_id=None,
            facility=facility,
            volumes=[Href(id="v", href="/storage/v")],
        )
        volume = Volume(id="v", href="/storage/v", name="volume-v", size=10)

        store = MagicMock(spec=MemoryStore)
        store.get_device.return_value = device
        store.get_volume.return_value = volume

        with caplog.at_level(logging.WARNING, logger="faux_packet.services.metadata"):
            metadata = MetadataProjector(store, "d").project()

        assert metadata.volumes == []
        store.get_attachment_metadata.assert_not_called()
        assert "has no attachments" in caplog.text
