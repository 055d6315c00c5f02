"""
Unit tests for Pydantic models.
"""

import pytest
from pydantic import ValidationError

from faux_packet.models import (
    BGPConfigRequest,
    BillingCycle,
    DeviceCreate,
    FacilityCreate,
    PlanCreate,
    VolumeCapacity,
    VolumeCreate,
    VolumeInfo,
)


class TestCatalogModels:
    """Tests for facility and plan request models."""

    @pytest.mark.unit
    @pytest.mark.parametrize("code", ["ewr1", "ams1", "sjc1", "x"])
    def test_valid_facility_codes(self, code):
        """Test short lowercase codes are accepted."""
        assert FacilityCreate(name="F", code=code).code == code

    @pytest.mark.unit
    @pytest.mark.parametrize("code", ["", "EWR1", "ewr-1", "a" * 17])
    def test_invalid_facility_codes(self, code):
        """Test malformed codes are rejected."""
        with pytest.raises(ValidationError):
            FacilityCreate(name="F", code=code)

    @pytest.mark.unit
    def test_plan_slug(self):
        """Test plan slugs allow the usual separators."""
        assert PlanCreate(name="P", slug="baremetal_0").slug == "baremetal_0"
        assert PlanCreate(name="P", slug="c3.small.x86").slug == "c3.small.x86"
        with pytest.raises(ValidationError):
            PlanCreate(name="P", slug="Bad Slug")


class TestDeviceCreate:
    """Tests for DeviceCreate."""

    @pytest.mark.unit
    def test_plan_optional(self):
        """Test only hostname and facility are required."""
        request = DeviceCreate(hostname="node-1", facility="ewr1")

        assert request.plan is None

    @pytest.mark.unit
    def test_facility_required(self):
        """Test an empty facility is rejected."""
        with pytest.raises(ValidationError):
            DeviceCreate(hostname="node-1", facility="")


class TestVolumeCreate:
    """Tests for VolumeCreate."""

    @pytest.mark.unit
    def test_defaults(self):
        """Test optional volume fields have defaults."""
        request = VolumeCreate(size=10)

        assert request.description == ""
        assert request.billing_cycle == BillingCycle.HOURLY
        assert request.locked is False

    @pytest.mark.unit
    @pytest.mark.parametrize("size", [0, -1])
    def test_size_positive(self, size):
        """Test sizes must be at least one."""
        with pytest.raises(ValidationError):
            VolumeCreate(size=size)

    @pytest.mark.unit
    def test_unknown_billing_cycle(self):
        """Test billing cycles are restricted."""
        with pytest.raises(ValidationError):
            VolumeCreate(size=1, billing_cycle="weekly")


class TestMetadataModels:
    """Tests for metadata models."""

    @pytest.mark.unit
    def test_capacity_size_serialized_as_string(self):
        """Test capacity size is emitted as a string."""
        data = VolumeCapacity(size=10).model_dump()

        assert data == {"size": "10", "unit": "gb"}

    @pytest.mark.unit
    def test_ips_validated(self):
        """Test portal addresses must be IP addresses."""
        with pytest.raises(ValidationError):
            VolumeInfo(
                name="volume-x",
                iqn="iqn.test",
                ips=["not-an-ip"],
                capacity=VolumeCapacity(size=1),
            )


class TestBGPConfigRequest:
    """Tests for BGPConfigRequest."""

    @pytest.mark.unit
    @pytest.mark.parametrize("asn", [0, 4294967296])
    def test_asn_range(self, asn):
        """Test the ASN must be a valid 32-bit AS number."""
        with pytest.raises(ValidationError):
            BGPConfigRequest(deployment_type="local", asn=asn)

    @pytest.mark.unit
    def test_md5_length(self):
        """Test the session password is limited to 20 characters."""
        with pytest.raises(ValidationError):
            BGPConfigRequest(deployment_type="local", asn=65000, md5="x" * 21)

    @pytest.mark.unit
    def test_deployment_type(self):
        """Test only local and global deployments are accepted."""
        with pytest.raises(ValidationError):
            BGPConfigRequest(deployment_type="regional", asn=65000)
