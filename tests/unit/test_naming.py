"""Unit tests for name derivation."""

import pytest

from faux_packet.naming import href, volume_id_to_name


class TestVolumeIdToName:
    """Tests for volume name derivation."""

    @pytest.mark.unit
    @pytest.mark.critical
    def test_uses_first_uuid_segment(self):
        """Test the documented example."""
        assert volume_id_to_name("3ee59355-a51a-42a8-b848-86626cc532f0") == "volume-3ee59355"

    @pytest.mark.unit
    def test_only_first_segment_matters(self):
        """Test ids sharing a first segment share a name."""
        assert volume_id_to_name("abc-1") == volume_id_to_name("abc-2-3")

    @pytest.mark.unit
    def test_id_without_hyphen(self):
        """Test an id without hyphens is used whole."""
        assert volume_id_to_name("plain") == "volume-plain"


class TestHref:
    """Tests for entity paths."""

    @pytest.mark.unit
    def test_href(self):
        """Test entity paths are rooted at the collection."""
        assert href("storage", "abc") == "/storage/abc"
        assert href("storage/attachments", "x") == "/storage/attachments/x"
