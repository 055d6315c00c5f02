"""Name derivation shared by the store and the metadata service."""

from faux_packet.config import PacketDefaults


def volume_id_to_name(volume_id: str) -> str:
    """
    Convert a volume UUID into the Packet standard volume name.

    "3ee59355-a51a-42a8-b848-86626cc532f0" -> "volume-3ee59355"
    """
    return f"{PacketDefaults.VOLUME_NAME_PREFIX}-{volume_id.split('-')[0]}"


def href(collection: str, entity_id: str) -> str:
    """API path of a single entity, e.g. ``/storage/<id>``."""
    return f"/{collection}/{entity_id}"
