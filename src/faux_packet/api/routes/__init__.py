"""API route modules."""

from faux_packet.api.routes import bgp, devices, facilities, health, metadata, storage

__all__ = ["bgp", "devices", "facilities", "health", "metadata", "storage"]
