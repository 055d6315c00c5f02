"""
Services for Faux Packet.

These hold the behavior behind the API:
- The in-memory entity store and its relationship maintenance
- Listing pagination
- The metadata service projection
- Seed topology loading
"""

from faux_packet.services.metadata import MetadataProjector
from faux_packet.services.pagination import calculate_slice, paginate, parse_list_options
from faux_packet.services.seed import SeedError, SeedResult, apply_seed, load_seed
from faux_packet.services.store import MemoryStore

__all__ = [
    "MemoryStore",
    "MetadataProjector",
    "SeedError",
    "SeedResult",
    "apply_seed",
    "calculate_slice",
    "load_seed",
    "paginate",
    "parse_list_options",
]
