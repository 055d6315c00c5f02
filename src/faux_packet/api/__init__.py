"""
Faux Packet API.

Serves the subset of the Packet API that storage and provisioning clients
use:

1. Catalog (/facilities, /plans)
2. Devices (/projects/{project_id}/devices, /devices/{device_id})
3. Block storage (/projects/{project_id}/storage, /storage/...)
4. BGP (/projects/{project_id}/bgp-configs)
5. Device metadata service (/metadata)
"""

from faux_packet.api.app import create_app

__all__ = ["create_app"]
