"""
Faux Packet - an in-memory Packet / Equinix Metal API for client testing.

This package stands in for the bare-metal provider's management API so
client code (CSI drivers, cloud controllers, provisioning scripts) can be
exercised without a live backend:

- Facilities and plans
- Devices with project scoping
- Block storage volumes with attach/detach
- The device metadata service storage view
- BGP configuration

Everything lives in memory; restarting the process discards all state.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
