"""
Configuration management for Faux Packet.

Settings come from ``FPK_`` prefixed environment variables or a ``.env``
file. Values that mirror the real Packet API live in ``PacketDefaults``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, IPvAnyAddress
from pydantic_settings import BaseSettings, SettingsConfigDict


class PacketDefaults:
    """
    Constants that mirror the Packet API as seen by its clients.

    Clients compare these literally, so they must not drift.
    """

    # Returned by an empty facility listing
    DEFAULT_FACILITY_ID = "e1e9c52e-a0bc-4117-b996-0fc94843ea09"
    DEFAULT_FACILITY_NAME = "Parsippany, NJ"
    DEFAULT_FACILITY_CODE = "ewr1"

    # "3ee59355-a51a-..." -> "volume-3ee59355"
    VOLUME_NAME_PREFIX = "volume"

    DEVICE_STATE = "active"
    VOLUME_STATE = "active"
    CAPACITY_UNIT = "gb"

    # Transport metadata handed out for every attachment
    ATTACHMENT_IQN = "iqn.2013-05.com.daterainc:tc:01:sn:73d3e29022fddba4"
    ATTACHMENT_IPS = ("10.144.32.8", "10.144.48.8")

    BGP_STATUS = "enabled"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="FPK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8080, description="API server port")

    # The metadata service cannot ask the caller who it is, so the device
    # whose metadata is served is fixed at deployment time.
    metadata_device: str | None = Field(
        default=None,
        description="ID of the device whose metadata is served on /metadata",
    )
    seed_file: Path | None = Field(
        default=None,
        description="YAML topology loaded into the store at start-up",
    )

    # Store behavior
    partition_by_project: bool = Field(
        default=False,
        description="Filter device and volume listings by project ID",
    )
    require_device_plan: bool = Field(
        default=False,
        description="Reject device creation without a plan",
    )

    # Attachment transport metadata
    attachment_iqn: str = Field(
        default=PacketDefaults.ATTACHMENT_IQN,
        description="iSCSI target name reported for every attachment",
    )
    attachment_ips: tuple[IPvAnyAddress, IPvAnyAddress] = Field(
        default=PacketDefaults.ATTACHMENT_IPS,
        description="Portal addresses reported for every attachment",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["json", "human"] = Field(
        default="json",
        description="Log output format",
    )


# Global settings instance
settings = Settings()
