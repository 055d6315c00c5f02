"""
Consistent logging configuration for Faux Packet.

Provides:
- Structured JSON logging with a fixed schema
- Human readable console output for local runs
- Per-module log level configuration
- Request correlation IDs
- Masking of BGP session passwords
"""

import contextvars
import json
import logging
import re
import sys
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# Context variable for request correlation ID
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str | None) -> contextvars.Token:
    """Set the correlation ID for the current context."""
    return correlation_id_var.set(correlation_id)


class LogEventType(str, Enum):
    """Standard event types for categorization."""

    # Application lifecycle
    APP_START = "app.start"
    APP_STOP = "app.stop"

    # Request handling
    REQUEST_START = "request.start"
    REQUEST_END = "request.end"

    # Catalog
    FACILITY_CREATE = "facility.create"
    PLAN_CREATE = "plan.create"

    # Devices
    DEVICE_CREATE = "device.create"
    DEVICE_UPDATE = "device.update"
    DEVICE_DELETE = "device.delete"

    # Storage
    VOLUME_CREATE = "volume.create"
    VOLUME_DELETE = "volume.delete"
    VOLUME_ATTACH = "volume.attach"
    VOLUME_DETACH = "volume.detach"

    # BGP
    BGP_ENABLE = "bgp.enable"

    # Metadata service
    METADATA_SERVE = "metadata.serve"
    METADATA_SKIP = "metadata.skip"

    # Seeding
    SEED_LOAD = "seed.load"


class LogSchema(BaseModel):
    """
    Schema every structured log line conforms to.

    Fields other than the required four are emitted only when set.
    """

    timestamp: str = Field(description="ISO 8601 timestamp in UTC")
    level: str = Field(description="Log level")
    message: str = Field(description="Human-readable log message")
    logger: str = Field(description="Logger name (module path)")

    event_type: str | None = Field(
        default=None,
        description="Categorized event type from LogEventType",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing",
    )

    # Resource context
    resource_type: str | None = Field(
        default=None,
        description="Type of resource (device, volume, attachment, ...)",
    )
    resource_id: str | None = Field(default=None, description="ID of the resource")
    project_id: str | None = Field(default=None, description="Project scope")

    # Error context
    error_type: str | None = Field(default=None, description="Exception class name")
    error_message: str | None = Field(default=None, description="Exception message")
    stack_trace: str | None = Field(default=None, description="Formatted stack trace")

    duration_ms: float | None = Field(
        default=None,
        description="Operation duration in milliseconds",
    )
    extra: dict[str, Any] | None = Field(
        default=None,
        description="Additional structured data",
    )

    source_file: str | None = Field(default=None, description="Source file name")
    source_line: int | None = Field(default=None, description="Source line number")
    source_function: str | None = Field(default=None, description="Function name")


# Patterns for sensitive values that should be masked
SENSITIVE_PATTERNS = [
    (re.compile(r'md5["\']?\s*[=:]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "md5=***"),
    (re.compile(r'password["\']?\s*[=:]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "password=***"),
    (re.compile(r'token["\']?\s*[=:]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "token=***"),
]

# LogRecord attributes that are not user supplied extras
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }
)


def mask_sensitive_data(message: str) -> str:
    """Mask sensitive data in log messages."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class StructuredLogFormatter(logging.Formatter):
    """Formatter that renders records as one JSON object per line."""

    def __init__(self, include_source: bool = True, mask_sensitive: bool = True):
        super().__init__()
        self.include_source = include_source
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.mask_sensitive:
            message = mask_sensitive_data(message)

        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": message,
            "logger": record.name,
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        extra_fields = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            if key in LogSchema.model_fields:
                log_entry[key] = value.value if isinstance(value, Enum) else value
            else:
                extra_fields[key] = value

        if extra_fields:
            log_entry["extra"] = extra_fields

        if self.include_source:
            log_entry["source_file"] = record.filename
            log_entry["source_line"] = record.lineno
            log_entry["source_function"] = record.funcName

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type:
                log_entry["error_type"] = exc_type.__name__
            if exc_value:
                log_entry["error_message"] = str(exc_value)
            log_entry["stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Console formatter with optional colors."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, mask_sensitive: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.mask_sensitive = mask_sensitive

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level:8}{self.RESET}"
        else:
            level = f"{level:8}"

        message = record.getMessage()
        if self.mask_sensitive:
            message = mask_sensitive_data(message)

        correlation_id = get_correlation_id()
        if correlation_id:
            output = f"{timestamp} | {level} | [{correlation_id[:8]}] {record.name:30} | {message}"
        else:
            output = f"{timestamp} | {level} | {record.name:40} | {message}"

        if record.exc_info:
            output += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return output


class LogConfig(BaseModel):
    """Configuration for the logging system."""

    level: str = Field(default="INFO", description="Default log level")
    format: str = Field(default="json", description="Output format: 'json' or 'human'")
    include_source: bool = Field(default=True, description="Include source file/line info")
    mask_sensitive: bool = Field(default=True, description="Mask BGP passwords and tokens")
    use_colors: bool = Field(default=True, description="Use colors in human format")

    module_levels: dict[str, str] = Field(
        default_factory=lambda: {
            "uvicorn": "INFO",
            "uvicorn.access": "WARNING",
            "uvicorn.error": "INFO",
            "fastapi": "INFO",
            "httpx": "WARNING",
            "faux_packet": "INFO",
            "faux_packet.services": "INFO",
            "faux_packet.api": "INFO",
        },
        description="Per-module log level overrides",
    )


def configure_logging(config: LogConfig | None = None) -> None:
    """
    Configure the root logger and all module loggers.

    Call this once at application startup.
    """
    if config is None:
        config = LogConfig()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # filter at handler level
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, config.level.upper()))

    if config.format == "json":
        formatter: logging.Formatter = StructuredLogFormatter(
            include_source=config.include_source,
            mask_sensitive=config.mask_sensitive,
        )
    else:
        formatter = HumanReadableFormatter(
            use_colors=config.use_colors,
            mask_sensitive=config.mask_sensitive,
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    for module, level in config.module_levels.items():
        logging.getLogger(module).setLevel(getattr(logging, level.upper()))


def log_event(
    logger: logging.Logger,
    event_type: LogEventType,
    msg: str,
    *,
    level: int = logging.INFO,
    resource_type: str | None = None,
    resource_id: str | None = None,
    project_id: str | None = None,
    duration_ms: float | None = None,
    **extra: Any,
) -> None:
    """
    Log a categorized event with schema fields attached.

    Usage:
        log_event(logger, LogEventType.VOLUME_ATTACH, "Attached volume",
                  resource_type="attachment", resource_id=attachment.id)
    """
    fields: dict[str, Any] = {"event_type": event_type.value}
    if resource_type:
        fields["resource_type"] = resource_type
    if resource_id:
        fields["resource_id"] = resource_id
    if project_id:
        fields["project_id"] = project_id
    if duration_ms is not None:
        fields["duration_ms"] = duration_ms
    fields.update(extra)
    logger.log(level, msg, extra=fields)
