"""Observability: logging."""

from sonora.infrastructure.observability.logging import (
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = ["configure_logging", "get_run_id", "set_run_id"]
