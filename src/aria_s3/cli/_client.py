"""CLI helpers for config and connection construction."""

from __future__ import annotations

from aria_s3.client import S3StoreClient, open_connection
from aria_s3.config import AriaS3Config


def config_from_state() -> AriaS3Config:
    """Build a config from environment defaults overridden by global CLI options."""
    from aria_s3.cli import state

    cfg = AriaS3Config.from_env()
    for name in ("bucket", "access_key", "secret_key", "region", "endpoint_url"):
        value = getattr(state, name)
        if value:
            setattr(cfg, name, value)
    return cfg


def open_client() -> tuple[AriaS3Config, S3StoreClient]:
    cfg = config_from_state()
    return cfg, open_connection(cfg)
