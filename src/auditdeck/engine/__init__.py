"""Audit engine clients."""

from .base import AuditEngine
from .files import FileAuditEngine
from .http import HttpAuditEngine

__all__ = ["AuditEngine", "FileAuditEngine", "HttpAuditEngine", "create_engine"]


def create_engine(settings) -> AuditEngine:
    """Build the engine configured in settings.engine."""
    cfg = settings.engine
    if cfg.kind == "http":
        return HttpAuditEngine(
            base_url=cfg.base_url,
            token=cfg.api_token,
            timeout_sec=cfg.timeout_sec,
            verify_ssl=cfg.verify_ssl,
        )
    return FileAuditEngine(cfg.data_dir)
