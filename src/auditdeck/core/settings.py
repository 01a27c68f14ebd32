import os
from typing import List, Optional

import structlog
import tomlkit
from tomlkit.exceptions import TOMLKitError
from pydantic import BaseModel, Field, field_validator

from ..audit.models import TREND_WINDOWS

log = structlog.get_logger()

CONFIG_FILENAME = "auditdeck.toml"


class EngineSettings(BaseModel):
    kind: str = Field(default="files", description="'http' or 'files'")
    base_url: str = ""
    api_token: str = ""
    timeout_sec: int = 30
    verify_ssl: bool = True
    data_dir: str = "audit-data"

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        v = (v or "files").strip().lower()
        if v not in ("http", "files"):
            raise ValueError(f"Unsupported engine kind: {v}")
        return v


class DashboardSettings(BaseModel):
    sort_column: str = "status"
    sort_direction: str = "asc"
    trend_days: int = 30
    instance_url: str = ""

    @field_validator("trend_days")
    @classmethod
    def validate_trend_days(cls, v: int) -> int:
        if v not in TREND_WINDOWS:
            raise ValueError(f"trend_days must be one of {list(TREND_WINDOWS)}")
        return v


class ExportSettings(BaseModel):
    out_dir: str = "exports"


class Settings(BaseModel):
    engine: EngineSettings = Field(default_factory=EngineSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    exports: ExportSettings = Field(default_factory=ExportSettings)


def default_paths() -> List[str]:
    paths: List[str] = []
    paths.append(os.path.join(os.getcwd(), CONFIG_FILENAME))
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    paths.append(os.path.join(xdg, "auditdeck", CONFIG_FILENAME))
    return paths


def locate_config(explicit: Optional[str] = None) -> Optional[str]:
    """Return the explicit path if given, else the first default that exists."""
    if explicit:
        return explicit
    for p in default_paths():
        if os.path.exists(p):
            return p
    return None


def _apply_env(s: Settings) -> Settings:
    token = os.environ.get("AUDITDECK_API_TOKEN")
    if token:
        s.engine.api_token = token
    verify = os.environ.get("AUDITDECK_VERIFY_SSL")
    if verify is not None:
        s.engine.verify_ssl = verify.strip().lower() == "true"
    return s


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from TOML, falling back to defaults.

    Args:
        path: Optional explicit config path

    Returns:
        Settings object with environment overrides applied
    """
    cfg_path = locate_config(path)
    if cfg_path and os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r") as f:
                data = tomlkit.parse(f.read()).unwrap()
            return _apply_env(
                Settings(
                    engine=EngineSettings(**data.get("engine", {})),
                    dashboard=DashboardSettings(**data.get("dashboard", {})),
                    exports=ExportSettings(**data.get("exports", {})),
                )
            )
        except (OSError, ValueError, TOMLKitError) as e:
            log.error("settings.load_error", path=cfg_path, error=str(e))
            return _apply_env(Settings())
    return _apply_env(Settings())


def save_settings(path: Optional[str], s: Settings) -> str:
    cfg_path = locate_config(path) or default_paths()[0]
    parent = os.path.dirname(cfg_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    doc = tomlkit.document()
    doc.add("engine", tomlkit.table())
    doc["engine"]["kind"] = s.engine.kind
    doc["engine"]["base_url"] = s.engine.base_url
    doc["engine"]["api_token"] = s.engine.api_token
    doc["engine"]["timeout_sec"] = s.engine.timeout_sec
    doc["engine"]["verify_ssl"] = s.engine.verify_ssl
    doc["engine"]["data_dir"] = s.engine.data_dir
    doc.add("dashboard", tomlkit.table())
    doc["dashboard"]["sort_column"] = s.dashboard.sort_column
    doc["dashboard"]["sort_direction"] = s.dashboard.sort_direction
    doc["dashboard"]["trend_days"] = s.dashboard.trend_days
    doc["dashboard"]["instance_url"] = s.dashboard.instance_url
    doc.add("exports", tomlkit.table())
    doc["exports"]["out_dir"] = s.exports.out_dir
    with open(cfg_path, "w") as f:
        f.write(tomlkit.dumps(doc))
    log.info("settings.saved", path=cfg_path)
    return cfg_path
