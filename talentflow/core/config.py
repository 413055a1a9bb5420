from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "workflow.yaml"

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a workflow configuration file cannot be used."""


class BottleneckThresholds(BaseModel):
    min_employees: int = 10
    min_average_days: float = 14
    high_employees: int = 15
    high_average_days: float = 21
    critical_employees: int = 20
    critical_average_days: float = 30


class WorkflowConfig(BaseModel):
    stuck_after_days: int = 14
    days_per_remaining_step: int = 14
    execute_after_days: int = 30
    monitor_after_days: int = 90
    bottleneck: BottleneckThresholds = Field(default_factory=BottleneckThresholds)
    # advisory flags surfaced to consumers, the engine never acts on them
    auto_advance_enabled: bool = True
    send_reminders: bool = False


DEFAULT_CONFIG = WorkflowConfig()


def _config_path(path: Path | None) -> Path:
    if path is not None:
        return path
    env_path = os.getenv("WORKFLOW_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


def load_workflow_config(path: Path | None = None) -> WorkflowConfig:
    """Load thresholds from YAML, falling back to the built-in defaults."""

    target = _config_path(path)
    if not target.exists():
        logger.debug("Workflow config %s not found, using defaults", target)
        return WorkflowConfig()
    try:
        with target.open("r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {target}") from exc
    section = raw.get("workflow", raw) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"{target} must contain a mapping")
    try:
        config = WorkflowConfig(**section)
    except ValidationError as exc:
        raise ConfigError(f"invalid workflow config in {target}: {exc}") from exc
    logger.info("Loaded workflow config from %s", target)
    return config
