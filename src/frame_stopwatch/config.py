"""All tuneable stopwatch parameters."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from frame_stopwatch.alarms import AlarmKind


class FrameConfig(BaseModel):
    """Frame scheduler parameters."""

    fps: float = Field(default=60.0, gt=0)


class AlarmConfig(BaseModel):
    """Alarm scheduling parameters."""

    default_kind: AlarmKind = AlarmKind.RELATIVE
    # Drop a deadline from the pending list once it has fired.
    evict_fired: bool = False


class EventConfig(BaseModel):
    """Event dispatch parameters."""

    isolate_listener_errors: bool = False


class ApiConfig(BaseModel):
    """HTTP surface parameters."""

    audit_maxlen: int = Field(default=5000, gt=0)


class StopwatchConfig(BaseModel):
    """Complete stopwatch configuration."""

    frames: FrameConfig = Field(default_factory=FrameConfig)
    alarms: AlarmConfig = Field(default_factory=AlarmConfig)
    events: EventConfig = Field(default_factory=EventConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StopwatchConfig":
        """Load config from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(_sections_only(data))

    @classmethod
    def from_env(cls) -> "StopwatchConfig":
        """Load config from the file named by FRAME_STOPWATCH_CONFIG, if set."""
        import os

        config_path = os.getenv("FRAME_STOPWATCH_CONFIG")
        if config_path:
            return cls.from_yaml(config_path)
        return cls()


_SECTIONS = ("frames", "alarms", "events", "api")


def _sections_only(obj: Any) -> dict:
    """Keep the known top-level sections of a YAML mapping.

    Non-mapping section values are passed through for pydantic to reject.
    """
    if not isinstance(obj, dict):
        return {}
    return {k: v for k, v in obj.items() if k in _SECTIONS}
