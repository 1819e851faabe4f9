from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, cast

from .domain.values import AggregationType
from .types import ConfigOverrides, YamlConfig


DEFAULT_CONFIG_PATH = Path("configs/config.yaml")


@dataclass(frozen=True)
class Config:
    pipeline_version: str = "v1.0"
    # Used when neither the CLI nor the target's value dimension names one
    default_aggregation: str = AggregationType.SUM.value
    max_errors: int = 50
    targets_path: str = "configs/targets.yaml"
    log_level: str = "INFO"


def load_config(path: Optional[Path], overrides: Optional[ConfigOverrides] = None) -> Config:
    import yaml

    data: YamlConfig = {}

    if DEFAULT_CONFIG_PATH.exists():
        raw = yaml.safe_load(DEFAULT_CONFIG_PATH.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            data.update(cast(YamlConfig, raw))

    # Explicit config file overrides the default one
    if path is not None and path.exists():
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            data.update(cast(YamlConfig, raw))

    if overrides:
        data.update(cast(YamlConfig, {k: v for k, v in overrides.items() if v is not None}))

    defaults = Config()
    agg = str(data.get("default_aggregation", defaults.default_aggregation)).strip().lower()
    # Fail early on a typo instead of at aggregation time
    AggregationType(agg)

    return Config(
        pipeline_version=str(data.get("pipeline_version", defaults.pipeline_version)),
        default_aggregation=agg,
        max_errors=int(data.get("max_errors", defaults.max_errors)),
        targets_path=str(data.get("targets_path", defaults.targets_path)),
        log_level=str(data.get("log_level", defaults.log_level)).upper(),
    )
