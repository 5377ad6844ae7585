"""Config module exports."""

from smartdiff.config.loader import load_config
from smartdiff.config.models import (
    AnalysisConfig,
    GitHubConfig,
    LoggingConfig,
    LogOutputConfig,
    SmartDiffConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "GitHubConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SmartDiffConfig",
]
