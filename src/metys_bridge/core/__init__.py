"""Configuration and wire contracts shared by the bridge components."""

from .config import BridgeConfig, ConfigError
from .contracts import (
    AnalysisRequest,
    AnalysisResponse,
    PathResolutionError,
    RequestValidationError,
)

__all__ = [
    'BridgeConfig',
    'ConfigError',
    'AnalysisRequest',
    'AnalysisResponse',
    'PathResolutionError',
    'RequestValidationError',
]
