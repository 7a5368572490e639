"""Configuration package."""

from .settings import (
    ModelEndpointSettings,
    ObservabilitySettings,
    OrchestrationSettings,
    Settings,
    ToolSettings,
    get_settings,
)

__all__ = [
    "ModelEndpointSettings",
    "ObservabilitySettings",
    "OrchestrationSettings",
    "Settings",
    "ToolSettings",
    "get_settings",
]
