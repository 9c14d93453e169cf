"""Settings loading and validation for routegate."""

from routegate.config.loader import expand_env_vars, load_gate_settings, parse_gate_settings
from routegate.config.schema import AuthorizationSettings, GateSettings, LoggingSettings

__all__ = [
    "AuthorizationSettings",
    "GateSettings",
    "LoggingSettings",
    "expand_env_vars",
    "load_gate_settings",
    "parse_gate_settings",
]
