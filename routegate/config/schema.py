"""Pydantic settings models for routegate.

Defines the validated structure of a gate settings file.
"""

from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, Field, field_validator

from routegate.constants import DEFAULT_LOG_LEVEL


class AuthorizationSettings(BaseModel):
    """Denial behaviour and action aliases of the gate."""

    denied_status: int = Field(
        default=0,
        description="HTTP status of denial responses (0 = 403).",
    )
    denied_message: str = Field(
        default="",
        description="Message of denial responses (empty = built-in message).",
    )
    action_aliases: Dict[str, str] = Field(
        default_factory=dict,
        description="Raw action -> canonical action, merged over the defaults.",
    )
    skip_paths: List[str] = Field(
        default_factory=list,
        description="Request paths that bypass the gate.",
    )

    @field_validator("denied_status")
    @classmethod
    def _check_status(cls, v: int) -> int:
        if v != 0 and not 100 <= v <= 599:
            raise ValueError(f"denied_status must be 0 or an HTTP status code, got {v}")
        return v

    @field_validator("action_aliases")
    @classmethod
    def _normalize_aliases(cls, v: Dict[str, str]) -> Dict[str, str]:
        normalized: Dict[str, str] = {}
        for raw, canonical in v.items():
            raw_key = raw.strip().lower()
            value = canonical.strip().lower()
            if not raw_key or not value:
                raise ValueError(f"action alias entries must be non-empty: {raw!r} -> {canonical!r}")
            normalized[raw_key] = value
        return normalized


class LoggingSettings(BaseModel):
    """Log level and optional log file."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = DEFAULT_LOG_LEVEL
    file: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class GateSettings(BaseModel):
    """Top-level settings file model."""

    version: str = "1"
    authorization: AuthorizationSettings = Field(default_factory=AuthorizationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
