"""Runtime settings for the large-integer layer.

Settings are read once, from environment variables, when the
process-wide dispatcher is first built:

    LARGEINT_BACKEND   auto | native | fallback   (default: auto)
    LARGEINT_STRICT    validate backend tags on every operand (default: true)
    LARGEINT_MAX_BITS  largest bit width a shift, width or power may reach
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field


class BackendPreference(str, Enum):
    AUTO = "auto"
    NATIVE = "native"
    FALLBACK = "fallback"


# Same ceiling V8 puts on BigInt length.
DEFAULT_MAX_BITS = 2**30

ENV_PREFIX = "LARGEINT_"


class Settings(BaseModel):
    """Frozen configuration for a Dispatcher and its providers."""

    model_config = ConfigDict(frozen=True)

    backend: BackendPreference = BackendPreference.AUTO
    strict: bool = True
    max_bits: int = Field(default=DEFAULT_MAX_BITS, ge=1)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``LARGEINT_*`` variables.

        Unset variables keep their defaults; invalid values raise
        ``pydantic.ValidationError``.
        """
        if env is None:
            env = os.environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                values[name] = raw.strip().lower()
        return cls.model_validate(values)
