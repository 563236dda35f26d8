"""Categorizer configuration.

Settings are plain values injected into :class:`~spend_analysis.categorize.Categorizer`.
Only :meth:`CategorizerSettings.from_env` looks at the process environment,
and only entrypoints (the CLI) call it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, TypeAlias

ProviderName: TypeAlias = Literal["anthropic", "openai"]

PROVIDER_NAMES: tuple[ProviderName, ...] = ("anthropic", "openai")

# Checked in this order; the first credential present selects the provider.
CREDENTIAL_ENV_VARS: Mapping[ProviderName, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}
MODEL_ENV_VAR = "SPEND_ANALYSIS_LLM_MODEL"
TIMEOUT_ENV_VAR = "SPEND_ANALYSIS_LLM_TIMEOUT"

DEFAULT_TEMPERATURE = 0.2


@dataclass(frozen=True, slots=True)
class CategorizerSettings:
    """Remote provider selector, credential and sampling knobs.

    Attributes
    ----------
    provider:
        ``"anthropic"``, ``"openai"`` or ``None`` for rules-only operation.
    api_key:
        Credential for ``provider``. Required when ``provider`` is set.
    model:
        Optional model override; each provider has its own default.
    temperature:
        Sampling temperature. Kept low so repeated calls tend to agree.
    timeout:
        Optional request timeout in seconds handed to the SDK client. ``None``
        keeps the SDK default.
    """

    provider: ProviderName | None = None
    api_key: str | None = None
    model: str | None = None
    temperature: float = DEFAULT_TEMPERATURE
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds when set")
        if self.provider is None:
            return
        if self.provider not in PROVIDER_NAMES:
            raise ValueError(
                f"Unsupported provider: {self.provider!r}. Allowed: {list(PROVIDER_NAMES)}"
            )
        if not (self.api_key or "").strip():
            raise ValueError(f"provider {self.provider!r} requires an api_key")

    @property
    def remote_enabled(self) -> bool:
        return self.provider is not None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CategorizerSettings:
        """Build settings from ``environ`` (defaults to ``os.environ``).

        ``ANTHROPIC_API_KEY`` wins over ``OPENAI_API_KEY`` when both are set.
        ``SPEND_ANALYSIS_LLM_MODEL`` and ``SPEND_ANALYSIS_LLM_TIMEOUT`` are
        optional overrides.
        """

        env = os.environ if environ is None else environ

        provider: ProviderName | None = None
        api_key: str | None = None
        for name, var in CREDENTIAL_ENV_VARS.items():
            value = (env.get(var) or "").strip()
            if value:
                provider, api_key = name, value
                break

        model = (env.get(MODEL_ENV_VAR) or "").strip() or None
        timeout_raw = (env.get(TIMEOUT_ENV_VAR) or "").strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else None
        except ValueError as exc:
            raise ValueError(f"{TIMEOUT_ENV_VAR} must be a number: {timeout_raw!r}") from exc

        return cls(provider=provider, api_key=api_key, model=model, timeout=timeout)


__all__ = [
    "ProviderName",
    "PROVIDER_NAMES",
    "CREDENTIAL_ENV_VARS",
    "DEFAULT_TEMPERATURE",
    "CategorizerSettings",
]
