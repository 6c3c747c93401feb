"""Configuration loading from environment variables and CLI flags."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Provider(str, Enum):
    GOOGLE = "google"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


DEFAULTS = {
    Provider.GOOGLE: "gemini-2.0-flash",
    Provider.ANTHROPIC: "claude-sonnet-4-6",
    Provider.OPENAI: "gpt-4o",
}

ENV_KEYS = {
    Provider.GOOGLE: "GEMINI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
    Provider.OPENAI: "OPENAI_API_KEY",
}

# Generation parameters are written in camelCase and renamed per vendor by
# the adapters; only the output-token limit differs in name.
MAX_TOKENS_PARAM = {
    Provider.GOOGLE: "maxOutputTokens",
    Provider.ANTHROPIC: "maxTokens",
    Provider.OPENAI: "maxTokens",
}


@dataclass
class Config:
    provider: Provider
    model: str
    api_key: str
    llm_params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(
        cls,
        provider: Provider,
        model_override: Optional[str] = None,
        api_key_override: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> "Config":
        model = model_override or DEFAULTS[provider]
        api_key = api_key_override or os.environ.get(ENV_KEYS[provider], "")
        if not api_key:
            raise RuntimeError(
                f"No API key for {provider.value}. "
                f"Set {ENV_KEYS[provider]} in your environment or .env file."
            )

        llm_params: dict[str, Any] = {}
        if temperature is not None:
            llm_params["temperature"] = temperature
        if max_tokens is not None:
            llm_params[MAX_TOKENS_PARAM[provider]] = max_tokens

        return cls(provider=provider, model=model, api_key=api_key, llm_params=llm_params)
