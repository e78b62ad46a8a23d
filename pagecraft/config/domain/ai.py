"""AI provider configuration and per-provider model defaults."""

from typing import Literal, TypeAlias

from pydantic import BaseModel

AIProvider: TypeAlias = Literal["anthropic", "openai", "google"]
QualityMode: TypeAlias = Literal["standard", "high"]

# LiteLLM model identifiers. High quality uses the same model plus self-refine.
DEFAULT_MODELS: dict[str, str] = {
    "anthropic": "anthropic/claude-sonnet-4-20250514",
    "openai": "openai/gpt-4o",
    "google": "gemini/gemini-2.0-flash",
}

# Read when neither the section nor ``ai`` sets api_key. LiteLLM itself looks
# for GEMINI_API_KEY, so the google key is passed explicitly.
API_KEY_ENV_VARS: dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "google": "GOOGLE_API_KEY",
}


class AiConfig(BaseModel, frozen=True):
    provider: AIProvider = "anthropic"
    quality: QualityMode = "standard"
    api_key: str | None = None
