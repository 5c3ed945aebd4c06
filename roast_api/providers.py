"""LLM Provider abstractions using Strategy Pattern."""

import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

import litellm
from loguru import logger

from .config import Settings
from .exceptions import ConfigError, ModelError
from .types import TokenUsage


def setup_litellm() -> None:
    """Setup litellm configuration."""
    litellm.set_verbose = False
    litellm.drop_params = True
    litellm.suppress_debug_info = True

    os.environ["LITELLM_LOG"] = "INFO"


@dataclass
class LLMConfig:
    """Configuration for LLM providers."""

    model: str
    api_key: str | None = None
    timeout: int | None = None
    temperature: float = 1.0


@dataclass
class LLMResponse:
    """Standard response from LLM providers."""

    text: str
    model: str
    usage: TokenUsage


class LLMProvider(Protocol):
    """Protocol for LLM providers."""

    async def complete(self, prompt: str) -> LLMResponse: ...
    async def health_check(self) -> bool: ...


class SimpleLLMProvider:
    """Single-shot completion through litellm.

    No retries: a failed call is reported to the caller once.
    """

    def __init__(self, config: LLMConfig, provider_name: str) -> None:
        """Initialize the provider.

        Args:
            config: LLM configuration
            provider_name: Name of the provider for logging
        """
        self.config = config
        self.provider_name = provider_name

        setup_litellm()

    async def complete(self, prompt: str) -> LLMResponse:
        """Generate completion for the given prompt.

        Raises:
            ConfigError: If no API key is configured.
            ModelError: If the completion call fails or returns no text.
        """
        if not self.config.api_key:
            raise ConfigError(f"{self.provider_name} API key is not configured")

        logger.debug(f"Sending request to {self.provider_name}")
        try:
            response = await litellm.acompletion(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                timeout=self.config.timeout,
                api_key=self.config.api_key,
                temperature=self.config.temperature,
            )
            text = response.choices[0].message.content
        except Exception as e:
            logger.error(f"{self.provider_name} completion failed: {e}")
            raise ModelError(f"{self.provider_name} API error: {e}") from e

        if text is None:
            raise ModelError(f"{self.provider_name} returned an empty response")

        logger.debug(f"Received response from {self.provider_name}")
        return LLMResponse(
            text=text,
            model=response.model,
            usage=self._extract_usage(response),
        )

    def _extract_usage(self, response: Any) -> TokenUsage:
        """Extract usage data from response."""
        typed_usage: TokenUsage = {}

        if getattr(response, "usage", None):
            usage_data = response.usage.model_dump()

            for field in ["prompt_tokens", "completion_tokens", "total_tokens"]:
                if field in usage_data:
                    typed_usage[field] = usage_data[field]  # type: ignore

            try:
                cost = litellm.completion_cost(completion_response=response)
                if cost is not None:
                    typed_usage["cost_usd"] = Decimal(str(cost))
            except Exception as e:  # noqa: BLE001
                logger.debug(f"Cost calculation not available for {response.model}: {e}")

        return typed_usage

    async def health_check(self) -> bool:
        """Check if provider is configured."""
        return bool(self.config.api_key)


def create_llm_provider(settings: Settings) -> LLMProvider:
    """Create the Gemini provider from settings.

    A missing API key does not fail here; it is reported on the first
    completion so the service can still start and answer other routes.
    """
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set, roast generation will fail")

    config = LLMConfig(
        model=settings.gemini_model,
        api_key=settings.gemini_api_key,
        timeout=settings.llm_timeout,
    )
    logger.info(f"Using Gemini provider ({config.model})")
    return SimpleLLMProvider(config, "Gemini")
