"""
Factory for creating the configured LLM provider.
"""

from typing import Optional
import logging

from core_intelligence.providers import LLMProviderBase
from core_intelligence.providers.bedrock_llm import BedrockLLMProvider
from core_intelligence.providers.openai_llm import OpenAILLMProvider
from shared_utils.config_loader import Settings, get_settings
from shared_utils.constants import LLMProvider, LogScope, PLACEHOLDER_CREDENTIALS
from shared_utils.error_handler import ConfigurationError


logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM providers."""

    @staticmethod
    def create(settings: Optional[Settings] = None) -> LLMProviderBase:
        """Create configured LLM provider.

        Args:
            settings: Optional settings override; defaults to get_settings().

        Returns:
            Initialized LLM provider.

        Raises:
            ConfigurationError: If credentials or model settings are missing.
        """
        settings = settings or get_settings()
        llm_provider = settings.llm_provider

        logger.info(
            "Creating LLM provider",
            extra={"scope": LogScope.PROVIDER, "provider": llm_provider}
        )

        if llm_provider == LLMProvider.OPENAI.value:
            api_key = (settings.openai_api_key or "").strip()
            if api_key in PLACEHOLDER_CREDENTIALS:
                raise ConfigurationError("OPENAI_API_KEY not configured")
            provider: LLMProviderBase = OpenAILLMProvider(
                model_id=settings.openai_llm_model_id,
                api_key=api_key,
                timeout=settings.request_timeout,
            )
        elif llm_provider == LLMProvider.BEDROCK.value:
            if not settings.bedrock_region or not settings.bedrock_llm_model_id:
                raise ConfigurationError("BEDROCK_REGION or BEDROCK_LLM_MODEL_ID not configured")
            provider = BedrockLLMProvider(
                model_id=settings.bedrock_llm_model_id,
                region=settings.bedrock_region
            )
        else:
            raise ConfigurationError(f"Unknown LLM provider: {llm_provider}")

        try:
            provider.initialize()
        except Exception as e:
            logger.error(
                "Failed to create LLM provider",
                extra={"scope": LogScope.PROVIDER, "provider": llm_provider, "error": str(e)}
            )
            raise ConfigurationError(f"LLM provider initialization failed: {e}") from e
        return provider
