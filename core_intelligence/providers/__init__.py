"""
Abstract base classes for swappable LLM providers.
Concrete providers satisfy ports.llm_provider.LLMProviderPort.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from shared_utils.constants import LogScope
from shared_utils.error_handler import ModelError


class BaseProvider(ABC):
    """Base class for all providers."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def initialize(self) -> None:
        """Initialize provider. Called after instantiation."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available and credentials are valid."""
        pass


class LLMProviderBase(BaseProvider):
    """Abstract base for LLM providers.

    Subclasses build a llama-index LLM in ``initialize`` and expose it as
    ``_llm``; completion and error handling are shared here.
    """

    _llm = None

    def is_available(self) -> bool:
        return self._llm is not None

    def generate(self, prompt: str, context: Optional[str] = None) -> str:
        """Complete *prompt*, optionally preceded by *context*.

        Raises:
            ModelError: If the provider is not initialized or the call fails.
        """
        if not self.is_available():
            raise ModelError(f"{self.name} not initialized")

        full_prompt = f"{context}\n\n{prompt}" if context else prompt
        try:
            response = self._llm.complete(full_prompt)
        except Exception as e:
            self.logger.error(
                "LLM generation failed",
                extra={"scope": LogScope.PROVIDER, "provider": self.name, "error": str(e)}
            )
            raise ModelError(f"{self.name} generation failed: {e}") from e
        return response.text
