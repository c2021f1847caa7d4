"""
Port interface for LLM text generation.

The concrete providers in core_intelligence/providers/ implement this
contract so services depend on the interface, not the implementation.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class LLMProviderPort(Protocol):
    """Abstract interface for LLM text generation."""

    def generate(self, prompt: str, context: Optional[str] = None) -> str:
        """Generate text from a prompt.

        Args:
            prompt: User/system prompt.
            context: Optional context to prepend.

        Returns:
            Raw generated text. Callers must not assume it is well-formed.
        """
        ...
