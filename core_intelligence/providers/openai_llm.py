"""
OpenAI LLM provider implementation.
"""

from llama_index.llms.openai import OpenAI
from core_intelligence.providers import LLMProviderBase
from shared_utils.constants import LogScope


class OpenAILLMProvider(LLMProviderBase):
    """OpenAI chat-completion provider via llama-index."""

    def __init__(self, model_id: str, api_key: str, timeout: float = 60.0):
        super().__init__(name=f"OpenAILLM({model_id})")
        self.model_id = model_id
        self.api_key = api_key
        self.timeout = timeout
        self._llm = None

    def initialize(self) -> None:
        """Initialize OpenAI LLM client."""
        try:
            self._llm = OpenAI(
                model=self.model_id,
                api_key=self.api_key,
                temperature=0.1,
                timeout=self.timeout,
            )
            self.logger.info(
                "Initialized OpenAI LLM provider",
                extra={"scope": LogScope.PROVIDER, "model_id": self.model_id}
            )
        except Exception as e:
            self.logger.error(
                "Failed to initialize OpenAI LLM provider",
                extra={"scope": LogScope.PROVIDER, "error": str(e)}
            )
            raise
