"""
Bedrock LLM provider implementation.
"""

from llama_index.llms.bedrock import Bedrock
from core_intelligence.providers import LLMProviderBase
from shared_utils.constants import LogScope


class BedrockLLMProvider(LLMProviderBase):
    """AWS Bedrock provider via llama-index."""

    def __init__(self, model_id: str, region: str):
        super().__init__(name=f"BedrockLLM({model_id})")
        self.model_id = model_id
        self.region = region
        self._llm = None

    def initialize(self) -> None:
        try:
            self._llm = Bedrock(
                model=self.model_id,
                region_name=self.region,
                temperature=0.1,
            )
            self.logger.info(
                "Initialized Bedrock LLM provider",
                extra={
                    "scope": LogScope.PROVIDER,
                    "model_id": self.model_id,
                    "region": self.region
                }
            )
        except Exception as e:
            self.logger.error(
                "Failed to initialize Bedrock LLM provider",
                extra={"scope": LogScope.PROVIDER, "error": str(e)}
            )
            raise
