from pydantic_settings import BaseSettings
from pydantic import field_validator, ConfigDict
from functools import lru_cache
from typing import List, Optional
import os
import json
import boto3

from shared_utils.constants import Defaults, LogScope, ModelIDs, PLACEHOLDER_CREDENTIALS
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.CONFIG)


def get_secret_from_aws(secret_name: str, region: str = Defaults.AWS_REGION) -> str:
    """Fetch the OpenAI key from AWS Secrets Manager.

    Args:
        secret_name: Name of the secret in Secrets Manager
        region: AWS region

    Returns:
        Secret value or empty string if fetch fails
    """
    try:
        client = boto3.client("secretsmanager", region_name=region)
        response = client.get_secret_value(SecretId=secret_name)
        if "SecretString" in response:
            secret = json.loads(response["SecretString"])
            return secret.get("openai_api_key", "")
        return ""
    except Exception as e:
        logger.warning("secrets_manager_fetch_failed", secret_name=secret_name, error=str(e))
        return ""


def _is_configured(value: Optional[str]) -> bool:
    return value is not None and value.strip() not in PLACEHOLDER_CREDENTIALS


class Settings(BaseSettings):
    """Application configuration with environment variable precedence.

    Precedence: 1) Environment Variables > 2) .env file > 3) Class defaults

    Credentials default to empty and are checked by the component that
    needs them before any network call is made.
    """
    # Application metadata
    app_name: str = "Meeting Project Intelligence"
    app_version: str = "2.0.0"
    app_description: str = "Meeting transcripts turned into project intelligence"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_allow_origins: List[str] = ["*"]
    rate_limit_enabled: bool = True

    # LLM Configuration
    llm_provider: str = "openai"  # "bedrock" or "openai"
    openai_llm_model_id: str = ModelIDs.OPENAI_GPT_4O_MINI
    openai_api_key: Optional[str] = None
    openai_secret_name: Optional[str] = None
    bedrock_region: str = Defaults.AWS_REGION
    bedrock_llm_model_id: str = ModelIDs.BEDROCK_CLAUDE_3_HAIKU
    enable_executive_summary: bool = True

    # Relational store (SQLAlchemy URL)
    database_uri: str = "sqlite:///./data/intelligence.db"

    # Transcript source (Fireflies GraphQL)
    fireflies_api_key: str = ""
    fireflies_api_url: str = "https://api.fireflies.ai/graphql"

    # Blob store (S3 API, Cloudflare R2 via endpoint URL)
    documents_bucket: str = "alleato-documents"
    documents_prefix: str = "meetings"
    aws_region: str = Defaults.AWS_REGION
    s3_endpoint_url: str = ""

    # Search index (Cloudflare AutoRAG)
    cloudflare_account_id: str = ""
    cloudflare_api_token: str = ""
    cloudflare_api_base_url: str = "https://api.cloudflare.com/client/v4"
    autorag_name: str = "alleato-docs"
    autorag_max_results: int = Defaults.AUTORAG_MAX_RESULTS
    autorag_match_threshold: float = Defaults.AUTORAG_MATCH_THRESHOLD

    # Pipeline tuning
    sync_batch_size: int = Defaults.SYNC_BATCH_SIZE
    sync_max_workers: int = Defaults.SYNC_MAX_WORKERS
    transcript_char_limit: int = Defaults.TRANSCRIPT_CHAR_LIMIT
    request_timeout: float = Defaults.REQUEST_TIMEOUT
    project_keywords: List[str] = list(Defaults.PROJECT_KEYWORDS)

    # Environment
    environment: str = "development"
    log_level: str = Defaults.LOG_LEVEL

    model_config = ConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator('llm_provider')
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        """Validate LLM provider is supported."""
        valid_providers = {"openai", "bedrock"}
        if v.lower() not in valid_providers:
            raise ValueError(f"llm_provider must be one of {valid_providers}, got {v}")
        return v.lower()

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is recognized."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}, got {v}")
        return v.lower()

    @field_validator('sync_batch_size', 'sync_max_workers', 'transcript_char_limit')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Batch sizes and limits must be >= 1."""
        if v < 1:
            raise ValueError(f"value must be >= 1, got {v}")
        return v

    def has_fireflies_credentials(self) -> bool:
        """True when a real Fireflies API key is configured."""
        return _is_configured(self.fireflies_api_key)

    def has_autorag_credentials(self) -> bool:
        """True when both the Cloudflare account id and API token are real values."""
        return _is_configured(self.cloudflare_account_id) and _is_configured(
            self.cloudflare_api_token
        )


@lru_cache()
def get_settings() -> Settings:
    """Load and cache application settings.

    If the OpenAI provider is configured and OPENAI_SECRET_NAME is provided,
    fetches the API key from AWS Secrets Manager.

    Returns:
        Validated Settings instance

    Raises:
        ValueError: If settings are invalid
    """
    settings = Settings()

    needs_openai = settings.llm_provider == "openai" and not settings.openai_api_key
    if needs_openai and settings.openai_secret_name:
        secret_key = get_secret_from_aws(settings.openai_secret_name, settings.aws_region)
        if secret_key:
            settings.openai_api_key = secret_key
            os.environ["OPENAI_API_KEY"] = secret_key
            logger.debug("fetched_openai_key_from_secrets_manager")

    # Sensitive values are reported as presence flags only
    logger.info(
        "configuration_loaded",
        environment=settings.environment,
        llm_provider=settings.llm_provider,
        database_uri=settings.database_uri,
        documents_bucket=settings.documents_bucket,
        fireflies_configured=settings.has_fireflies_credentials(),
        autorag_configured=settings.has_autorag_credentials(),
    )

    return settings
