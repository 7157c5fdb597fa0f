from functools import lru_cache
from typing import Annotated, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

load_dotenv()


SUPPORTED_PROVIDERS = {"openai", "huggingface"}


class LlmConfig(BaseSettings):
    """Credentials and tuning for the upstream text providers.

    Provider choice is driven entirely by which credentials are present.
    ``provider_order`` decides which credentialed provider wins when more
    than one is configured; the credential-less public provider is always
    tried last.
    """

    # OpenAI chat completions
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-3.5-turbo", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(None, alias="OPENAI_BASE_URL")
    openai_max_completion_tokens: int = Field(1000, alias="OPENAI_MAX_COMPLETION_TOKENS")

    # Hugging Face inference API
    huggingface_api_key: Optional[str] = Field(None, alias="HUGGINGFACE_API_KEY")
    huggingface_model: str = Field("meta-llama/Llama-2-7b-chat-hf", alias="HUGGINGFACE_MODEL")
    huggingface_base_url: str = Field(
        "https://api-inference.huggingface.co/models", alias="HUGGINGFACE_BASE_URL"
    )

    # Credential-less public endpoint
    public_ai_url: str = Field("https://api.cohere.ai/v1/generate", alias="PUBLIC_AI_URL")
    public_ai_model: str = Field("command-light", alias="PUBLIC_AI_MODEL")

    temperature: float = Field(0.7, alias="LLM_TEMPERATURE")
    timeout: Optional[float] = Field(None, alias="LLM_TIMEOUT")
    provider_order: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["openai", "huggingface"], alias="PROVIDER_ORDER"
    )

    @field_validator("openai_api_key", "huggingface_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("temperature")
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("LLM_TEMPERATURE must be between 0.0 and 1.0")
        return value

    @field_validator("timeout")
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("LLM_TIMEOUT must be positive")
        return value

    @field_validator("openai_max_completion_tokens")
    def validate_max_tokens(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("OPENAI_MAX_COMPLETION_TOKENS must be positive")
        return value

    @field_validator("provider_order", mode="before")
    @classmethod
    def parse_provider_order(cls, value: list[str] | str) -> list[str]:
        if isinstance(value, str):
            value = value.replace(",", " ").split()
        order = [part.strip().lower() for part in value if part.strip()]
        unknown = [part for part in order if part not in SUPPORTED_PROVIDERS]
        if unknown:
            raise ValueError(
                "Unsupported provider(s) in PROVIDER_ORDER: {unknown}. Supported providers are: {supported}".format(
                    unknown=", ".join(unknown),
                    supported=", ".join(sorted(SUPPORTED_PROVIDERS)),
                )
            )
        return order

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache()
def get_llm_config() -> LlmConfig:
    """Return a cached language model configuration."""

    return LlmConfig()
