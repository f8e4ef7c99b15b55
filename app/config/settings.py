from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsConfig(BaseSettings):
    """Shared AWS credentials and default region"""

    region: str = "ap-northeast-2"
    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration."""

    region: str = "ap-northeast-2"
    default_voice_id: str = "Seoyeon"
    default_output_format: str = "mp3"
    default_engine: str = "neural"
    default_language_code: str = "ko-KR"
    max_characters: int = Field(default=3000, ge=1, le=6000)

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe streaming configuration."""

    region: str = "ap-northeast-2"
    language_code: str = "ko-KR"
    media_encoding: str = "pcm"
    sample_rate_hz: int = Field(default=16000, ge=8000, le=48000)

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-micro-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=512,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=0.7,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class PlacesConfig(BaseSettings):
    """Google Places web service configuration."""

    api_key: SecretStr | None = None
    base_url: str = "https://maps.googleapis.com/maps/api/place"
    language: str = "ko"
    radius_meters: int = Field(default=5000, ge=1, le=50000)
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_PLACES_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class ChatbotConfig(BaseSettings):
    """Behaviour switches for the chat pipeline."""

    mock_on_empty_results: bool = Field(
        default=True,
        description="Serve the mock place set when a live search finds nothing.",
    )
    default_search_phrase: str = "맛집 추천"
    max_nearby: int = Field(default=5, ge=1, le=20)

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "EUM Chatbot Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/chat_pipeline.log"

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Transcribe
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Google Places
    places: PlacesConfig = Field(default_factory=PlacesConfig)

    # Chat pipeline
    chatbot: ChatbotConfig = Field(default_factory=ChatbotConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
