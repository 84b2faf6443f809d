import base64
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class IncontactConfig(BaseSettings):
    """InContact platform credentials and endpoints"""

    version: str = "v11.0"
    application_name: str = "yourName"
    vendor_name: str = "yourName"
    application_key: SecretStr = Field(default=SecretStr("yourKey"))
    token_url: str = "https://api.incontact.com/InContactAuthorizationServer/Token"
    username: str = "yourUser"
    password: SecretStr = Field(default=SecretStr("yourPwd"))

    @property
    def basic_auth_key(self) -> str:
        """Base64-encoded ``name@vendor:key`` used to request API tokens"""
        raw = (
            f"{self.application_name}@{self.vendor_name}:"
            f"{self.application_key.get_secret_value()}"
        )
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    model_config = SettingsConfigDict(
        env_prefix="INCONTACT_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class GoogleConfig(BaseSettings):
    """Google Speech-to-Text and Natural Language REST configuration."""

    api_key: SecretStr = Field(default=SecretStr("yourKey"))
    stt_url: str = "https://speech.googleapis.com/v1/speech:recognize"
    sentiment_url: str = (
        "https://language.googleapis.com/v1/documents:analyzeSentiment"
    )
    language_code: str = "en-US"
    document_language: str = "en"

    model_config = SettingsConfigDict(
        env_prefix="GCP_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class S3Config(BaseSettings):
    """S3 configuration"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    bucket_name: str = "call-recordings"
    endpoint_url: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Call Sentiment Pipeline"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 9080
    webhook_path: str = "/process"

    log_level: str = "debug"
    log_file: str = "logs/sentiment.log"
    pipeline_log_file: str = "logs/pipeline.log"
    log_max_bytes: int = Field(default=50_000_000, ge=1)
    log_backup_count: int = Field(default=2, ge=0)

    # InContact
    incontact: IncontactConfig = Field(default_factory=IncontactConfig)

    # Google
    google: GoogleConfig = Field(default_factory=GoogleConfig)

    # S3
    s3: S3Config = Field(default_factory=S3Config)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
