from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 7171
    log_level: str = "INFO"

    max_body_bytes: int = 128 * 1024
    worker_threads: int = 4

    tokenizer_language: str = "english"
    tokenizer_data_dir: Path | None = None
    tokenizer_auto_download: bool = True

    classifier_model: str = "distilbert-base-uncased-finetuned-sst-2-english"
    batch_size: int = 32

    cache_enabled: bool = False
    redis_url: str = "redis://redis:6379"
    cache_ttl: int = 3600

    metrics_port: int | None = None

    allowed_origins: str = "*"
    allowed_hosts: str = "*"

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
