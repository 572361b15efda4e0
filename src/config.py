from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "s3-image-api"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    cors_origins: list[str] = ["*"]

    s3_bucket: str
    aws_region: str
    api_keys: str = ""
    max_upload_bytes: int = 32 * 1024 * 1024

    @property
    def api_key_set(self) -> frozenset[str]:
        return frozenset(key.strip() for key in self.api_keys.split(",") if key.strip())
