# drivefiles/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "drivefiles"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Google Drive (service account)
    google_service_account_json: str | None = None  # JSON string or file path
    drive_scopes: list[str] = ["https://www.googleapis.com/auth/drive"]

    # Drive requests
    drive_search_fields: str = "files(id, name, parents, shared)"
    drive_info_fields: str = "*"
    drive_page_size: int = 1000
    drive_supports_all_drives: bool = True
    drive_chunk_size: int = 1024 * 1024  # bytes per download/upload chunk

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
