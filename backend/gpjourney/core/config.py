from typing import List
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env")

    APP_ENV: str = "development"

    # Local key-value storage
    STORAGE_DIR: str = "gpjourney_data"
    # Mirrors the ~5 MB budget browsers give localStorage per origin
    STORAGE_QUOTA_BYTES: int = 5 * 1024 * 1024

    # OpenAI (assistant suggestions, correlation, visit summaries)
    OPENAI_API_KEY: str
    OPENAI_MODEL: str = "gpt-4o-mini"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173"]


settings = Settings()
