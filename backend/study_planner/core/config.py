"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Study Planner Backend"
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://planner@localhost:5432/study_planner"
    db_pool_size: int = 10
    session_ttl_days: int = 7
    match_threshold: float | None = None
    llm_timeout_seconds: float = 60.0
    default_model_name: str = "Qwen/Qwen2.5-7B-Instruct"
    default_api_endpoint: str = "https://api.siliconflow.cn/v1/chat/completions"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "study-planner"
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    local_timezone: str = "Asia/Shanghai"
    session_purge_minutes: int = 60
    jobs_run_on_startup: bool = False
    bootstrap_admin_username: str | None = None
    bootstrap_admin_password: str | None = None


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
