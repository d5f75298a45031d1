"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Persistence
    database_url: str = "sqlite+aiosqlite:///specpilot.db"
    store_backend: str = "sql"  # "sql" or "memory"

    # AI generator
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_summary_model: str = "gpt-4o-mini"
    openai_improve_model: str = "gpt-4o"
    generator_timeout_seconds: float = 60.0

    # Outbound integrations
    integration_timeout_seconds: float = 10.0
    frontend_url: str = "http://localhost:5173"

    # CORS
    cors_allowed_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SPECPILOT_",
    }

    @property
    def use_memory_store(self) -> bool:
        return self.store_backend.lower() == "memory"


settings = Settings()
