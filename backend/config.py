from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./auditshield.db"
    sql_echo: bool = False
    # Label stamped on every new audit
    default_iso_control: str = "ISO/IEC 27001:2022"
    questions_file: str = ""  # if empty, uses bundled data/iso27001_questions.json
    seed_on_startup: bool = True
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:80"
    port: int = 8000

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def async_database_url(self) -> str:
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("sqlite:///"):
            url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return url


settings = Settings()
