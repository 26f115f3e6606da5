from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./docshare.db"
    sql_echo: bool = False

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    # Ограничение на каждый вызов хранилища или каталога пользователей, секунды
    dependency_timeout: float = 5.0
    max_write_retries: int = 3

    documents_page_size: int = 10
    notifications_page_size: int = 20

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
