from functools import lru_cache

from pydantic_settings import BaseSettings

INSECURE_SECRET_KEY = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    SECRET_KEY: str = INSECURE_SECRET_KEY
    DATABASE_URL: str = "sqlite:///./data/hobbies.db"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    COOKIE_NAME: str = "auth-token"
    COOKIE_SECURE: bool = False

    # Seeded on first start when the user table has no such account
    DEFAULT_USERNAME: str = "admin"
    DEFAULT_PASSWORD: str = "hobby123"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def uses_insecure_secret(self) -> bool:
        return self.SECRET_KEY == INSECURE_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()
