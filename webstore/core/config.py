from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Настройки хранилища, читаются один раз при старте"""
    storage_root: Path = Path("storage")
    database_url: Optional[str] = None
    url_prefix: str = "/p"

    default_type: str = "pl"
    history_depth: int = Field(5, ge=1)
    max_name_attempts: int = Field(100, ge=1)
    strict_metadata: bool = False
    # Доверять X-Forwarded-For (за обратным прокси)
    trust_forwarded_for: bool = True

    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"

    sql_echo: bool = False

    model_config = {"env_file": ".env", "env_prefix": "WEBSTORE_", "extra": "ignore"}

    @property
    def resolved_database_url(self) -> str:
        """URL базы; по умолчанию SQLite-файл внутри storage_root"""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.storage_root / 'store.db'}"
