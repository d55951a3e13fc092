"""
Jobly settings, read from the environment or a ``.env`` file.

The database is PostgreSQL; either give the full URL in
``SQLALCHEMY_DATABASE_URI`` or its parts in the ``POSTGRES_*`` variables.
Tokens are HS256 JWTs signed with ``SECRET_KEY``. ``BCRYPT_WORK_FACTOR`` is
the bcrypt cost for stored passwords; tests lower it to keep hashing fast.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Jobly API settings"""

    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Jobly API"

    # Database
    SQLALCHEMY_DATABASE_URI: Optional[str] = None
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "jobly"

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return (f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}")

    # Auth
    SECRET_KEY: str = "secret-dev"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_WORK_FACTOR: int = 12

    @field_validator("BCRYPT_WORK_FACTOR")
    @classmethod
    def check_work_factor(cls, v: int) -> int:
        # bcrypt only accepts costs 4..31
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_WORK_FACTOR must be between 4 and 31")
        return v

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Frontends allowed to call the API: a JSON list or comma-separated origins
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
