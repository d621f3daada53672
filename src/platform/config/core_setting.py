from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Flight Booking Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'flight_booking'

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # SQLAlchemy connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for a connection
    DB_POOL_RECYCLE: int = 3600  # Recycle connections after 1 hour
    DB_POOL_PRE_PING: bool = True

    # Remote flight inventory service
    FLIGHT_SERVICE_BASE_URL: str = 'http://localhost:8081'
    FLIGHT_SERVICE_TIMEOUT: float = 5.0  # Seconds, applied to connect/read/write

    # Circuit breaker guarding the flight service
    CIRCUIT_BREAKER_FAILURE_RATE_THRESHOLD: float = 50.0  # Percent
    CIRCUIT_BREAKER_SLIDING_WINDOW_SIZE: int = 10  # Number of recorded calls
    CIRCUIT_BREAKER_MINIMUM_NUMBER_OF_CALLS: int = 5
    CIRCUIT_BREAKER_WAIT_DURATION_IN_OPEN_STATE: float = 10.0  # Seconds
    CIRCUIT_BREAKER_PERMITTED_CALLS_IN_HALF_OPEN_STATE: int = 3

    # Booking
    PNR_GENERATION_MAX_ATTEMPTS: int = 3


settings = Settings()  # type: ignore
