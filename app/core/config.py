from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "PayTrackr"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8000",
            "http://localhost:19006",
        ]
    )

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_ENDPOINT_URL: Optional[str] = Field(default=None)  # DynamoDB Local
    DYNAMO_TABLE_USERS: str = Field(default="paytrackr-users")
    DYNAMO_TABLE_TRANSACTIONS: str = Field(default="paytrackr-transactions")
    DYNAMO_TABLE_BILLS: str = Field(default="paytrackr-bills")
    DYNAMO_TABLE_INCOMES: str = Field(default="paytrackr-incomes")

    # JWT Authentication
    JWT_SECRET: str = Field(default="change-me-in-production-0123456789abcdef")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Bill lifecycle sweep
    SCHEDULER_ENABLED: bool = Field(default=True)
    OVERDUE_SWEEP_HOUR: int = Field(default=8)
    OVERDUE_SWEEP_MINUTE: int = Field(default=0)
    SCHEDULER_TIMEZONE: str = Field(default="Africa/Lagos")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
