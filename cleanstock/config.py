from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Cleanstock"
    DATABASE_URL: str = "sqlite:///./cleanstock.db"

    # Auth
    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = 10

    # When false, a movement that would take stock below zero is rejected
    ALLOW_NEGATIVE_STOCK: bool = True

    # Number of sales/deliveries rolled up on the dashboard
    DASHBOARD_RECENT_LIMIT: int = 5

    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env"}


settings = Settings()
