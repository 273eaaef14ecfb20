from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Mount point for service routers
    API_PREFIX: str = "/api/v1"

    # Seeded into every request's ambient context as ``provider``
    PROVIDER_NAME: str = "rest"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
