from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./marketsim.db"
    APP_ENV: str = "development"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Create missing tables on startup. Disable when Alembic owns the schema.
    AUTO_CREATE_TABLES: bool = True

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://simulador.example.com,http://localhost:3000"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"


settings = Settings()
