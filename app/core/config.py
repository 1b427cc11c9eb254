from pydantic_settings import BaseSettings, SettingsConfigDict



class Settings(BaseSettings):
    APP_ENV: str = "dev"
    PORT: int = 8084
    DATABASE_URL: str
    DB_ECHO: bool = False
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_COOKIE: str = "Access_Token"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ENCRYPTION_KEY: str
    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


Config = Settings()
