from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./reelquote.db"
    LOG_LEVEL: str = "INFO"

    # Studio details printed on exported quotes
    STUDIO_NAME: str = "ReelQuote Studio"
    STUDIO_EMAIL: str = ""
    STUDIO_PHONE: str = ""

    CURRENCY_SYMBOL: str = "Rp"
    QUOTE_VALID_DAYS: int = 30
    PROJECT_LIST_LIMIT: int = 50

    class Config:
        env_file = ".env"


settings = Settings()
