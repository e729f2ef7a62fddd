from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Language used when the caller does not name one ("fr", "en" or "auto")
    DEFAULT_LANGUAGE: str = "auto"
    STRICT_VALIDATION: bool = False

    # Defaults returned on a soft miss
    DEFAULT_CURRENCY: str = "EUR"
    UNKNOWN_MERCHANT: str = "Magasin inconnu"
    DEFAULT_CONFIDENCE: float = 0.1

    # Output bounds
    MAX_ITEMS: int = 20
    SUMMARY_MAX_LENGTH: int = 200

    # Logging (used by scripts, the library never configures handlers)
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "RECEIPT_EXTRACTION_"
        case_sensitive = True
        extra = "ignore"
        frozen = True


settings = Settings()
