from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from files
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.docker"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="docker", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="pharmabill", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Infrastructure
    DATABASE_URL: str = Field(
        default="postgresql+asyncpg://postgres:postgres@db:5432/pharmabill_db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )

    # Seller (the pharmacy itself). The state code decides intra- vs inter-state GST.
    SELLER_NAME: str = Field(default="M R Medical & General Store", validation_alias=AliasChoices("SELLER_NAME", "seller_name"))
    SELLER_GSTIN: str = Field(default="", validation_alias=AliasChoices("SELLER_GSTIN", "seller_gstin"))
    SELLER_STATE: str = Field(default="Maharashtra", validation_alias=AliasChoices("SELLER_STATE", "seller_state"))
    SELLER_STATE_CODE: str = Field(default="27", validation_alias=AliasChoices("SELLER_STATE_CODE", "seller_state_code"))

    # Document numbering
    INVOICE_PREFIX: str = Field(default="INV-", validation_alias=AliasChoices("INVOICE_PREFIX", "invoice_prefix"))
    PURCHASE_PREFIX: str = Field(default="PUR-", validation_alias=AliasChoices("PURCHASE_PREFIX", "purchase_prefix"))
    DOCUMENT_NUMBER_WIDTH: int = Field(default=6, validation_alias=AliasChoices("DOCUMENT_NUMBER_WIDTH", "document_number_width"))

    # Inventory alerts
    EXPIRY_ALERT_DAYS: int = Field(default=30, validation_alias=AliasChoices("EXPIRY_ALERT_DAYS", "expiry_alert_days"))


settings = Settings()
