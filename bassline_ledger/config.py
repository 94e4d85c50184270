"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./bassline_ledger.db"

    # Service
    service_name: str = "bassline-ledger"
    log_level: str = "INFO"

    # Merchant bank details used for transfer reconciliation.
    # Real account details belong in the environment, never in the repo.
    merchant_account_name: str = "Bassline Customs"
    merchant_bank_name: str = ""
    merchant_account_number: str = ""
    merchant_branch_code: str = ""
    bank_reference_prefix: str = "BLC"

    # Ledger rules
    enforce_non_negative_payments: bool = False

    # Security
    password_hash_rounds: int = 12


settings = Settings()
