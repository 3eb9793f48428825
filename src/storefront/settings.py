from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DATAVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Checkout timings, in seconds
    SETTLEMENT_DELAY: float = 3.0
    AUTO_CLEAR_DELAY: float = 5.0

    # Wallet shown in the payment instruction
    WALLET_ADDRESS: str = "1MuCbBteMFrQpcXBNCftPRAwJ954LqZWjy"

    # App
    APP_NAME: str = "DataVault"
    LOG_DIR: str = "logs"


settings = Settings()
