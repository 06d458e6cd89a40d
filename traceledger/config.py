"""Application configuration."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # App
    APP_NAME: str = "TraceLedger"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Ledger store
    DATABASE_URL: str = "sqlite:///./traceledger.db"

    # Network identity of this ledger (mirrors a local dev chain)
    NETWORK_NAME: str = "localledger"
    CHAIN_ID: int = 1337
    DEPLOYER: str = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
    # Unlocked accounts, deployer first. Accounts 1-4 receive the demo roles on deploy.
    ACCOUNTS: str = (
        "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266,"
        "0x70997970c51812dc3a010c7d01b50e0d17dc79c8,"
        "0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc,"
        "0x90f79bf6eb2c4f870365e785982e1f101e93b906,"
        "0x15d34aaf54267db7d7c367839aaf71a00a2c6a65,"
        "0x9965507d1a55bcc2695c58ba16fb37d819b0a4dc"
    )

    # Supply chain policy
    # Stage order is advisory unless this is set.
    ENFORCE_STAGE_ORDER: bool = False

    # JWT
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Deployment artefacts
    DEPLOYMENT_INFO_PATH: str = "./deployment-info.json"
    CONTRACTS_MANIFEST_PATH: str = "./contracts.json"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def account_list(self) -> list[str]:
        """Get configured accounts as normalized list."""
        return [account.strip().lower() for account in self.ACCOUNTS.split(",") if account.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
