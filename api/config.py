"""
Mint Engine Settings

Environment-driven settings for the API host and the engine deployment parameters.
Values come from environment variables or the project .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from mint_engine.types import AUTH_EXPLICIT, AUTH_MERKLE, MintProfile, SaleConfig


PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """
    Settings for one hosted collection

    The engine parameters only apply when the collection has no stored state yet;
    afterwards the stored configuration wins.
    """

    # API metadata
    api_title: str = "Mint Engine API"
    api_description: str = (
        "Time-gated, capacity-bounded mint engine for fixed-supply item collections. "
        "Provides endpoints for wave configuration, whitelist/allowlist management, "
        "paid mints, free claims and sale status."
    )
    api_version: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Host
    environment: str = "development"
    api_port: int = 8000
    log_level: str = "INFO"
    admin_api_key: str  # required

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "mint_engine"
    collection_id: str = "default"  # _id of the engine state document

    # Engine deployment
    owner_wallet: str  # required, payment key hash or address of the initial owner
    max_supply: int = 200
    default_wave_supply: int = 50
    price_per_token: int = 1_000_000  # lovelace
    max_mint_count: int = 1
    mint_profile: MintProfile = MintProfile.CAPPED
    authorization_modes: list[str] = [AUTH_EXPLICIT, AUTH_MERKLE]
    validate_wave_order: bool = True

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"), env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    def sale_config(self) -> SaleConfig:
        """Engine parameters for a new deployment"""
        return SaleConfig(
            max_supply=self.max_supply,
            default_wave_supply=self.default_wave_supply,
            price_per_token=self.price_per_token,
            max_mint_count=self.max_mint_count,
            profile=self.mint_profile,
            authorization_modes=frozenset(self.authorization_modes),
            validate_wave_order=self.validate_wave_order,
        )


settings = Settings()  # type: ignore[call-arg]
