"""Configuration settings for the face registration service."""
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IPFS_GATEWAYS = ",".join([
    "https://gateway.pinata.cloud/ipfs/",
    "https://ipfs.io/ipfs/",
    "https://cloudflare-ipfs.com/ipfs/",
    "https://dweb.link/ipfs/",
])


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables
    2. .env file
    3. Default values

    Settings are not instantiated at import time. The caller builds one and
    hands it to a ServiceContainer.

    Attributes:
        SIMILARITY_THRESHOLD: Cosine similarity above which two embeddings are
            treated as the same person. Required, there is no default.
        EMBEDDING_DIMENSION: Expected embedding length. When unset, any length
            is accepted by the validator but comparisons still require equal lengths.
        IPFS_GATEWAYS: Comma separated, ordered list of read gateways (at least two)
        PINATA_JWT: Bearer token for the single write endpoint
        RPC_URL: JSON-RPC endpoint of the chain hosting the registry contract
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
    )

    # Core Settings
    PROJECT_NAME: str = "Face Registration Service"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> List[str]:
        """Get list of allowed origins."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Matching Settings
    SIMILARITY_THRESHOLD: float
    EMBEDDING_DIMENSION: Optional[int] = None
    UNIQUENESS_CONCURRENCY: int = 4
    MIN_COVERAGE: float = 0.0

    # Embedding validation
    MIN_NONZERO_RATIO: float = 0.05
    MIN_NONZERO_STD: float = 0.001
    MIN_NONZERO_MAGNITUDE: float = 0.01

    # Content-addressed store (IPFS via Pinata)
    PINATA_API_URL: str = "https://api.pinata.cloud"
    PINATA_JWT: str = ""
    IPFS_GATEWAYS: str = DEFAULT_IPFS_GATEWAYS
    GATEWAY_TIMEOUT_SECONDS: float = 5.0
    STORE_WRITE_TIMEOUT_SECONDS: float = 30.0
    PAYLOAD_VERSION: str = "1.0"

    @property
    def gateways(self) -> List[str]:
        """Get the ordered list of read gateways."""
        return [gateway.strip() for gateway in self.IPFS_GATEWAYS.split(",") if gateway.strip()]

    # Registry contract
    RPC_URL: str = "http://localhost:8545"
    CONTRACT_ADDRESS: str = ""
    REGISTRAR_PRIVATE_KEY: str = ""
    RPC_TIMEOUT_SECONDS: float = 10.0

    # External extraction and comparison APIs
    EXTRACTOR_URL: str = ""
    EXTRACTOR_TIMEOUT_SECONDS: float = 30.0
    COMPARISON_ORACLE_URL: str = ""
    ORACLE_TIMEOUT_SECONDS: float = 15.0

    # Optional settings with defaults
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @field_validator("SIMILARITY_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Threshold must lie strictly inside (0, 1)."""
        if not 0.0 < v < 1.0:
            raise ValueError("SIMILARITY_THRESHOLD must be in the open interval (0, 1)")
        return v

    @field_validator("IPFS_GATEWAYS")
    @classmethod
    def validate_gateways(cls, v: str) -> str:
        """Reads need at least two independent gateways."""
        gateways = [gateway.strip() for gateway in v.split(",") if gateway.strip()]
        if len(gateways) < 2:
            raise ValueError("IPFS_GATEWAYS must list at least two gateways")
        return v

    @field_validator("UNIQUENESS_CONCURRENCY")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("UNIQUENESS_CONCURRENCY must be at least 1")
        return v

    @field_validator("EMBEDDING_DIMENSION")
    @classmethod
    def validate_dimension(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("EMBEDDING_DIMENSION must be positive")
        return v

    @field_validator("MIN_COVERAGE")
    @classmethod
    def validate_min_coverage(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("MIN_COVERAGE must be between 0 and 1")
        return v
