"""Service container for dependency injection."""
from typing import Optional

import httpx

from faceproof.core.config import Settings
from faceproof.core.exceptions import ServiceNotInitializedError
from faceproof.core.logging import get_logger

# Import interfaces
from faceproof.domain.interfaces.extraction.extractor import EmbeddingExtractor
from faceproof.domain.interfaces.registry.registry import Registry
from faceproof.domain.interfaces.storage.content_store import ContentStore

# Import concrete implementations used for instantiation
from faceproof.infrastructure.registry.contract import ContractRegistry
from faceproof.infrastructure.storage.ipfs import IpfsContentStore
from faceproof.services.external.comparison_oracle import ComparisonOracleClient
from faceproof.services.external.extractor import HttpEmbeddingExtractor
from faceproof.services.registration import RegistrationCommitter, RegistrationService
from faceproof.services.registry_reader import RegistryReader
from faceproof.services.similarity import SimilarityEngine
from faceproof.services.uniqueness import UniquenessCoordinator
from faceproof.services.validation import EmbeddingValidator

logger = get_logger(__name__)


class ServiceContainer:
    """Container for application services.

    This container manages the lifecycle and dependencies of all services in the application.
    It owns the shared HTTP client, so every service built here must be used
    between initialize() and cleanup().

    Example:
        ```python
        container = ServiceContainer(Settings())
        await container.initialize()

        verdict = await container.uniqueness_coordinator.check_uniqueness(embedding)

        await container.cleanup()
        ```
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize empty container."""
        self.settings = settings
        self.http_client: Optional[httpx.AsyncClient] = None
        self._owns_http_client = False

        # Core services - Use interface type hints
        self.content_store: Optional[ContentStore] = None
        self.registry: Optional[Registry] = None
        self.extractor: Optional[EmbeddingExtractor] = None
        self.comparison_oracle: Optional[ComparisonOracleClient] = None

        # Domain services (depend on interfaces)
        self.validator: Optional[EmbeddingValidator] = None
        self.similarity_engine: Optional[SimilarityEngine] = None
        self.registry_reader: Optional[RegistryReader] = None
        self.uniqueness_coordinator: Optional[UniquenessCoordinator] = None
        self.registration_committer: Optional[RegistrationCommitter] = None
        self.registration_service: Optional[RegistrationService] = None

    @property
    def initialized(self) -> bool:
        return self.uniqueness_coordinator is not None

    async def initialize(
        self,
        content_store: Optional[ContentStore] = None,
        registry: Optional[Registry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize all services in the correct order.

        Args:
            content_store: Store to use instead of the configured IPFS store
            registry: Registry to use instead of the configured contract
            http_client: Client to use for every outbound HTTP call
        """
        settings = self.settings
        if registry is None and not settings.CONTRACT_ADDRESS:
            raise ServiceNotInitializedError("CONTRACT_ADDRESS is not configured")

        # an injected client stays owned by the caller
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient()

        # Instantiate concrete implementations
        self.content_store = content_store or IpfsContentStore(
            self.http_client,
            api_url=settings.PINATA_API_URL,
            jwt=settings.PINATA_JWT,
            gateways=settings.gateways,
            gateway_timeout=settings.GATEWAY_TIMEOUT_SECONDS,
            write_timeout=settings.STORE_WRITE_TIMEOUT_SECONDS,
        )
        if registry is None:
            registry = ContractRegistry(
                rpc_url=settings.RPC_URL,
                contract_address=settings.CONTRACT_ADDRESS,
                registrar_private_key=settings.REGISTRAR_PRIVATE_KEY,
                timeout=settings.RPC_TIMEOUT_SECONDS,
            )
        self.registry = registry

        if settings.EXTRACTOR_URL:
            self.extractor = HttpEmbeddingExtractor(
                self.http_client,
                url=settings.EXTRACTOR_URL,
                timeout=settings.EXTRACTOR_TIMEOUT_SECONDS,
            )
        if settings.COMPARISON_ORACLE_URL:
            self.comparison_oracle = ComparisonOracleClient(
                self.http_client,
                url=settings.COMPARISON_ORACLE_URL,
                threshold=settings.SIMILARITY_THRESHOLD,
                gateways=settings.gateways,
                timeout=settings.ORACLE_TIMEOUT_SECONDS,
            )

        self.validator = EmbeddingValidator(
            expected_dimension=settings.EMBEDDING_DIMENSION,
            min_nonzero_ratio=settings.MIN_NONZERO_RATIO,
            min_nonzero_std=settings.MIN_NONZERO_STD,
            min_nonzero_magnitude=settings.MIN_NONZERO_MAGNITUDE,
        )
        self.similarity_engine = SimilarityEngine(settings.SIMILARITY_THRESHOLD)
        self.registry_reader = RegistryReader(self.registry)
        self.uniqueness_coordinator = UniquenessCoordinator(
            validator=self.validator,
            similarity_engine=self.similarity_engine,
            content_store=self.content_store,
            registry_reader=self.registry_reader,
            comparison_oracle=self.comparison_oracle,
            concurrency=settings.UNIQUENESS_CONCURRENCY,
            min_coverage=settings.MIN_COVERAGE,
        )
        self.registration_committer = RegistrationCommitter(
            registry=self.registry,
            content_store=self.content_store,
            payload_version=settings.PAYLOAD_VERSION,
        )
        self.registration_service = RegistrationService(
            validator=self.validator,
            content_store=self.content_store,
            coordinator=self.uniqueness_coordinator,
            committer=self.registration_committer,
            payload_version=settings.PAYLOAD_VERSION,
        )
        logger.info(
            "Initialized services",
            threshold=settings.SIMILARITY_THRESHOLD,
            gateways=len(settings.gateways),
            extractor=self.extractor is not None,
            comparison_oracle=self.comparison_oracle is not None,
        )

    async def cleanup(self) -> None:
        """Cleanup all services in reverse order of initialization."""
        # Cleanup domain services
        self.registration_service = None
        self.registration_committer = None
        self.uniqueness_coordinator = None
        self.registry_reader = None
        self.similarity_engine = None
        self.validator = None

        # Cleanup clients
        self.comparison_oracle = None
        self.extractor = None
        self.registry = None
        self.content_store = None

        if self.http_client is not None and self._owns_http_client:
            await self.http_client.aclose()
        self.http_client = None
        self._owns_http_client = False
