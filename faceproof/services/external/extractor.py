"""HTTP client for the external face embedding extractor."""
import numpy as np
import httpx

from faceproof.core.exceptions import ExtractionError, InvalidEmbeddingError
from faceproof.core.logging import get_logger
from faceproof.domain.entities.embedding import as_embedding
from faceproof.domain.interfaces.extraction.extractor import EmbeddingExtractor

logger = get_logger(__name__)


class HttpEmbeddingExtractor(EmbeddingExtractor):
    """Sends an image to the extraction API and returns its embedding.

    The API answers ``{"embedding": [...], "error": null}``. The model behind
    it is opaque; its output is validated like any other embedding before use.
    """

    def __init__(self, client: httpx.AsyncClient, url: str, timeout: float = 30.0) -> None:
        self._client = client
        self.url = url
        self.timeout = timeout

    async def extract(self, image_bytes: bytes) -> np.ndarray:
        files = {"file": ("image.jpg", image_bytes, "image/jpeg")}
        try:
            response = await self._client.post(self.url, files=files, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.error("Extractor request failed", url=self.url, error=str(e))
            raise ExtractionError(f"Extractor request failed: {e}") from e
        except ValueError as e:
            logger.error("Extractor returned invalid JSON", url=self.url)
            raise ExtractionError("Extractor returned invalid JSON") from e

        if not isinstance(body, dict):
            raise ExtractionError("Extractor returned an unexpected response")
        if body.get("error"):
            logger.warning("Extractor reported an error", error=body["error"])
            raise ExtractionError(str(body["error"]))
        if not body.get("embedding"):
            raise ExtractionError("Extractor returned no embedding")

        try:
            embedding = as_embedding(body["embedding"])
        except InvalidEmbeddingError as e:
            raise ExtractionError(e.message) from e

        logger.info("Extracted embedding", dimension=int(embedding.size))
        return embedding
