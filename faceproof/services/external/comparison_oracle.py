"""Client for the external image-versus-stored-embedding comparison API."""
import json
from typing import List

import httpx

from faceproof.core.exceptions import ComparisonOracleError
from faceproof.core.logging import get_logger
from faceproof.domain.value_objects.verdicts import OracleComparison
from faceproof.infrastructure.storage.ipfs import clean_address

logger = get_logger(__name__)


class ComparisonOracleClient:
    """Asks a remote service to compare a face image with a stored embedding.

    The remote side fetches the stored payload itself, using the gateways we
    pass along. Only its similarity score is used; the caller applies the
    threshold locally.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        threshold: float,
        gateways: List[str],
        timeout: float = 15.0,
    ) -> None:
        self._client = client
        self.url = url
        self.threshold = threshold
        self.gateways = list(gateways)
        self.timeout = timeout

    async def compare(self, image_bytes: bytes, content_address: str) -> OracleComparison:
        """Compare an image with the embedding stored at a content address.

        Args:
            image_bytes: Raw image data of the candidate face
            content_address: Address of the stored embedding payload

        Returns:
            OracleComparison as reported by the oracle

        Raises:
            ComparisonOracleError: If the oracle cannot be reached or answers garbage
        """
        cid = clean_address(content_address)
        data = {
            "ipfs_hash": cid,
            "threshold": str(self.threshold),
            "fallback_gateways": json.dumps(self.gateways),
        }
        files = {"file": ("image.jpg", image_bytes, "image/jpeg")}
        try:
            response = await self._client.post(self.url, data=data, files=files, timeout=self.timeout)
            response.raise_for_status()
            result = OracleComparison.model_validate(response.json())
        except httpx.TimeoutException as e:
            logger.warning("Comparison oracle timed out", content_address=cid, timeout=self.timeout)
            raise ComparisonOracleError(f"Comparison of {cid} timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Comparison oracle request failed", content_address=cid, error=str(e))
            raise ComparisonOracleError(f"Comparison of {cid} failed: {e}") from e
        except ValueError as e:
            logger.warning("Comparison oracle returned an unexpected response", content_address=cid, error=str(e))
            raise ComparisonOracleError(f"Comparison of {cid} returned an unexpected response") from e

        logger.debug("Oracle comparison", content_address=cid, similarity=result.similarity, success=result.success)
        return result
