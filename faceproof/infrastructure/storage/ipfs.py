"""
IPFS implementation of the content-addressed store.

Writes go to a single authoritative endpoint (Pinata's pinning API). Reads go
through an ordered list of public gateways, each bounded by a short timeout,
so one slow or rate-limited gateway cannot stall a uniqueness check.
"""
from typing import List, Optional

import httpx
from pydantic import ValidationError

from faceproof.core.exceptions import ContentUnavailableError, StoreUnavailableError
from faceproof.core.logging import get_logger
from faceproof.domain.entities.embedding import EmbeddingPayload
from faceproof.domain.interfaces.storage.content_store import ContentStore

logger = get_logger(__name__)

IPFS_SCHEME = "ipfs://"


def clean_address(address: str) -> str:
    """Strip whitespace and an ipfs:// prefix from a content address."""
    address = address.strip()
    if address.startswith(IPFS_SCHEME):
        address = address[len(IPFS_SCHEME):]
    return address


class IpfsContentStore(ContentStore):
    """Pinata-backed writer with multi-gateway IPFS reads.

    Example:
        ```python
        async with httpx.AsyncClient() as client:
            store = IpfsContentStore(
                client,
                api_url="https://api.pinata.cloud",
                jwt=jwt,
                gateways=["https://gateway.pinata.cloud/ipfs/", "https://ipfs.io/ipfs/"],
            )
            address = await store.put(EmbeddingPayload.create(embedding))
            payload = await store.get(address)
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        jwt: str,
        gateways: List[str],
        gateway_timeout: float = 5.0,
        write_timeout: float = 30.0,
        payload_name: str = "face-embedding",
    ) -> None:
        if len(gateways) < 2:
            raise ValueError("At least two read gateways are required")
        self._client = client
        self.api_url = api_url.rstrip("/")
        self._jwt = jwt
        self.gateways = list(gateways)
        self.gateway_timeout = gateway_timeout
        self.write_timeout = write_timeout
        self.payload_name = payload_name

    async def put(self, payload: EmbeddingPayload) -> str:
        """Pin a payload as JSON and return its CID."""
        if not self._jwt:
            raise StoreUnavailableError("Pinata JWT is not configured")

        name = f"{self.payload_name}-{payload.timestamp}"
        body = {
            "pinataContent": payload.to_document(),
            "pinataMetadata": {
                "name": name,
                "keyvalues": {"type": self.payload_name, "timestamp": payload.timestamp},
            },
            "pinataOptions": {"cidVersion": 1},
        }
        try:
            response = await self._client.post(
                f"{self.api_url}/pinning/pinJSONToIPFS",
                json=body,
                headers={"Authorization": f"Bearer {self._jwt}"},
                timeout=self.write_timeout,
            )
            response.raise_for_status()
            address = response.json()["IpfsHash"]
        except httpx.HTTPStatusError as e:
            logger.error(
                "Store rejected upload",
                status_code=e.response.status_code,
                name=name,
            )
            raise StoreUnavailableError(
                f"Upload rejected with status {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error("Store unreachable during upload", error=str(e), name=name)
            raise StoreUnavailableError(f"Upload failed: {e}") from e
        except (KeyError, ValueError) as e:
            logger.error("Store returned an unexpected upload response", error=str(e))
            raise StoreUnavailableError("Upload response did not contain a content address") from e

        logger.info("Uploaded embedding payload", content_address=address, name=name)
        return address

    async def get(self, address: str) -> EmbeddingPayload:
        """Fetch a payload from the first gateway that serves it."""
        cid = clean_address(address)
        attempts = []
        for gateway in self.gateways:
            url = f"{gateway}{cid}"
            payload = await self._fetch(url, attempts)
            if payload is not None:
                if attempts:
                    logger.info(
                        "Fetched payload after gateway fallback",
                        content_address=cid,
                        gateway=gateway,
                        failed_gateways=len(attempts),
                    )
                return payload

        logger.warning("Payload unavailable on every gateway", content_address=cid, attempts=attempts)
        raise ContentUnavailableError(
            f"Content {cid} unavailable on all {len(self.gateways)} gateways",
            details={"content_address": cid, "attempts": attempts},
        )

    async def _fetch(self, url: str, attempts: List[dict]) -> Optional[EmbeddingPayload]:
        """Try one gateway, recording the failure in attempts."""
        try:
            response = await self._client.get(url, timeout=self.gateway_timeout)
        except httpx.TimeoutException:
            logger.warning("Gateway timed out", url=url, timeout=self.gateway_timeout)
            attempts.append({"url": url, "error": "timeout"})
            return None
        except httpx.HTTPError as e:
            logger.warning("Gateway request failed", url=url, error=str(e))
            attempts.append({"url": url, "error": str(e)})
            return None

        if response.status_code != 200:
            logger.warning("Gateway returned an error status", url=url, status_code=response.status_code)
            attempts.append({"url": url, "error": f"status {response.status_code}"})
            return None

        try:
            return EmbeddingPayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Gateway returned a malformed payload", url=url, error=str(e))
            attempts.append({"url": url, "error": "malformed payload"})
            return None
