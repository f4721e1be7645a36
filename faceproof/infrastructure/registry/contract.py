"""
Registry backed by the on-chain face registry contract.

Reads use view calls (totalRegistrants, registrants, getRegistration). Writes
are signed by the registrar account and sent as raw transactions. The contract
reverts a second registration for the same wallet; that revert is mapped to
AlreadyRegisteredError.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional, TypeVar

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError

from faceproof.core.exceptions import (
    AlreadyRegisteredError,
    RegistryReadError,
    RegistryWriteError,
)
from faceproof.core.logging import get_logger
from faceproof.core.utils.encoding import to_hex
from faceproof.domain.entities.registry import ZERO_ADDRESS, RegistryEntry
from faceproof.domain.interfaces.registry.registry import Registry
from faceproof.infrastructure.registry.abi import FACE_REGISTRY_ABI

logger = get_logger(__name__)

T = TypeVar("T")

DUPLICATE_REVERT_MARKERS = ("already registered", "already bound")


class ContractRegistry(Registry):
    """Registry implementation over a JSON-RPC connected contract.

    Example:
        ```python
        registry = ContractRegistry(
            rpc_url="https://rpc.example.org",
            contract_address="0x...",
            registrar_private_key=key,
        )
        total = await registry.count()
        ```
    """

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        registrar_private_key: str = "",
        timeout: float = 10.0,
        receipt_timeout: float = 120.0,
    ) -> None:
        if not contract_address:
            raise ValueError("contract_address is required")
        self.timeout = timeout
        self.receipt_timeout = receipt_timeout
        self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract_address),
            abi=FACE_REGISTRY_ABI,
        )
        self._account = self._w3.eth.account.from_key(registrar_private_key) if registrar_private_key else None

    async def _call(self, awaitable: Awaitable[T], operation: str, **context: Any) -> T:
        """Await a view call with a timeout, wrapping failures as RegistryReadError."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Registry call timed out", operation=operation, timeout=self.timeout, **context)
            raise RegistryReadError(f"{operation} timed out", details=context) from e
        except Exception as e:
            logger.warning("Registry call failed", operation=operation, error=str(e), **context)
            raise RegistryReadError(f"{operation} failed: {e}", details=context) from e

    async def count(self) -> int:
        total = await self._call(self._contract.functions.totalRegistrants().call(), "totalRegistrants")
        return int(total)

    async def entry_at(self, index: int) -> RegistryEntry:
        wallet = await self._call(
            self._contract.functions.registrants(index).call(), "registrants", index=index
        )
        entry = await self._registration(wallet, index=index)
        return entry.model_copy(update={"index": index})

    async def entry_for(self, identity: str) -> Optional[RegistryEntry]:
        try:
            wallet = AsyncWeb3.to_checksum_address(identity)
        except ValueError as e:
            raise RegistryReadError(f"Invalid identity address: {identity}") from e
        entry = await self._registration(wallet)
        return None if entry.is_empty else entry

    async def _registration(self, wallet: str, **context: Any) -> RegistryEntry:
        record = await self._call(
            self._contract.functions.getRegistration(wallet).call(),
            "getRegistration",
            wallet=wallet,
            **context,
        )
        owner, face_hash, ipfs_hash, public_key, timestamp = record
        return RegistryEntry(
            identity=owner or ZERO_ADDRESS,
            face_hash=to_hex(bytes(face_hash)),
            content_address=ipfs_hash or "",
            public_key=to_hex(bytes(public_key)) if public_key else None,
            created_at=datetime.fromtimestamp(int(timestamp), tz=timezone.utc) if timestamp else None,
        )

    async def commit(
        self,
        identity: str,
        face_hash: bytes,
        content_address: str,
        public_key: bytes,
    ) -> str:
        if self._account is None:
            raise RegistryWriteError("Registrar private key is not configured")

        try:
            wallet = AsyncWeb3.to_checksum_address(identity)
        except ValueError as e:
            raise RegistryWriteError(f"Invalid identity address: {identity}") from e

        function = self._contract.functions.register(wallet, face_hash, content_address, public_key)
        try:
            nonce = await self._w3.eth.get_transaction_count(self._account.address)
            transaction = await function.build_transaction({"from": self._account.address, "nonce": nonce})
            signed = self._account.sign_transaction(transaction)
            tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = await self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except ContractLogicError as e:
            message = str(e).lower()
            if any(marker in message for marker in DUPLICATE_REVERT_MARKERS):
                logger.info("Registry rejected duplicate registration", identity=wallet)
                raise AlreadyRegisteredError(identity) from e
            logger.error("Registry rejected registration", identity=wallet, error=str(e))
            raise RegistryWriteError(f"Registration reverted: {e}") from e
        except Exception as e:
            logger.error("Registration transaction failed", identity=wallet, error=str(e), exc_info=True)
            raise RegistryWriteError(f"Registration transaction failed: {e}") from e

        tx_id = to_hex(bytes(tx_hash))
        if receipt["status"] != 1:
            logger.error("Registration transaction reverted", identity=wallet, transaction=tx_id)
            raise RegistryWriteError("Registration transaction reverted", details={"transaction": tx_id})

        logger.info("Registration transaction confirmed", identity=wallet, transaction=tx_id)
        return tx_id
