"""Tests for the contract-backed registry, with the web3 handles faked."""
from types import SimpleNamespace

import pytest
from web3.exceptions import ContractLogicError

from faceproof.core.exceptions import AlreadyRegisteredError, RegistryReadError, RegistryWriteError
from faceproof.domain.entities.registry import ZERO_ADDRESS
from faceproof.infrastructure.registry.contract import ContractRegistry

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
WALLET = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
FACE_HASH = bytes(range(32))


class Call:
    def __init__(self, result):
        self.result = result

    async def call(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    async def build_transaction(self, params):
        if isinstance(self.result, Exception):
            raise self.result
        return {"to": CONTRACT, "data": "0x", **params}


class FakeFunctions:
    def __init__(self, wallets, registrations, register_result=None):
        self.wallets = wallets
        self.registrations = registrations
        self.register_result = register_result
        self.registered = []

    def totalRegistrants(self):
        return Call(len(self.wallets))

    def registrants(self, index):
        return Call(self.wallets[index])

    def getRegistration(self, wallet):
        empty = (ZERO_ADDRESS, b"\x00" * 32, "", b"", 0)
        return Call(self.registrations.get(wallet, empty))

    def register(self, wallet, face_hash, ipfs_hash, public_key):
        self.registered.append((wallet, face_hash, ipfs_hash, public_key))
        return Call(self.register_result)


class FakeEth:
    def __init__(self, status=1):
        self.status = status
        self.sent = []

    async def get_transaction_count(self, address):
        return 7

    async def send_raw_transaction(self, raw):
        self.sent.append(raw)
        return b"\xaa" * 32

    async def wait_for_transaction_receipt(self, tx_hash, timeout=None):
        return {"status": self.status, "transactionHash": tx_hash}


class FakeAccount:
    address = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

    def sign_transaction(self, transaction):
        return SimpleNamespace(raw_transaction=b"signed")


def make_registry(functions, eth=None, with_account=True) -> ContractRegistry:
    registry = ContractRegistry(rpc_url="http://localhost:8545", contract_address=CONTRACT)
    registry._contract = SimpleNamespace(functions=functions)
    registry._w3 = SimpleNamespace(eth=eth or FakeEth())
    registry._account = FakeAccount() if with_account else None
    return registry


def registration(wallet=WALLET, cid="bafyA", timestamp=1700000000):
    return (wallet, FACE_HASH, cid, b"\x04\x01", timestamp)


class TestReads:

    @pytest.mark.asyncio
    async def test_count_and_entry_at(self):
        registry = make_registry(FakeFunctions([WALLET], {WALLET: registration()}))

        assert await registry.count() == 1
        entry = await registry.entry_at(0)

        assert entry.identity == WALLET
        assert entry.face_hash == "0x" + FACE_HASH.hex()
        assert entry.content_address == "bafyA"
        assert entry.public_key == "0x0401"
        assert entry.created_at.year == 2023
        assert entry.index == 0

    @pytest.mark.asyncio
    async def test_entry_for_unbound_wallet_is_none(self):
        registry = make_registry(FakeFunctions([], {}))

        assert await registry.entry_for(WALLET) is None

    @pytest.mark.asyncio
    async def test_entry_for_rejects_malformed_identity(self):
        registry = make_registry(FakeFunctions([], {}))

        with pytest.raises(RegistryReadError):
            await registry.entry_for("not-an-address")

    @pytest.mark.asyncio
    async def test_node_failure_is_a_read_error(self):
        functions = FakeFunctions([], {})
        functions.totalRegistrants = lambda: Call(ConnectionError("node down"))
        registry = make_registry(functions)

        with pytest.raises(RegistryReadError):
            await registry.count()


class TestCommit:

    @pytest.mark.asyncio
    async def test_commit_sends_signed_transaction(self):
        functions = FakeFunctions([], {})
        eth = FakeEth()
        registry = make_registry(functions, eth)

        receipt = await registry.commit(WALLET.lower(), FACE_HASH, "bafyA", b"\x04\x01")

        assert receipt == "0x" + "aa" * 32
        assert functions.registered == [(WALLET, FACE_HASH, "bafyA", b"\x04\x01")]
        assert eth.sent == [b"signed"]

    @pytest.mark.asyncio
    async def test_duplicate_revert_maps_to_already_registered(self):
        functions = FakeFunctions([], {}, register_result=ContractLogicError("execution reverted: Already registered"))
        registry = make_registry(functions)

        with pytest.raises(AlreadyRegisteredError):
            await registry.commit(WALLET, FACE_HASH, "bafyA", b"\x04")

    @pytest.mark.asyncio
    async def test_other_revert_is_a_write_error(self):
        functions = FakeFunctions([], {}, register_result=ContractLogicError("execution reverted: not owner"))
        registry = make_registry(functions)

        with pytest.raises(RegistryWriteError):
            await registry.commit(WALLET, FACE_HASH, "bafyA", b"\x04")

    @pytest.mark.asyncio
    async def test_failed_receipt_is_a_write_error(self):
        registry = make_registry(FakeFunctions([], {}), FakeEth(status=0))

        with pytest.raises(RegistryWriteError):
            await registry.commit(WALLET, FACE_HASH, "bafyA", b"\x04")

    @pytest.mark.asyncio
    async def test_commit_without_registrar_key(self):
        registry = make_registry(FakeFunctions([], {}), with_account=False)

        with pytest.raises(RegistryWriteError):
            await registry.commit(WALLET, FACE_HASH, "bafyA", b"\x04")
