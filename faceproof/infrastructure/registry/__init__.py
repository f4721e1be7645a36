"""Registry implementations."""
from .contract import ContractRegistry

__all__ = ["ContractRegistry"]
