"""Content-addressed store implementations."""
from .ipfs import IpfsContentStore, clean_address

__all__ = ["IpfsContentStore", "clean_address"]
