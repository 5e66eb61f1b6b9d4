"""Data models for the exchange HTTP API."""

from dex.models.types import Address, Uint256, is_valid_address, normalize_address, to_address

__all__ = ["Address", "Uint256", "is_valid_address", "normalize_address", "to_address"]
