"""Services exposed to the orchestration and CLI layers."""

from acmestore.services.repository import AcmeRepository, get_repository

__all__ = ["AcmeRepository", "get_repository"]
