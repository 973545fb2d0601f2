"""
Domain layer - entities and rules of the store.

This package contains:
- Models: key pairs, distinguished names, certificates and issuance responses
- Identifiers: domain normalisation and slot addressing
- Repository: the repository interface (contract)
- Errors: the typed failures surfaced to callers
"""
