"""
Feature modules for the RelayDrive backend.

- auth: accounts, passwords, tokens and request gates
- ratelimit: per-client request budgets
- storage: the relay-backed blob gateway
- files: file metadata and the upload/download flow

Each module keeps its own interfaces, models, service and exceptions.
Routes depend on the interfaces; api/dependencies.py picks the concrete
implementations.
"""
