"""Core Layer: response models, negotiation and dispatch; no IO, no async.

Invariants:
    - No module in core/ imports from api/ or infrastructure/
    - Builders are synchronous; every response build is total except for
      programmer errors (invalid status codes, empty Problems)

Design Decisions:
    - Functional core separated from the ASGI shell (ADR: impureim sandwich)
"""
