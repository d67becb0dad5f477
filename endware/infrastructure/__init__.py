"""Infrastructure Layer: cross-cutting concerns (logging).

Invariants:
    - Infrastructure imports only value types from core/ (InternalError, EndwareError)
"""
