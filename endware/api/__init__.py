"""API Layer: ASGI handler, transport writes, request decoding and demo routes.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint is wrapped by endware.api.handler.EndpointHandler
"""
