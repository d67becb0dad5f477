"""Route Modules: one file per resource/concern.

Invariants:
    - Each module exposes build_router(config) returning an APIRouter
    - Every route is an endware handler; routes never write responses themselves

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
