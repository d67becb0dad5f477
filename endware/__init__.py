"""endware: turns endpoint return values into well-formed HTTP responses.

Invariants:
    - Package root contains no executable code beyond the version string

Design Decisions:
    - No star exports: import models from endware.core.*, the handler from
      endware.api.handler
"""

__version__ = "1.0.0"
