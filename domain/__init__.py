"""Grid Heights Domain Layer.

This package contains the core logic organized by bounded contexts:
- sampling: Polygon classification, grid generation, height sampling
"""

from domain import sampling

__all__ = ["sampling"]
