"""Infrastructure adapters for elevation lookups.

Exports the swisstopo REST adapter implementing the HeightResolver port.
"""

from .swisstopo_adapter import SwisstopoHeightAdapter

__all__ = ["SwisstopoHeightAdapter"]
