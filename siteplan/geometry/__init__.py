"""
Planar geometry kernel and helpers
"""

from .kernel import GeometryResult
from .utils import Edge, GeometryUtils
from .rectangle import oriented_rectangle
from .projection import LocalFrame, IdentityFrame, make_frame

__all__ = [
    "GeometryResult",
    "Edge",
    "GeometryUtils",
    "oriented_rectangle",
    "LocalFrame",
    "IdentityFrame",
    "make_frame",
]
