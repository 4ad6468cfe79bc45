"""
Analysis modules for the Site Layout Planner
"""

from .alignment import (
    EdgeInfo,
    nearest_edge,
    nearest_edge_bearing,
    longest_edge_info,
    inward_sign,
    opposite_edge,
)

__all__ = [
    "EdgeInfo",
    "nearest_edge",
    "nearest_edge_bearing",
    "longest_edge_info",
    "inward_sign",
    "opposite_edge",
]
