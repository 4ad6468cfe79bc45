"""
Site Layout Planner

Procedural site layout: access and spine roads, buildable land and
housing footprints for a drawn development site.
"""

from .config import PlannerConfig, get_config, validate_config
from .errors import SitePlanError, InputMissingError, GeometryError
from .pipeline import SitePlanPipeline, load_geojson_inputs

__version__ = "0.1.0"

__all__ = [
    "PlannerConfig",
    "get_config",
    "validate_config",
    "SitePlanError",
    "InputMissingError",
    "GeometryError",
    "SitePlanPipeline",
    "load_geojson_inputs",
]
