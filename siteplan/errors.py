"""
Exception types for the Site Layout Planner
"""


class SitePlanError(Exception):
    """Base class for planner errors"""


class InputMissingError(SitePlanError):
    """Raised when a required input (boundary, access path) has not been provided"""


class GeometryError(SitePlanError):
    """A geometry operation failed on degenerate input"""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
