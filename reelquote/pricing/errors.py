"""
Fatal pipeline errors.

Every error carries a machine-readable `kind` and the offending `field` so
routers can report a structured validation failure. Out-of-range numbers are
never errors; they are clamped where they are read.
"""


class PricingError(ValueError):
    """Base class for input the pipeline refuses to price."""

    kind = "pricing_error"

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {
            "error": "Validation failed",
            "kind": self.kind,
            "field": self.field,
            "message": str(self),
        }


class InvalidComplexityInput(PricingError):
    """Answers array is not exactly 10 entries long."""

    kind = "invalid_complexity_input"


class UnknownProjectType(PricingError):
    """No template is registered for the requested project type."""

    kind = "unknown_project_type"


class TemplateConfigError(PricingError):
    """A template in the registry is malformed (e.g. wrong weight count)."""

    kind = "template_config_error"
