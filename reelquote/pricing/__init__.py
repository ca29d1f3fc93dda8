"""
Quote calculation pipeline.

Pure Python math. No I/O, no database, no globals.
Given crew/gear lines, out-of-pocket costs, complexity ratings and business
constraints, produce a QuoteOutput with every figure rounded to 2 decimals
at each aggregation step.
"""

from .engine import calculate_quote
from .errors import (
    InvalidComplexityInput,
    PricingError,
    TemplateConfigError,
    UnknownProjectType,
)
from .rules import apply_rules
from .templates import TemplateRegistry, build_default_registry
from .types import (
    BusinessConstraints,
    ComplexityInput,
    CrewLine,
    GearLine,
    OOPCosts,
    ProjectType,
    QuoteInput,
    QuoteOutput,
    SkillLevel,
)

__all__ = [
    "calculate_quote",
    "apply_rules",
    "build_default_registry",
    "TemplateRegistry",
    "PricingError",
    "InvalidComplexityInput",
    "UnknownProjectType",
    "TemplateConfigError",
    "BusinessConstraints",
    "ComplexityInput",
    "CrewLine",
    "GearLine",
    "OOPCosts",
    "ProjectType",
    "QuoteInput",
    "QuoteOutput",
    "SkillLevel",
]
