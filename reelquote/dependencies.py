"""
Shared FastAPI dependencies.

The template registry is built once per process and injected into routers,
so the pricing pipeline itself never reaches for module-level state.
"""

import logging
from functools import lru_cache

from fastapi import HTTPException

from .pricing import PricingError, TemplateRegistry, UnknownProjectType, build_default_registry

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_registry() -> TemplateRegistry:
    return build_default_registry()


def pricing_http_error(err: PricingError, not_found_on_unknown_type: bool = False) -> HTTPException:
    """Translate a pipeline error into a 400 (or 404 for template lookups)."""
    logger.warning("Rejected pricing input (%s, field=%s): %s", err.kind, err.field, err)
    status_code = 400
    if not_found_on_unknown_type and isinstance(err, UnknownProjectType):
        status_code = 404
    return HTTPException(status_code=status_code, detail=err.to_dict())
