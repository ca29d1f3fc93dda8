"""
Quote preview endpoint.

POST /api/quote/preview runs the pricing pipeline and returns the breakdown
without saving anything.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_registry, pricing_http_error
from ..pricing import PricingError, QuoteInput, TemplateRegistry, calculate_quote
from ..schemas import QuoteBreakdown, QuotePreviewRequest

router = APIRouter(prefix="/quote", tags=["quote"])


@router.post("/preview", response_model=QuoteBreakdown, response_model_exclude_none=True)
def preview_quote(payload: QuotePreviewRequest, registry: TemplateRegistry = Depends(get_registry)):
    try:
        quote = calculate_quote(QuoteInput.from_dict(payload.model_dump()), registry)
    except PricingError as e:
        raise pricing_http_error(e)
    return quote.to_dict()
