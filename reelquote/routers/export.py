"""
PDF export of an unsaved quote.

POST /api/export/pdf takes a quote breakdown exactly as the preview endpoint
returns it, plus optional meta, and streams back the rendered PDF.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..dependencies import get_registry
from ..pdf_generator import generate_quote_pdf
from ..pricing import TemplateRegistry
from ..schemas import ExportPdfRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["pdf"])


def _filename(title: str) -> str:
    slug = "".join(c if c.isalnum() else "-" for c in (title or "").lower()).strip("-")
    return f"quote-{slug or 'draft'}.pdf"


@router.post("/pdf")
def export_pdf(payload: ExportPdfRequest, registry: TemplateRegistry = Depends(get_registry)):
    quote = payload.quote.model_dump(exclude_none=True)
    meta = payload.meta.model_dump(exclude_none=True) if payload.meta else {}
    template = registry.get(quote["project_type"])

    pdf_bytes = generate_quote_pdf(
        quote,
        meta=meta,
        project_label=template.label if template else None,
    )
    logger.info("Exported PDF for %s quote (%d bytes)", quote["project_type"], len(pdf_bytes))

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_filename(meta.get("project_title"))}"'},
    )
