"""
Saved projects.

POST /api/projects           price and save a project, returns {id}
GET  /api/projects           most recent projects
GET  /api/projects/{id}      one project with its lines
GET  /api/projects/{id}/pdf  quote PDF from the stored pricing snapshot
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import storage
from ..config import settings
from ..database import get_db
from ..dependencies import get_registry, pricing_http_error
from ..pdf_generator import generate_quote_pdf
from ..pricing import PricingError, QuoteInput, TemplateRegistry, calculate_quote
from ..schemas import (
    ProjectCreateRequest,
    ProjectCreateResponse,
    ProjectDetail,
    ProjectListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_project_or_404(db: Session, project_id: str):
    project = storage.fetch_project_by_id(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=ProjectCreateResponse, status_code=201)
def create_project(
    payload: ProjectCreateRequest,
    db: Session = Depends(get_db),
    registry: TemplateRegistry = Depends(get_registry),
):
    """Recompute pricing server-side and save it with the inputs."""
    data = payload.model_dump()
    try:
        quote = calculate_quote(QuoteInput.from_dict(data), registry)
    except PricingError as e:
        raise pricing_http_error(e)

    project_id = storage.insert_project_with_details(db, data, quote)
    return {"id": project_id}


@router.get("", response_model=ProjectListResponse, response_model_exclude_none=True)
def list_projects(db: Session = Depends(get_db)):
    projects = storage.list_projects(db, limit=settings.PROJECT_LIST_LIMIT)
    return {"items": [storage.project_to_dict(p, details=False) for p in projects]}


@router.get("/{project_id}", response_model=ProjectDetail, response_model_exclude_none=True)
def get_project(project_id: str, db: Session = Depends(get_db)):
    return storage.project_to_dict(_get_project_or_404(db, project_id))


@router.get("/{project_id}/pdf")
def download_project_pdf(
    project_id: str,
    db: Session = Depends(get_db),
    registry: TemplateRegistry = Depends(get_registry),
):
    project = _get_project_or_404(db, project_id)
    template = registry.get(project.type)

    pdf_bytes = generate_quote_pdf(
        storage.project_to_quote_dict(project),
        meta={
            "project_title": project.title,
            "client_name": project.client_name,
            "created_at": project.created_at.isoformat() if project.created_at else None,
        },
        project_label=template.label if template else None,
    )
    logger.info("Exported PDF for project %s (%d bytes)", project.id, len(pdf_bytes))

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="quote-{project.id[:8]}.pdf"'},
    )
