from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Project(Base):
    """A saved quote: inputs snapshot plus the pricing breakdown computed at save time."""
    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=_uuid)
    # Stored as VARCHAR so new project types don't need a migration
    type = Column(String, nullable=False)
    title = Column(String, nullable=True)
    client_name = Column(String, nullable=True)

    # Basic info
    duration_min = Column(Integer, nullable=False, default=1)
    delivery_days = Column(Integer, nullable=False, default=1)
    flags = Column(JSON, default=dict)    # {"animations": bool, "voiceover": bool, "sfx": bool}
    outputs = Column(JSON, default=dict)  # {"portrait": bool, "cut15": bool, ...}
    brief = Column(Text, nullable=True)

    # Out-of-pocket expenses as entered (None = not entered)
    oop_transport = Column(Float, nullable=True)
    oop_fnb = Column(Float, nullable=True)
    oop_misc = Column(Float, nullable=True)

    # Complexity
    complexity_answers = Column(JSON, nullable=False)  # exactly 10 ints, 0-5
    weighted_score = Column(Float, nullable=False, default=0.0)
    complexity_multiplier = Column(Float, nullable=False, default=1.0)

    # Business constraints
    income_goal = Column(Float, nullable=True)
    living_cost = Column(Float, nullable=True)
    skill_level = Column(String, nullable=True)  # 'beginner' | 'intermediate' | 'pro'
    profit_margin_pct = Column(Float, nullable=True)

    # Pricing snapshot
    base_crew = Column(Float, nullable=False, default=0.0)
    base_gear = Column(Float, nullable=False, default=0.0)
    base_oop = Column(Float, nullable=False, default=0.0)
    base_cost = Column(Float, nullable=False, default=0.0)
    skill_multiplier = Column(Float, nullable=False, default=1.0)
    subtotal = Column(Float, nullable=False, default=0.0)
    contingency_pct = Column(Float, nullable=False, default=0.05)
    contingency = Column(Float, nullable=False, default=0.0)
    grand_total = Column(Float, nullable=False, default=0.0)
    client_price = Column(Float, nullable=True)  # None when no margin configured
    nett_profit = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    crew_lines = relationship(
        "ProjectCrewLine", back_populates="project",
        cascade="all, delete-orphan", order_by="ProjectCrewLine.sort_order",
    )
    gear_lines = relationship(
        "ProjectGearLine", back_populates="project",
        cascade="all, delete-orphan", order_by="ProjectGearLine.sort_order",
    )

    __table_args__ = (
        Index("idx_projects_type_created_at", "type", "created_at"),
    )


class ProjectCrewLine(Base):
    """Development line, one crew role."""
    __tablename__ = "project_crew_lines"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    role = Column(String, nullable=False)
    qty = Column(Float, nullable=False, default=1.0)
    days = Column(Float, nullable=False, default=1.0)
    rate_per_day = Column(Float, nullable=False, default=0.0)
    line_total = Column(Float, nullable=False, default=0.0)

    project = relationship("Project", back_populates="crew_lines")


class ProjectGearLine(Base):
    """Production line, one gear item."""
    __tablename__ = "project_gear_lines"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    qty = Column(Float, nullable=False, default=1.0)
    days = Column(Float, nullable=False, default=1.0)
    rate_per_day = Column(Float, nullable=False, default=0.0)
    line_total = Column(Float, nullable=False, default=0.0)

    project = relationship("Project", back_populates="gear_lines")
