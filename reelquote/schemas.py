from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from .pricing.types import SkillLevel


# --- Quote inputs ---
# Numbers are not range-checked here: negative qty/days/rates are clamped to
# 0 by the pricing pipeline rather than rejected.

class CrewLineIn(BaseModel):
    role: str = Field(min_length=1)
    qty: float = 1.0
    days: float = 1.0
    rate_per_day: float = 0.0


class GearLineIn(BaseModel):
    name: str = Field(min_length=1)
    qty: float = 1.0
    days: float = 1.0
    rate_per_day: float = 0.0


class OOPIn(BaseModel):
    transport: Optional[float] = None
    fnb: Optional[float] = None
    misc: Optional[float] = None


class ComplexityIn(BaseModel):
    # Exactly 10 answers; the count is enforced by the pipeline so the error
    # comes back as a structured pricing failure.
    answers: List[float]
    weighted_score: Optional[float] = None
    multiplier: Optional[float] = None


class BusinessIn(BaseModel):
    income_goal: Optional[float] = Field(None, ge=0)
    living_cost: Optional[float] = Field(None, ge=0)
    skill_level: Optional[SkillLevel] = None
    profit_margin_pct: Optional[float] = Field(None, ge=0, le=1)


class Flags(BaseModel):
    animations: bool = False
    voiceover: bool = False
    sfx: bool = False


class Outputs(BaseModel):
    portrait: bool = False
    cut15: bool = False
    cut30: bool = False
    cut60: bool = False


class BasicInfo(BaseModel):
    duration_min: int = Field(gt=0)
    delivery_days: int = Field(gt=0)
    flags: Flags = Field(default_factory=Flags)
    outputs: Outputs = Field(default_factory=Outputs)
    brief: Optional[str] = Field(None, max_length=5000)


class QuoteMeta(BaseModel):
    project_title: Optional[str] = None
    client_name: Optional[str] = None
    created_at: Optional[str] = None


class QuoteInputPayload(BaseModel):
    project_type: str
    crew: List[CrewLineIn] = []
    gear: List[GearLineIn] = []
    oop: Optional[OOPIn] = None
    complexity: ComplexityIn
    business: Optional[BusinessIn] = None
    contingency_pct: Optional[float] = Field(None, ge=0, le=1)


class QuotePreviewRequest(QuoteInputPayload):
    basic: Optional[BasicInfo] = None


class ProjectCreateRequest(QuoteInputPayload):
    basic: BasicInfo
    meta: Optional[QuoteMeta] = None


# --- Quote outputs ---

class CrewLineOut(CrewLineIn):
    line_total: float


class GearLineOut(GearLineIn):
    line_total: float


class ComplexityOut(BaseModel):
    weighted_score: float
    multiplier: float


class Breakdown(BaseModel):
    development: List[CrewLineOut] = []
    production: List[GearLineOut] = []


class QuoteBreakdown(BaseModel):
    project_type: str
    base_crew: float
    base_gear: float
    base_oop: float
    base_cost: float
    complexity: ComplexityOut
    skill_multiplier: float
    subtotal: float
    contingency_pct: float
    contingency: float
    grand_total: float
    profit_margin_pct: Optional[float] = None
    client_price: Optional[float] = None
    nett_profit: Optional[float] = None
    breakdown: Breakdown


class ExportPdfRequest(BaseModel):
    quote: QuoteBreakdown
    meta: Optional[QuoteMeta] = None


# --- Projects ---

class ProjectCreateResponse(BaseModel):
    id: str


class PricingSummary(BaseModel):
    base_crew: float
    base_gear: float
    base_oop: float
    base_cost: float
    skill_multiplier: float
    subtotal: float
    contingency_pct: float
    contingency: float
    grand_total: float
    profit_margin_pct: Optional[float] = None
    client_price: Optional[float] = None
    nett_profit: Optional[float] = None


class ComplexityDetail(ComplexityOut):
    answers: List[float]


class ProjectListItem(BaseModel):
    id: str
    type: str
    meta: QuoteMeta
    basic: BasicInfo
    pricing: PricingSummary
    created_at: datetime
    updated_at: datetime


class ProjectDetail(ProjectListItem):
    crew: List[CrewLineOut]
    gear: List[GearLineOut]
    oop: OOPIn
    complexity: ComplexityDetail
    business: Optional[BusinessIn] = None


class ProjectListResponse(BaseModel):
    items: List[ProjectListItem]


# --- Templates / rules ---

class RuleApplyRequest(BaseModel):
    crew: List[CrewLineIn] = []
    gear: List[GearLineIn] = []
    flags: Flags = Field(default_factory=Flags)
    outputs: Outputs = Field(default_factory=Outputs)
    applied: List[str] = []


class RuleApplyResponse(BaseModel):
    crew: List[CrewLineIn]
    gear: List[GearLineIn]
    changed: bool
    applied: List[str]
