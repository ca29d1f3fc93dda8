"""Fixed pricing tables shared by every project type."""

from .types import SkillLevel

DEFAULT_CONTINGENCY_PCT = 0.05

SKILL_MULTIPLIERS = {
    SkillLevel.BEGINNER: 0.95,
    SkillLevel.INTERMEDIATE: 1.00,
    SkillLevel.PRO: 1.15,
}

COMPLEXITY_QUESTION_COUNT = 10
MIN_ANSWER = 0
MAX_ANSWER = 5
MAX_SCORE = 40

# Evaluated in order; the first band with score <= max wins, so a boundary
# score belongs to the lower band. Bands with min/max multipliers interpolate.
COMPLEXITY_BANDS = [
    {"min": 0, "max": 10, "min_multiplier": 0.90, "max_multiplier": 1.00},
    {"min": 10, "max": 20, "multiplier": 1.05},
    {"min": 20, "max": 30, "multiplier": 1.10},
    {"min": 30, "max": 35, "multiplier": 1.20},
    {"min": 35, "max": 40, "min_multiplier": 1.30, "max_multiplier": 1.40},
]

# Question order for the ten complexity answers.
COMPLEXITY_LABELS = [
    "Portfolio value",
    "Creative complexity",
    "Revision risk",
    "Outsource requirement",
    "Client DIY difficulty",
    "Client scale",
    "Hospitality needs",
    "Client type",
    "Concept ownership",
    "Logistics complexity",
]

FLAG_KEYS = ("animations", "voiceover", "sfx")
OUTPUT_KEYS = ("portrait", "cut15", "cut30", "cut60")
