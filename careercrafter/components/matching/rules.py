"""Matching constants: category weights, tier orders, and thresholds.

Changing any value here changes scores that are already stored in match-run
history.
"""

import enum


class ExperienceTier(str, enum.Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class EducationTier(str, enum.Enum):
    HIGH_SCHOOL = "high_school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    DOCTORATE = "doctorate"


class WorkMode(str, enum.Enum):
    REMOTE = "remote"
    HYBRID = "hybrid"
    ON_SITE = "on-site"


class Recommendation(str, enum.Enum):
    HIGHLY_RECOMMENDED = "highly_recommended"
    GOOD_MATCH = "good_match"
    MODERATE_MATCH = "moderate_match"


class MatchAlgorithm(str, enum.Enum):
    PROVIDER_ENHANCED = "provider-enhanced"
    BASIC_FALLBACK = "basic-fallback"


EXPERIENCE_ORDER = [
    ExperienceTier.ENTRY,
    ExperienceTier.MID,
    ExperienceTier.SENIOR,
    ExperienceTier.EXECUTIVE,
]
EDUCATION_ORDER = [
    EducationTier.HIGH_SCHOOL,
    EducationTier.ASSOCIATE,
    EducationTier.BACHELOR,
    EducationTier.MASTER,
    EducationTier.DOCTORATE,
]

DEFAULT_EXPERIENCE_TIER = ExperienceTier.MID
DEFAULT_EDUCATION_TIER = EducationTier.BACHELOR

# Synonyms checked after the canonical tier names, in tier order (first hit wins).
EXPERIENCE_SYNONYMS = {
    ExperienceTier.ENTRY: ["entry", "junior", "jr", "intern", "internship", "graduate", "fresher", "trainee"],
    ExperienceTier.MID: ["mid", "intermediate", "middle", "associate"],
    ExperienceTier.SENIOR: ["senior", "sr", "lead", "principal", "staff"],
    ExperienceTier.EXECUTIVE: ["executive", "director", "vp", "vice president", "chief", "c-level", "head of"],
}
# Years of experience -> tier (upper bounds, exclusive)
EXPERIENCE_YEAR_BOUNDS = [
    (2.0, ExperienceTier.ENTRY),
    (5.0, ExperienceTier.MID),
    (10.0, ExperienceTier.SENIOR),
]

EDUCATION_SYNONYMS = {
    EducationTier.HIGH_SCHOOL: ["high school", "high-school", "high_school", "secondary", "ged", "diploma"],
    EducationTier.ASSOCIATE: ["associate"],
    EducationTier.BACHELOR: ["bachelor", "bachelors", "bsc", "b.sc", "ba", "bs", "beng", "undergraduate"],
    EducationTier.MASTER: ["master", "masters", "msc", "m.sc", "mba", "ma", "ms", "meng"],
    EducationTier.DOCTORATE: ["doctorate", "doctoral", "phd", "ph.d"],
}

# ---------------------------------------------------------------------------
# Deterministic scorer
# ---------------------------------------------------------------------------
CATEGORY_WEIGHTS = {
    "skills": 0.30,
    "experience": 0.20,
    "education": 0.10,
    "salary": 0.15,
    "location": 0.10,
    "culture": 0.10,
}
# Flat career-growth credit: always awarded, not measured.
GROWTH_WEIGHT = 0.05
GROWTH_CREDIT = 75

SCORE_CAP = 95
NEUTRAL_SKILLS_SCORE = 50

EXPERIENCE_MEETS_SCORE = 100
EXPERIENCE_ONE_BELOW_SCORE = 70
EXPERIENCE_FAR_BELOW_SCORE = 40

EDUCATION_MEETS_SCORE = 100
EDUCATION_BELOW_SCORE = 60

SALARY_UNKNOWN_SCORE = 50
SALARY_IN_RANGE_SCORE = 100
SALARY_ABOVE_MAX_SCORE = 80
SALARY_BELOW_MIN_SCORE = 70
SALARY_OUT_OF_RANGE_SCORE = 50
SALARY_TOLERANCE = 0.20

LOCATION_REMOTE_MATCH_SCORE = 100
LOCATION_FLEXIBLE_SCORE = 80
LOCATION_SAME_CITY_SCORE = 90
LOCATION_DEFAULT_SCORE = 50

JOB_TYPE_EXACT_SCORE = 100
JOB_TYPE_FULL_TIME_SCORE = 80
JOB_TYPE_DEFAULT_SCORE = 70

STRENGTH_THRESHOLD = 80
STRENGTH_PHRASES = [
    ("skills", "Strong skills alignment"),
    ("experience", "Relevant experience"),
    ("salary", "Good salary fit"),
    ("location", "Location preference matched"),
    ("education", "Education requirements met"),
    ("culture", "Preferred job type"),
]
DEFAULT_STRENGTH = "Good overall profile match"
DEFAULT_IMPROVEMENT = "Continue building experience"
DEFAULT_REASON = "Profile matches job requirements"

HIGHLY_RECOMMENDED_MIN = 80
GOOD_MATCH_MIN = 70

MAX_REASONS = 4
MAX_STRENGTHS = 3
MAX_IMPROVEMENTS = 2


def recommendation_for(score: int) -> Recommendation:
    if score >= HIGHLY_RECOMMENDED_MIN:
        return Recommendation.HIGHLY_RECOMMENDED
    if score >= GOOD_MATCH_MIN:
        return Recommendation.GOOD_MATCH
    return Recommendation.MODERATE_MATCH
