"""
Multi-stage validation pipeline for LLM text understanding outputs.

Keyword extraction output goes through:
1. JSON Parse - tool arguments (dict), JSON string, or fenced ```json text
2. Schema Validation - Pydantic model validation (three tiers of strings)
3. Business Rules - main topics present, term lengths
4. Deduplication - unique within a tier, first tier wins across tiers

Analysis and relevance outputs reuse stages 1-2 with their own schemas.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from reading_recommender.models.keywords import KeywordSet, normalize_tiers


logger = structlog.get_logger(__name__)

# Terms longer than this are almost always sentences, not keywords
MAX_TERM_WORDS = 6

MAX_ANALYSIS_ITEMS = 7

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)


# ============================================================================
# VALIDATION RESULT
# ============================================================================

@dataclass
class ValidationResult:
    """
    Result of multi-stage validation.

    Contains validation status, errors, warnings, and cleaned data.
    """
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    cleaned_data: Optional[Dict[str, Any]] = None

    def add_error(self, error: str):
        """Add an error to the result."""
        self.errors.append(error)
        self.valid = False

    def add_warning(self, warning: str):
        """Add a warning to the result (non-fatal)."""
        self.warnings.append(warning)


# ============================================================================
# RAW OUTPUT SCHEMAS
# ============================================================================

class KeywordsRawOutput(BaseModel):
    """Raw keyword extraction output as produced by the LLM (camelCase)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    main_topics: List[str] = Field(..., alias="mainTopics")
    specific_concepts: List[str] = Field(..., alias="specificConcepts")
    related_terms: List[str] = Field(..., alias="relatedTerms")
    authors: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_key_phrases(cls, data: Any) -> Any:
        # Content-summary variant names the lowest tier keyPhrases
        if isinstance(data, dict) and "relatedTerms" not in data and "keyPhrases" in data:
            data = {**data, "relatedTerms": data["keyPhrases"]}
        return data


class AnalysisRawOutput(BaseModel):
    """Raw content analysis output."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: str
    summary: str
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    difficulty: str = "beginner"
    time_to_consume: str = Field(default="5 minutes", alias="timeToConsume")
    tags: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def unwrap_ai_analysis(cls, data: Any) -> Any:
        # Older prompt shape nests keyPoints/difficulty/tags under aiAnalysis
        if isinstance(data, dict) and isinstance(data.get("aiAnalysis"), dict):
            data = {**data["aiAnalysis"], **{k: v for k, v in data.items() if k != "aiAnalysis"}}
        return data


class RelevanceRawOutput(BaseModel):
    """Raw relevance judgment output."""
    scores: List[float]


# ============================================================================
# STAGE 1: JSON PARSE
# ============================================================================

def parse_json_payload(payload: Union[Dict[str, Any], str, None]) -> Any:
    """
    Parse LLM structured output into Python data.

    Accepts tool call arguments (already a dict), a JSON string, or a JSON
    string wrapped in markdown code fences.

    Raises:
        ValueError: If the payload is empty or not valid JSON
    """
    if isinstance(payload, dict):
        return payload
    if payload is None or not str(payload).strip():
        raise ValueError("Empty response")

    text = _FENCE_RE.sub("", str(payload)).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose; take the outermost braces
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise
        return json.loads(text[start:end + 1])


def _schema_errors(e: ValidationError) -> List[str]:
    errors = []
    for error in e.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        errors.append(f"Schema violation at {field_path}: {error['msg']}")
    return errors


# ============================================================================
# KEYWORD VALIDATION PIPELINE
# ============================================================================

def validate_keywords_output(payload: Union[Dict[str, Any], str, None]) -> ValidationResult:
    """
    Multi-stage validation of keyword extraction output.

    Args:
        payload: Tool arguments dict or raw response text

    Returns:
        ValidationResult; cleaned_data has snake_case tiers ready for KeywordSet
    """
    result = ValidationResult(valid=True)

    # Stage 1: Parse JSON
    logger.debug("validation_stage_1_json_parse")
    try:
        data = parse_json_payload(payload)
    except (ValueError, TypeError) as e:
        result.add_error(f"Invalid JSON: {e}")
        return result

    if not isinstance(data, dict):
        result.add_error(f"Expected JSON object, got {type(data).__name__}")
        return result

    # Stage 2: Schema validation with Pydantic
    logger.debug("validation_stage_2_schema")
    try:
        raw = KeywordsRawOutput.model_validate(data)
    except ValidationError as e:
        for message in _schema_errors(e):
            result.add_error(message)
        return result

    tiers = {
        "main_topics": raw.main_topics,
        "specific_concepts": raw.specific_concepts,
        "related_terms": raw.related_terms,
    }

    # Stage 3: Business rules (warnings only: the query builder decides what is usable)
    logger.debug("validation_stage_3_business_rules")
    if not any(t.strip() for t in raw.main_topics):
        result.add_warning("No main topics extracted")

    for tier, terms in tiers.items():
        for term in terms:
            if len(term.split()) > MAX_TERM_WORDS:
                result.add_warning(f"Long term in {tier}: {term[:60]}")

    # Stage 4: Deduplication
    logger.debug("validation_stage_4_deduplication")
    normalized, notes = normalize_tiers(tiers)
    for note in notes:
        result.add_warning(note)

    result.cleaned_data = {
        **{tier: list(terms) for tier, terms in normalized.items()},
        "authors": [a.strip() for a in raw.authors if a and a.strip()],
    }

    logger.info(
        "keywords_validation_complete",
        valid=result.valid,
        errors_count=len(result.errors),
        warnings_count=len(result.warnings)
    )

    return result


def keywords_from_validation(result: ValidationResult) -> KeywordSet:
    """
    Build the KeywordSet from a successful validation.

    Raises:
        ValueError: If the validation failed
    """
    if not result.valid or result.cleaned_data is None:
        raise ValueError(f"Cannot build keywords from invalid output: {result.errors}")
    return KeywordSet.from_tiers(**result.cleaned_data)


# ============================================================================
# ANALYSIS / RELEVANCE VALIDATION
# ============================================================================

def validate_analysis_output(payload: Union[Dict[str, Any], str, None]) -> ValidationResult:
    """Validate content analysis output (parse + schema + difficulty enum)."""
    result = ValidationResult(valid=True)

    try:
        data = parse_json_payload(payload)
        raw = AnalysisRawOutput.model_validate(data)
    except ValidationError as e:
        for message in _schema_errors(e):
            result.add_error(message)
        return result
    except (ValueError, TypeError) as e:
        result.add_error(f"Invalid JSON: {e}")
        return result

    cleaned = raw.model_dump()
    difficulty = cleaned["difficulty"].strip().lower()
    if difficulty not in ("beginner", "intermediate", "advanced"):
        result.add_warning(f"Unknown difficulty '{cleaned['difficulty']}', using beginner")
        difficulty = "beginner"
    cleaned["difficulty"] = difficulty

    for key in ("key_points", "tags"):
        if len(cleaned[key]) > MAX_ANALYSIS_ITEMS:
            result.add_warning(f"Too many {key} ({len(cleaned[key])}), keeping {MAX_ANALYSIS_ITEMS}")
            cleaned[key] = cleaned[key][:MAX_ANALYSIS_ITEMS]

    result.cleaned_data = cleaned
    return result


def validate_relevance_output(
    payload: Union[Dict[str, Any], str, None],
    expected_count: int
) -> ValidationResult:
    """
    Validate relevance judgment output.

    Accepts {"scores": [...]} or a bare JSON array of numbers.
    Scores outside [0, 10] are clamped with a warning.
    """
    result = ValidationResult(valid=True)

    try:
        data = parse_json_payload(payload)
        if isinstance(data, list):
            data = {"scores": data}
        raw = RelevanceRawOutput.model_validate(data)
    except ValidationError as e:
        for message in _schema_errors(e):
            result.add_error(message)
        return result
    except (ValueError, TypeError) as e:
        result.add_error(f"Invalid JSON: {e}")
        return result

    if len(raw.scores) != expected_count:
        result.add_error(
            f"Expected {expected_count} scores, got {len(raw.scores)}"
        )
        return result

    scores = []
    for idx, score in enumerate(raw.scores):
        if not 0.0 <= score <= 10.0:
            result.add_warning(f"Score {idx} out of range: {score}")
            score = min(10.0, max(0.0, score))
        scores.append(score)

    result.cleaned_data = {"scores": scores}
    return result


def format_validation_report(result: ValidationResult) -> str:
    """
    Format validation result as a one-line report for error messages.
    """
    parts = [f"valid={result.valid}"]
    if result.errors:
        parts.append("errors: " + "; ".join(result.errors))
    if result.warnings:
        parts.append("warnings: " + "; ".join(result.warnings))
    return " | ".join(parts)
