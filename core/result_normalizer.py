"""Map raw provider output into GenerationResult objects"""
import json
import logging
import math
from typing import Any, Dict, List, Optional

import config
from core.models import CarouselSlide, GenerationResult, Mode, MultiFormatContent
from prompts.response_schemas import ARRAY_WRAPPER_KEY, ResponseShape

logger = logging.getLogger(__name__)

NO_CONTENT_PLACEHOLDER = "No content generated."
NO_SUMMARY_PLACEHOLDER = "No summary generated."
MULTI_FORMAT_PLACEHOLDER = "Multi-Format Content Generated. Please check the tabs below."
BATCH_PLACEHOLDER = "Batch Generated."
CAROUSEL_PLACEHOLDER = "Carousel Generated."

SKIPPED_DRIFT_REASONS = {
    Mode.MULTI_FORMAT: "Drift detection bypassed for Multi-Format Exploder mode.",
    Mode.BATCH: "Batch mode enabled. Diversity prioritized.",
    Mode.CAROUSEL: "Carousel mode enabled. Structural JSON generation active.",
}
SUMMARIZER_DRIFT_REASONS = {
    Mode.SUMMARIZER: "Summarizer mode active. Content derived directly from source text.",
    Mode.SUMMARIZER_EXAM: "Exam/Subtitle Mode active. Content structured for NEET-PG/USMLE retention.",
}


class ResponseParseError(ValueError):
    """Structured provider output is malformed or incomplete"""
    pass


def strip_code_fences(text: str) -> str:
    """Strip markdown code fences from LLM response"""
    if not text:
        return ""
    clean = text.strip()
    if clean.startswith("```"):
        lines = clean.split("\n")
        json_lines = [l for l in lines if not l.startswith("```")]
        clean = "\n".join(json_lines).strip()
    return clean


def parse_json_response(raw: str, shape: ResponseShape) -> Any:
    """Parse a structured response, unwrapping {"items": [...]} for arrays

    Raises:
        ResponseParseError: invalid JSON or wrong top-level type
    """
    try:
        data = json.loads(strip_code_fences(raw))
    except (json.JSONDecodeError, TypeError) as e:
        raise ResponseParseError(f"Malformed JSON for {shape.value}: {e}") from e

    if shape.is_array:
        if isinstance(data, dict) and ARRAY_WRAPPER_KEY in data:
            data = data[ARRAY_WRAPPER_KEY]
        if not isinstance(data, list):
            raise ResponseParseError(f"Expected a JSON array for {shape.value}")
    elif not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object for {shape.value}")
    return data


def _required_str(item: Dict, key: str, lenient: bool) -> str:
    value = item.get(key)
    if isinstance(value, str):
        return value
    if lenient:
        return "" if value is None else str(value)
    raise ResponseParseError(f"Missing required field: {key}")


class ResultNormalizer:
    """Build the result entity for each response shape

    Array and object targets follow the configured parse policy: strict
    (raise ResponseParseError) by default, or lenient (degrade to an empty
    array/object) when LENIENT_JSON_PARSING is on. Drift results are
    always parsed strictly.
    """

    def __init__(self, lenient: Optional[bool] = None):
        self.lenient = config.LENIENT_JSON_PARSING if lenient is None else lenient

    def _parse(self, raw: str, shape: ResponseShape) -> Any:
        try:
            return parse_json_response(raw, shape)
        except ResponseParseError as e:
            if not self.lenient:
                raise
            logger.warning(f"Lenient parse: {e}; using empty output")
            return [] if shape.is_array else {}

    def free_text(
        self, mode: Mode, raw: str, distilled_insight: Optional[str] = None
    ) -> GenerationResult:
        """Standard draft or summary text (Standard drift fields are filled later)"""
        placeholder = NO_SUMMARY_PLACEHOLDER if mode.is_summarizer else NO_CONTENT_PLACEHOLDER
        content = (raw or "").strip() or placeholder

        drift_score = None
        drift_reasoning = None
        if mode.is_summarizer:
            drift_score = config.SUMMARIZER_DRIFT_SCORE
            drift_reasoning = SUMMARIZER_DRIFT_REASONS[mode]

        return GenerationResult(
            mode=mode,
            content=content,
            drift_score=drift_score,
            drift_reasoning=drift_reasoning,
            distilled_insight=distilled_insight,
        )

    def multi_format(self, raw: str, distilled_insight: Optional[str] = None) -> GenerationResult:
        data = self._parse(raw, ResponseShape.JSON_OBJECT_MULTI_FORMAT)
        output = MultiFormatContent(
            instagram=_required_str(data, "instagram", self.lenient),
            linkedin=_required_str(data, "linkedin", self.lenient),
            email=_required_str(data, "email", self.lenient),
            twitter=_required_str(data, "twitter", self.lenient),
        )
        return self._structured(Mode.MULTI_FORMAT, MULTI_FORMAT_PLACEHOLDER, distilled_insight,
                                multi_format_output=output)

    def batch(
        self, raw: str, batch_count: int, distilled_insight: Optional[str] = None
    ) -> GenerationResult:
        """Batch pieces; never padded, trimmed to batch_count if over-delivered"""
        data = self._parse(raw, ResponseShape.JSON_ARRAY_OF_STRINGS)
        pieces: List[str] = []
        for item in data:
            if not isinstance(item, str):
                if self.lenient:
                    continue
                raise ResponseParseError("Batch output must be a list of strings")
            if item.strip():
                pieces.append(item)

        if len(pieces) > batch_count:
            logger.warning(f"Provider returned {len(pieces)} pieces for batch of {batch_count}; trimming")
            pieces = pieces[:batch_count]
        elif len(pieces) < batch_count:
            logger.info(f"Provider returned {len(pieces)} of {batch_count} requested pieces")

        return self._structured(Mode.BATCH, BATCH_PLACEHOLDER, distilled_insight,
                                batch_output=pieces)

    def carousel(self, raw: str, distilled_insight: Optional[str] = None) -> GenerationResult:
        """Carousel slides; slide numbers are kept as returned"""
        data = self._parse(raw, ResponseShape.JSON_ARRAY_OF_SLIDES)
        slides: List[CarouselSlide] = []
        for item in data:
            if not isinstance(item, dict):
                if self.lenient:
                    continue
                raise ResponseParseError("Carousel output must be a list of slide objects")
            number = item.get("slideNumber")
            if isinstance(number, bool) or not isinstance(number, int):
                if not self.lenient:
                    raise ResponseParseError("Missing required field: slideNumber")
                number = len(slides) + 1
            slides.append(CarouselSlide(
                slide_number=number,
                title=_required_str(item, "title", self.lenient),
                content=_required_str(item, "content", self.lenient),
                visual_description=_required_str(item, "visualDescription", self.lenient),
            ))
        return self._structured(Mode.CAROUSEL, CAROUSEL_PLACEHOLDER, distilled_insight,
                                carousel_output=slides)

    def drift(self, draft: GenerationResult, raw: str) -> GenerationResult:
        """Apply a drift-detector response to a Standard draft

        The returned finalContent is trusted as-is; an empty one falls
        back to the draft.
        """
        data = parse_json_response(raw, ResponseShape.JSON_OBJECT_DRIFT_RESULT)

        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ResponseParseError("Missing required field: score")
        if not math.isfinite(score):
            raise ResponseParseError("Drift score is not a finite number")
        score = int(round(score))
        if not 0 <= score <= 100:
            logger.warning(f"Drift score {score} out of range; clamping")
            score = max(0, min(100, score))

        reasoning = data.get("reasoning")
        if not isinstance(reasoning, str):
            raise ResponseParseError("Missing required field: reasoning")

        final_content = data.get("finalContent")
        content = final_content.strip() if isinstance(final_content, str) else ""

        return GenerationResult(
            mode=draft.mode,
            content=content or draft.content,
            drift_score=score,
            drift_reasoning=reasoning,
            distilled_insight=draft.distilled_insight,
        )

    def _structured(
        self, mode: Mode, placeholder: str, distilled_insight: Optional[str], **output
    ) -> GenerationResult:
        return GenerationResult(
            mode=mode,
            content=placeholder,
            drift_score=config.SKIPPED_DRIFT_SCORE,
            drift_reasoning=SKIPPED_DRIFT_REASONS[mode],
            distilled_insight=distilled_insight,
            **output,
        )
