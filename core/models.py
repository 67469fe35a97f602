"""Data model for generation requests and results"""
import logging
from dataclasses import dataclass, field, fields, replace, asdict
from enum import Enum
from typing import Dict, List, Optional

import config

logger = logging.getLogger(__name__)


class Audience(Enum):
    """Reader tiers for the audience risk filter"""

    LAYPERSON = "Layperson (Patient/Public)"
    STUDENT = "Medical Student"
    CLINICIAN = "Licensed Clinician"
    BUSINESS = "Business Decision-Maker"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label) -> "Audience":
        """Resolve an audience from its UI label or short name

        Accepts "Layperson (Patient/Public)", "Layperson", "layperson", etc.
        """
        if isinstance(label, cls):
            return label
        text = str(label or "").strip().lower()
        for audience in cls:
            if text in (audience.value.lower(), audience.name.lower()):
                return audience
            if text and audience.value.lower().startswith(text):
                return audience
        raise ValueError(f"Unknown audience: {label!r}")


class Mode(Enum):
    """Mutually exclusive generation modes"""

    STANDARD = "standard"
    MULTI_FORMAT = "multi_format"
    BATCH = "batch"
    CAROUSEL = "carousel"
    SUMMARIZER = "summarizer"
    SUMMARIZER_EXAM = "summarizer_exam"

    @property
    def is_summarizer(self) -> bool:
        return self in (Mode.SUMMARIZER, Mode.SUMMARIZER_EXAM)


# Mode flags in resolution precedence order
MODE_FLAGS = ("summarizer_mode", "carousel_mode", "batch_mode")


def clamp_batch_count(value) -> int:
    """Clamp a requested batch size into the supported range"""
    try:
        count = int(value)
    except (TypeError, ValueError):
        count = config.DEFAULT_BATCH_COUNT
    return max(config.BATCH_COUNT_MIN, min(config.BATCH_COUNT_MAX, count))


@dataclass
class GenerationInputs:
    """Complete configuration for one generation request

    Mode flags are kept consistent on construction: at most one of
    batch/carousel/summarizer survives (summarizer > carousel > batch) and
    exam mode needs summarizer mode. Use with_flag() to toggle a flag the
    way the input form does.
    """

    persona: str = ""
    format: str = config.DEFAULT_FORMAT
    topic: str = ""
    context: str = ""
    audience: Audience = Audience.LAYPERSON
    include_citations: bool = False
    enable_distillation: bool = False
    include_hashtags: bool = False
    batch_mode: bool = False
    carousel_mode: bool = False
    summarizer_mode: bool = False
    exam_summarizer_mode: bool = False
    batch_count: int = config.DEFAULT_BATCH_COUNT

    def __post_init__(self):
        self.audience = Audience.from_label(self.audience)
        self.batch_count = clamp_batch_count(self.batch_count)

        active = [name for name in MODE_FLAGS if getattr(self, name)]
        if len(active) > 1:
            logger.warning(f"Conflicting mode flags {active}; keeping {active[0]}")
            for name in active[1:]:
                setattr(self, name, False)
        if not self.summarizer_mode:
            self.exam_summarizer_mode = False

    def with_flag(self, name: str, value) -> "GenerationInputs":
        """Return a copy with one field changed and mode exclusivity restored

        Args:
            name: Field name (e.g. "batch_mode", "batch_count", "topic")
            value: New value

        Returns:
            New GenerationInputs instance
        """
        if name not in {f.name for f in fields(self)}:
            raise AttributeError(f"Unknown input field: {name}")

        updates: Dict = {name: value}

        if name == "batch_mode" and value:
            updates.update(carousel_mode=False, summarizer_mode=False, exam_summarizer_mode=False)
            if self.format == config.MULTI_FORMAT_LABEL:
                updates["format"] = config.DEFAULT_FORMAT
        elif name == "carousel_mode" and value:
            updates.update(batch_mode=False, summarizer_mode=False, exam_summarizer_mode=False)
        elif name == "summarizer_mode":
            if value:
                updates.update(batch_mode=False, carousel_mode=False)
            else:
                updates["exam_summarizer_mode"] = False
        elif name == "exam_summarizer_mode" and value and not self.summarizer_mode:
            updates["exam_summarizer_mode"] = False

        return replace(self, **updates)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["audience"] = self.audience.label
        return data


@dataclass(frozen=True)
class CarouselSlide:
    slide_number: int
    title: str
    content: str
    visual_description: str


@dataclass(frozen=True)
class MultiFormatContent:
    instagram: str
    linkedin: str
    email: str
    twitter: str

    PLATFORMS = ("linkedin", "instagram", "twitter", "email")

    def for_platform(self, platform: str) -> str:
        if platform not in self.PLATFORMS:
            raise KeyError(f"Unknown platform: {platform}")
        return getattr(self, platform)


@dataclass(frozen=True)
class GenerationResult:
    """Output of one pipeline run

    At most one of multi_format_output, batch_output and carousel_output
    is populated. Standard and Summarizer results carry their answer in
    content alone.
    """

    mode: Mode
    content: str
    drift_score: Optional[int] = None
    drift_reasoning: Optional[str] = None
    distilled_insight: Optional[str] = None
    multi_format_output: Optional[MultiFormatContent] = None
    batch_output: Optional[List[str]] = None
    carousel_output: Optional[List[CarouselSlide]] = None

    def __post_init__(self):
        shapes = [
            s for s in (self.multi_format_output, self.batch_output, self.carousel_output)
            if s is not None
        ]
        if len(shapes) > 1:
            raise ValueError("A result carries at most one structured output")

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data
