"""Plain-text rendering of results for copy and download"""
from typing import Optional

from core.models import GenerationResult


def format_carousel_text(result: GenerationResult) -> str:
    """Carousel slides as copyable text, one block per slide"""
    return "\n\n---\n\n".join(
        f"Slide {s.slide_number}: {s.title}\n{s.content}\n[Visual: {s.visual_description}]"
        for s in result.carousel_output or []
    )


def result_to_text(result: GenerationResult, active_format: Optional[str] = None) -> str:
    """Text to copy for a result

    Args:
        result: Generation result
        active_format: Multi-format platform being viewed (e.g. "linkedin")

    Returns:
        Copyable text for the visible output
    """
    if result.multi_format_output is not None:
        return result.multi_format_output.for_platform(active_format or "linkedin")
    if result.carousel_output is not None:
        return format_carousel_text(result)
    if result.batch_output is not None:
        return "\n\n---\n\n".join(result.batch_output)
    return result.content


def drift_score_color(score: Optional[int]) -> str:
    """Colour band for a drift score badge"""
    if score is None:
        return "gray"
    if score >= 90:
        return "green"
    if score >= 85:
        return "blue"
    if score >= 70:
        return "orange"
    return "red"
