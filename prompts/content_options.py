"""Content formats and audience tiers offered by the input form.

Keeps the audience-conditional prompt data in one place so the composer
does not carry per-audience if/else logic.
"""

from typing import Dict, List

import config
from core.models import Audience


CONTENT_FORMATS: List[str] = [
    "LinkedIn Post",
    "Twitter/X Thread",
    "Instagram Caption",
    "Patient Email Newsletter",
    "Clinical Blog Post",
    "Conference Abstract",
    config.MULTI_FORMAT_LABEL,
]


def available_formats(batch_mode: bool = False, carousel_mode: bool = False,
                      summarizer_mode: bool = False) -> List[str]:
    """Formats selectable for the current mode flags

    The Multi-Format Exploder is hidden while a specialized mode is on.
    """
    if batch_mode or carousel_mode or summarizer_mode:
        return [f for f in CONTENT_FORMATS if f != config.MULTI_FORMAT_LABEL]
    return list(CONTENT_FORMATS)


# Risk-filter rule per audience tier (softening / jargon policy)
AUDIENCE_RISK_RULES: Dict[Audience, str] = {
    Audience.LAYPERSON: (
        "Remove jargon or explain it immediately. Soften absolute claims. "
        "Keep a clear \"not medical advice\" tone."
    ),
    Audience.STUDENT: "Maintain accuracy but explain the 'why' behind each mechanism.",
    Audience.CLINICIAN: "Respect their expertise. Do not over-simplify.",
    Audience.BUSINESS: "Focus on strategic value and minimize clinical minutiae.",
}


MULTI_FORMAT_PLATFORMS: Dict[str, str] = {
    "instagram": "Instagram Carousel (slide-by-slide text with visual descriptions)",
    "linkedin": "LinkedIn Post (professional, engaging, spaced for readability)",
    "email": "Patient Email (warm, informative, subject line included)",
    "twitter": "Tweet Thread (series of short, punchy tweets)",
}

PLATFORM_LABELS: Dict[str, str] = {
    "linkedin": "LinkedIn",
    "instagram": "Instagram",
    "twitter": "Twitter/X",
    "email": "Email",
}
