"""Structured-output schemas for each response shape.

OpenAI structured outputs need an object at the schema root, so array
shapes are wrapped as {"items": [...]}. The result normalizer accepts both
the wrapper and a bare array.
"""

from enum import Enum
from typing import Dict, Optional


class ResponseShape(Enum):
    FREE_TEXT = "free_text"
    JSON_ARRAY_OF_STRINGS = "json_array_of_strings"
    JSON_ARRAY_OF_SLIDES = "json_array_of_slides"
    JSON_OBJECT_MULTI_FORMAT = "json_object_multi_format"
    JSON_OBJECT_DRIFT_RESULT = "json_object_drift_result"

    @property
    def is_array(self) -> bool:
        return self in (ResponseShape.JSON_ARRAY_OF_STRINGS, ResponseShape.JSON_ARRAY_OF_SLIDES)


ARRAY_WRAPPER_KEY = "items"

SLIDE_SCHEMA = {
    "type": "object",
    "properties": {
        "slideNumber": {"type": "integer"},
        "title": {"type": "string", "description": "Headline for the slide"},
        "content": {"type": "string", "description": "Body text for the slide (bullet points or short sentence)"},
        "visualDescription": {"type": "string", "description": "Description of the visual/graphic/iconography"},
    },
    "required": ["slideNumber", "title", "content", "visualDescription"],
    "additionalProperties": False,
}

MULTI_FORMAT_SCHEMA = {
    "type": "object",
    "properties": {
        "instagram": {"type": "string", "description": "Content for Instagram Carousel"},
        "linkedin": {"type": "string", "description": "Content for LinkedIn Post"},
        "email": {"type": "string", "description": "Content for Patient Email"},
        "twitter": {"type": "string", "description": "Content for Tweet Thread"},
    },
    "required": ["instagram", "linkedin", "email", "twitter"],
    "additionalProperties": False,
}

DRIFT_RESULT_SCHEMA = {
    "type": "object",
    "properties": {
        "score": {"type": "integer", "description": "Alignment score from 0-100"},
        "reasoning": {"type": "string", "description": "Brief explanation of the score and any drifts detected"},
        "finalContent": {"type": "string", "description": "The final content (original if score >= 85, rewritten if < 85)"},
    },
    "required": ["score", "reasoning", "finalContent"],
    "additionalProperties": False,
}


def _wrap_array(item_schema: Dict) -> Dict:
    return {
        "type": "object",
        "properties": {
            ARRAY_WRAPPER_KEY: {"type": "array", "items": item_schema},
        },
        "required": [ARRAY_WRAPPER_KEY],
        "additionalProperties": False,
    }


_SCHEMAS: Dict[ResponseShape, Dict] = {
    ResponseShape.JSON_ARRAY_OF_STRINGS: {
        "name": "batch_posts",
        "schema": _wrap_array({"type": "string"}),
    },
    ResponseShape.JSON_ARRAY_OF_SLIDES: {
        "name": "carousel_slides",
        "schema": _wrap_array(SLIDE_SCHEMA),
    },
    ResponseShape.JSON_OBJECT_MULTI_FORMAT: {
        "name": "multi_format_content",
        "schema": MULTI_FORMAT_SCHEMA,
    },
    ResponseShape.JSON_OBJECT_DRIFT_RESULT: {
        "name": "persona_drift_result",
        "schema": DRIFT_RESULT_SCHEMA,
    },
}


def get_response_schema(shape: ResponseShape) -> Optional[Dict]:
    """Get the named JSON schema for a response shape

    Returns:
        {"name": str, "schema": dict} or None for free text
    """
    return _SCHEMAS.get(shape)
