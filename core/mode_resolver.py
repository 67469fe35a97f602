"""Mode resolution and input validation"""
import logging
from typing import Optional

import config
from core.models import GenerationInputs, Mode

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    """A required input field is missing"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


def resolve_mode(inputs: GenerationInputs) -> Mode:
    """Determine the single active generation mode

    First match wins, so a conflicting flag set still resolves
    deterministically.

    Args:
        inputs: Generation inputs

    Returns:
        Active Mode
    """
    if inputs.summarizer_mode and inputs.exam_summarizer_mode:
        return Mode.SUMMARIZER_EXAM
    if inputs.summarizer_mode:
        return Mode.SUMMARIZER
    if inputs.carousel_mode:
        return Mode.CAROUSEL
    if inputs.batch_mode:
        return Mode.BATCH
    if inputs.format == config.MULTI_FORMAT_LABEL:
        return Mode.MULTI_FORMAT
    return Mode.STANDARD


def validate_inputs(inputs: GenerationInputs, mode: Optional[Mode] = None) -> Mode:
    """Check required fields for the resolved mode

    Args:
        inputs: Generation inputs
        mode: Pre-resolved mode (resolved here if None)

    Returns:
        The resolved mode

    Raises:
        InputValidationError: naming the first missing field
    """
    mode = mode or resolve_mode(inputs)

    if mode.is_summarizer:
        if not inputs.context.strip():
            raise InputValidationError("context", "Please provide Source Text to summarize.")
        if not inputs.persona.strip():
            raise InputValidationError("persona", "Please select a Persona for the summary.")
    else:
        if not inputs.persona.strip():
            raise InputValidationError("persona", "Please provide at least a Persona and a Topic.")
        if not inputs.topic.strip():
            raise InputValidationError("topic", "Please provide at least a Persona and a Topic.")

    logger.debug(f"Inputs valid for mode={mode.value}")
    return mode
