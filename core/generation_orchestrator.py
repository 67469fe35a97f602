"""Generation orchestrator: distill -> generate -> drift-check"""
import logging
from dataclasses import dataclass
from typing import Optional

from core.llm_client import LLMClient, get_llm_client
from core.models import GenerationInputs, GenerationResult, Mode
from core.mode_resolver import validate_inputs
from core.result_normalizer import ResponseParseError, ResultNormalizer
from prompts.content_generation import (
    ProviderRequest,
    apply_distilled_topic,
    compose_distillation_request,
    compose_drift_request,
    compose_request,
)

logger = logging.getLogger(__name__)

# Reasoning effort per pipeline step (ignored by non-reasoning models)
DISTILLATION_EFFORT = "low"
GENERATION_EFFORT = "medium"
DRIFT_EFFORT = "low"


class GenerationError(RuntimeError):
    """A provider call failed or returned unusable output"""
    pass


@dataclass(frozen=True)
class DistillationOutcome:
    """Topic to use for the run, plus the insight when distillation succeeded"""
    topic: str
    insight: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.insight is not None


class GenerationOrchestrator:
    """Run one generation request end to end

    The run is a short sequence of provider calls, never concurrent:

        1. distillation (optional, best-effort: failures are logged and ignored)
        2. mode-specific generation (mandatory)
        3. persona drift check (mandatory, Standard mode only)

    Any failure in a mandatory step raises GenerationError and no partial
    result is returned. The orchestrator holds no per-run state, so callers
    are responsible for not starting a second run while one is in flight.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        normalizer: Optional[ResultNormalizer] = None,
    ):
        self.llm_client = llm_client or get_llm_client()
        self.normalizer = normalizer or ResultNormalizer()

    @classmethod
    def from_credentials(
        cls,
        api_key: str,
        model: Optional[str] = None,
        provider: str = "openai",
        azure_endpoint: Optional[str] = None,
        api_version: Optional[str] = None,
        base_model: Optional[str] = None,
    ) -> "GenerationOrchestrator":
        """Create an orchestrator with a freshly configured LLM client"""
        return cls(get_llm_client(
            provider=provider,
            api_key=api_key,
            model=model,
            azure_endpoint=azure_endpoint,
            api_version=api_version,
            base_model=base_model,
        ))

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def run(self, inputs: GenerationInputs) -> GenerationResult:
        """Generate content for one set of inputs

        Raises:
            InputValidationError: required input missing (no provider call made)
            GenerationError: provider failure or malformed structured output
        """
        mode = validate_inputs(inputs)
        logger.info(f"Starting generation: mode={mode.value}, audience={inputs.audience.name}")

        if inputs.enable_distillation:
            distillation = self.distill_topic(inputs.topic)
        else:
            distillation = DistillationOutcome(topic=inputs.topic)

        raw = self.generate_draft(mode, inputs, distillation.topic)

        try:
            result = self._normalize(mode, inputs, raw, distillation.insight)
            if mode is Mode.STANDARD:
                result = self.check_drift(inputs.persona, result)
        except ResponseParseError as e:
            logger.error(f"Unusable provider output for mode={mode.value}: {e}")
            raise GenerationError(str(e)) from e

        logger.info(
            f"Generation complete: mode={mode.value}, drift_score={result.drift_score}, "
            f"distilled={distillation.applied}"
        )
        return result

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def distill_topic(self, raw_topic: str) -> DistillationOutcome:
        """Compress raw notes into one opinionated insight (best-effort)

        Returns:
            DistillationOutcome; falls back to the raw topic on failure or
            empty output
        """
        if not raw_topic.strip():
            logger.info("Distillation skipped: no topic to distill")
            return DistillationOutcome(topic=raw_topic)

        request = compose_distillation_request(raw_topic)
        try:
            insight = self._call(request, reasoning_effort=DISTILLATION_EFFORT).strip()
        except GenerationError as e:
            logger.warning(f"Distillation failed, using original topic: {e}")
            return DistillationOutcome(topic=raw_topic)

        if not insight:
            logger.warning("Distillation returned no insight, using original topic")
            return DistillationOutcome(topic=raw_topic)

        logger.info(f"Distilled insight: {insight[:80]}")
        return DistillationOutcome(topic=apply_distilled_topic(raw_topic, insight), insight=insight)

    def generate_draft(self, mode: Mode, inputs: GenerationInputs, topic: str) -> str:
        """Issue the mode-specific request and return the raw response"""
        request = compose_request(mode, inputs, topic)
        logger.debug(f"Mode request blocks: {request.block_names}")
        return self._call(request, reasoning_effort=GENERATION_EFFORT)

    def check_drift(self, persona: str, draft: GenerationResult) -> GenerationResult:
        """Score persona alignment of a Standard draft, taking any rewrite"""
        request = compose_drift_request(persona, draft.content)
        raw = self._call(request, reasoning_effort=DRIFT_EFFORT)
        result = self.normalizer.drift(draft, raw)
        if result.content != draft.content:
            logger.info(f"Drift score {result.drift_score}: draft rewritten to match persona")
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _normalize(
        self, mode: Mode, inputs: GenerationInputs, raw: str, insight: Optional[str]
    ) -> GenerationResult:
        if mode is Mode.MULTI_FORMAT:
            return self.normalizer.multi_format(raw, insight)
        if mode is Mode.BATCH:
            return self.normalizer.batch(raw, inputs.batch_count, insight)
        if mode is Mode.CAROUSEL:
            return self.normalizer.carousel(raw, insight)
        return self.normalizer.free_text(mode, raw, insight)

    def _call(self, request: ProviderRequest, reasoning_effort: str = "medium") -> str:
        """Send one request to the provider, wrapping any failure"""
        try:
            return self.llm_client.complete(request, reasoning_effort=reasoning_effort)
        except Exception as e:
            logger.error(f"Provider call failed ({request.response_shape.value}): {e}")
            raise GenerationError(str(e)) from e
