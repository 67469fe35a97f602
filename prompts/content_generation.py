"""Prompt composition for each generation mode.

Every mode prompt is assembled from named blocks in a fixed order:

    mode instruction -> persona -> topic/goal -> context -> audience
    -> citations (optional) -> hashtags (optional) -> style (always last)

The style block is mode-independent and closes every prompt.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from core.models import GenerationInputs, Mode
from prompts.content_options import AUDIENCE_RISK_RULES, MULTI_FORMAT_PLATFORMS
from prompts.instruction_fragments import (
    CITATION_INSTRUCTION,
    HASHTAG_INSTRUCTION,
    STYLE_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    PromptBlock,
    block_names,
    compose_blocks,
    section,
)
from prompts.response_schemas import ResponseShape

import config


DEFAULT_SUMMARY_GOAL = (
    "Identify the most critical medical concepts, explain them clearly, "
    "and structure them logically."
)
NO_CONTEXT_STANDARD = (
    "No specific medical context provided. Use general medical knowledge cautiously, "
    "avoiding specific statistical claims unless generally known."
)
NO_CONTEXT = "No specific context."


@dataclass(frozen=True)
class ProviderRequest:
    """One request to the generation provider"""
    prompt_text: str
    response_shape: ResponseShape
    temperature: float
    system_instruction: Optional[str] = None
    blocks: List[str] = field(default_factory=list)

    @property
    def block_names(self) -> List[str]:
        return list(self.blocks)


# ------------------------------------------------------------------
# Shared blocks
# ------------------------------------------------------------------

def _persona_block(persona: str) -> PromptBlock:
    return PromptBlock("persona", section("PERSONA DEFINITION", persona))


def _topic_block(title: str, topic: str) -> PromptBlock:
    return PromptBlock("topic", section(title, topic))


def _context_block(title: str, context: str, fallback: str) -> PromptBlock:
    return PromptBlock("context", section(title, context.strip() or fallback))


def _audience_block(inputs: GenerationInputs) -> PromptBlock:
    return PromptBlock("audience", section("TARGET AUDIENCE", inputs.audience.label))


def _closing_blocks(inputs: GenerationInputs) -> List[Optional[PromptBlock]]:
    """Citation and hashtag fragments (when requested) followed by style"""
    return [
        PromptBlock("citations", CITATION_INSTRUCTION) if inputs.include_citations else None,
        PromptBlock("hashtags", HASHTAG_INSTRUCTION) if inputs.include_hashtags else None,
        PromptBlock("style", STYLE_INSTRUCTION),
    ]


# ------------------------------------------------------------------
# Mode-specific block lists
# ------------------------------------------------------------------

def _standard_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    rules = "\n".join(
        f"{i}. If the audience is '{audience.label}': {rule}"
        for i, (audience, rule) in enumerate(AUDIENCE_RISK_RULES.items(), 1)
    )
    risk_filter = section("AUDIENCE RISK FILTER (REGULATORY + ETHICAL GUARDRAIL)", f"""
AUDIENCE_LEVEL: {inputs.audience.label}

Review the content for audience safety based on the level above.
{rules}

Remove or soften any statement that could cause harm or misinterpretation for this audience.""")

    return [
        PromptBlock("mode", section("CONTENT BRIEF", f"""
Write one piece of content in the persona's voice.
CONTENT_FORMAT: {inputs.format}""")),
        _persona_block(inputs.persona),
        _topic_block("TOPIC_OR_RAW_THOUGHT", topic),
        _context_block("RETRIEVED_MEDICAL_CONTEXT", inputs.context, NO_CONTEXT_STANDARD),
        PromptBlock("audience", risk_filter),
        *_closing_blocks(inputs),
    ]


def _multi_format_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    platforms = "\n".join(
        f"{i}. {description}" for i, description in enumerate(MULTI_FORMAT_PLATFORMS.values(), 1)
    )
    return [
        PromptBlock("mode", section("MULTI-FORMAT CONTENT EXPLODER", f"""
Using the same verified medical facts and the persona below, write content for ALL of these platforms.
Do not add new claims. Adapt the style for each platform while keeping the core medical truth identical.

PLATFORMS REQUIRED:
{platforms}

Return one field per platform: instagram, linkedin, email, twitter.""")),
        _persona_block(inputs.persona),
        _topic_block("TOPIC", topic),
        _context_block("CONTEXT", inputs.context, NO_CONTEXT),
        _audience_block(inputs),
        *_closing_blocks(inputs),
    ]


def _batch_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    return [
        PromptBlock("mode", section("RANDOM CONTENT BATCH GENERATOR", f"""
Using the persona below, write {inputs.batch_count} UNIQUE and DISTINCT content pieces in the format of "{inputs.format}".
All pieces share the keywords/theme given below.

INSTRUCTIONS:
1. Each piece must differ in angle, hook, and structure.
2. Keep to the medical facts of the context provided.
3. Vary the approach from piece to piece.
4. Return the pieces as a JSON list of strings, one string per piece, none empty.""")),
        _persona_block(inputs.persona),
        _topic_block("KEYWORDS / THEME", topic),
        _context_block("CONTEXT", inputs.context, NO_CONTEXT),
        _audience_block(inputs),
        *_closing_blocks(inputs),
    ]


def _carousel_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    hashtag_note = (
        "\n- Put the generated hashtags inside the 'content' field of the FINAL slide."
        if inputs.include_hashtags else ""
    )
    return [
        PromptBlock("mode", section("INSTAGRAM CAROUSEL GENERATOR", f"""
Using the persona below, write a slide-by-slide Instagram carousel on the topic.
Total slides: 5 to 10.

STRUCTURE:
1. Slide 1: the hook (scroll-stopping title).
2. Middle slides: educational value, one main idea per slide.
3. Final slide: call to action and engagement prompt.

INSTRUCTIONS:
- Give every slide a slideNumber (starting at 1), a title, content, and a visualDescription of the image or graphic.
- Keep slide text minimal and punchy.
- Ensure medical accuracy.{hashtag_note}""")),
        _persona_block(inputs.persona),
        _topic_block("TOPIC", topic),
        _context_block("CONTEXT", inputs.context, NO_CONTEXT),
        _audience_block(inputs),
        *_closing_blocks(inputs),
    ]


def _summarizer_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    return [
        PromptBlock("mode", section("DEEP DIVE ANALYZER & INSIGHT SYNTHESIZER", f"""
You are an expert analyst acting strictly as the persona below.
Transform the SOURCE TEXT (transcript, notes, or paper) into a structured, high-value summary.

TARGET AUDIENCE: {inputs.audience.label}

CRITICAL INSTRUCTIONS:
1. Synthesize, do not transcribe. Do NOT list facts in chronological order. Group related concepts into thematic sections.
2. Filter noise. Ignore timestamps, speaker labels, and conversational filler.
3. Analyze the content through the lens of the persona.
4. Required structure:
   - THE CORE THESIS: a 1-2 sentence hook summarizing the entire text.
   - KEY MEDICAL INSIGHTS: 3-7 distinct thematic sections or bullet points.
   - CLINICAL/PRACTICAL IMPLICATION: why this matters for this audience.
5. Use CAPITALIZED HEADINGS and plain bullet points (-). No bold or italics.""")),
        _persona_block(inputs.persona),
        _topic_block("SUMMARY GOAL", topic.strip() or DEFAULT_SUMMARY_GOAL),
        _context_block("SOURCE TEXT", inputs.context, NO_CONTEXT),
        *_closing_blocks(inputs),
    ]


def _summarizer_exam_blocks(inputs: GenerationInputs, topic: str) -> List[Optional[PromptBlock]]:
    return [
        PromptBlock("mode", section("CLINICAL BIOCHEMISTRY / EXAM STRATEGIST MODE (NEET-PG / USMLE)", """
You are a Clinical Biochemistry educator and medical exam strategist.
Convert the timestamped lecture captions below into a concise, high-yield, exam-oriented study summary.

OUTPUT REQUIREMENTS:
1. Topic-wise class summary with timestamps
   - Divide the lecture into clear topics.
   - Give each topic a timestamp range taken from the source, enclosed in square brackets, e.g. [14:10-22:45].
   - Headings must be CAPITALIZED, e.g. GLYCOLYSIS REGULATION [12:00-14:00].
2. High-yield learning notes
   - Pathways, reactions, enzymes, cofactors, rate-limiting steps, regulation.
   - Turn spoken explanations into exam-ready bullet points.
3. Exam-focused clinical correlations
   - Diseases and deficiencies, lab findings, biochemical basis of symptoms.
4. Competitive exam takeaways
   - A dedicated subsection per topic labeled "EXAM PEARLS / HIGH-YIELD POINTS".
   - One-liner facts, common traps, comparisons.

FORMATTING RULES:
- No bold, no italics, no special characters.
- Plain bullet points (-) or numbered lists (1.).
- No filler, storytelling, or meta commentary.""")),
        _persona_block(inputs.persona),
        _topic_block("FOCUS", topic) if topic.strip() else None,
        _context_block("SOURCE CAPTIONS", inputs.context, NO_CONTEXT),
        *_closing_blocks(inputs),
    ]


# mode -> (block builder, response shape, temperature)
_MODE_TABLE: Dict[Mode, tuple] = {
    Mode.STANDARD: (_standard_blocks, ResponseShape.FREE_TEXT, 0.7),
    Mode.MULTI_FORMAT: (_multi_format_blocks, ResponseShape.JSON_OBJECT_MULTI_FORMAT, 0.7),
    Mode.BATCH: (_batch_blocks, ResponseShape.JSON_ARRAY_OF_STRINGS, 0.9),
    Mode.CAROUSEL: (_carousel_blocks, ResponseShape.JSON_ARRAY_OF_SLIDES, 0.7),
    Mode.SUMMARIZER: (_summarizer_blocks, ResponseShape.FREE_TEXT, 0.5),
    Mode.SUMMARIZER_EXAM: (_summarizer_exam_blocks, ResponseShape.FREE_TEXT, 0.5),
}


def compose_request(
    mode: Mode,
    inputs: GenerationInputs,
    topic: Optional[str] = None
) -> ProviderRequest:
    """Build the provider request for a generation mode

    Args:
        mode: Resolved generation mode
        inputs: Generation inputs
        topic: Topic override (e.g. the distilled topic); defaults to inputs.topic

    Returns:
        ProviderRequest with prompt text, response shape and temperature
    """
    builder, shape, temperature = _MODE_TABLE[mode]
    blocks = builder(inputs, inputs.topic if topic is None else topic)
    return ProviderRequest(
        prompt_text=compose_blocks(blocks),
        response_shape=shape,
        temperature=temperature,
        system_instruction=SYSTEM_INSTRUCTION,
        blocks=block_names(blocks),
    )


# ------------------------------------------------------------------
# Pipeline side requests
# ------------------------------------------------------------------

def compose_distillation_request(raw_topic: str) -> ProviderRequest:
    """Ask for one opinionated core insight distilled from raw notes"""
    prompt = f"""You are a Thought Distiller.
Your goal is to turn messy clinician thoughts into a sharp, opinionated insight before writing.

RAW NOTES:
"{raw_topic}"

INSTRUCTIONS:
Distill the raw thoughts into ONE clear, opinionated core insight in a single sentence.
Do not write the final content yet.
Output ONLY the insight."""
    return ProviderRequest(
        prompt_text=prompt,
        response_shape=ResponseShape.FREE_TEXT,
        temperature=0.5,
        blocks=["distillation"],
    )


def apply_distilled_topic(raw_topic: str, insight: str) -> str:
    """Topic used for the rest of a run once distillation succeeded"""
    return f'CORE INSIGHT: "{insight}"\n\n(Derived from original raw notes: {raw_topic})'


def compose_drift_request(persona: str, draft: str) -> ProviderRequest:
    """Ask the provider to score persona alignment and rewrite if needed"""
    threshold = config.DRIFT_REWRITE_THRESHOLD
    prompt = compose_blocks([
        PromptBlock("mode", "You are a Persona Drift Detector.\n"
                            "Evaluate the provided content against the defined persona."),
        _persona_block(persona),
        PromptBlock("draft", section("GENERATED DRAFT", draft)),
        PromptBlock("instructions", section("INSTRUCTIONS", f"""
1. Analyze tone, vocabulary, worldview, and audience framing.
2. Assign an alignment score from 0-100.
3. If the score is below {threshold}, rewrite the content to match the persona while keeping every medical fact.
4. If the score is {threshold} or above, return the content unchanged as finalContent.
5. Ensure there is NO bold text and no asterisks in finalContent.

Return JSON with: score, reasoning, finalContent.""")),
    ])
    return ProviderRequest(
        prompt_text=prompt,
        response_shape=ResponseShape.JSON_OBJECT_DRIFT_RESULT,
        temperature=0.2,
        blocks=["mode", "persona", "draft", "instructions"],
    )
