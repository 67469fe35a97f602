"""Tests for prompt composition across generation modes"""
import pytest

from core.models import Audience, GenerationInputs, Mode
from prompts.content_generation import (
    DEFAULT_SUMMARY_GOAL,
    NO_CONTEXT_STANDARD,
    apply_distilled_topic,
    compose_distillation_request,
    compose_drift_request,
    compose_request,
)
from prompts.instruction_fragments import (
    CITATION_INSTRUCTION,
    HASHTAG_INSTRUCTION,
    STYLE_INSTRUCTION,
    SYSTEM_INSTRUCTION,
)
from prompts.response_schemas import ResponseShape, get_response_schema

PERSONA = "A calm psychiatrist who writes about sleep and mood."
TOPIC = "sleep deprivation and postpartum mood"


def _inputs(**overrides):
    values = dict(persona=PERSONA, topic=TOPIC, context="", format="LinkedIn Post")
    values.update(overrides)
    return GenerationInputs(**values)


@pytest.mark.parametrize("mode", list(Mode))
def test_style_block_is_always_last(mode):
    for citations in (False, True):
        for hashtags in (False, True):
            inputs = _inputs(include_citations=citations, include_hashtags=hashtags,
                             context="Some source text.")
            request = compose_request(mode, inputs)
            assert request.block_names[-1] == "style"
            assert request.prompt_text.endswith(STYLE_INSTRUCTION.strip())
            assert ("citations" in request.block_names) is citations
            assert ("hashtags" in request.block_names) is hashtags
            assert (CITATION_INSTRUCTION.strip() in request.prompt_text) is citations
            assert (HASHTAG_INSTRUCTION.strip() in request.prompt_text) is hashtags


@pytest.mark.parametrize("mode", list(Mode))
def test_every_mode_carries_the_persona(mode):
    request = compose_request(mode, _inputs(context="Source."))
    assert "persona" in request.block_names
    assert PERSONA in request.prompt_text
    assert request.system_instruction == SYSTEM_INSTRUCTION


def test_block_order_for_standard_mode():
    request = compose_request(Mode.STANDARD, _inputs(include_citations=True, include_hashtags=True))
    assert request.block_names == [
        "mode", "persona", "topic", "context", "audience", "citations", "hashtags", "style",
    ]


def test_shapes_and_temperatures():
    expected = {
        Mode.STANDARD: (ResponseShape.FREE_TEXT, 0.7),
        Mode.MULTI_FORMAT: (ResponseShape.JSON_OBJECT_MULTI_FORMAT, 0.7),
        Mode.BATCH: (ResponseShape.JSON_ARRAY_OF_STRINGS, 0.9),
        Mode.CAROUSEL: (ResponseShape.JSON_ARRAY_OF_SLIDES, 0.7),
        Mode.SUMMARIZER: (ResponseShape.FREE_TEXT, 0.5),
        Mode.SUMMARIZER_EXAM: (ResponseShape.FREE_TEXT, 0.5),
    }
    for mode, (shape, temperature) in expected.items():
        request = compose_request(mode, _inputs(context="Source."))
        assert request.response_shape is shape, mode
        assert request.temperature == temperature, mode


def test_standard_mode_risk_filter_and_context_fallback():
    request = compose_request(Mode.STANDARD, _inputs(audience=Audience.LAYPERSON))
    assert "AUDIENCE_LEVEL: Layperson (Patient/Public)" in request.prompt_text
    assert "not medical advice" in request.prompt_text
    assert NO_CONTEXT_STANDARD in request.prompt_text

    request = compose_request(Mode.STANDARD, _inputs(context="Trial X showed Y."))
    assert "Trial X showed Y." in request.prompt_text
    assert NO_CONTEXT_STANDARD not in request.prompt_text


def test_topic_override_replaces_raw_topic():
    distilled = apply_distilled_topic(TOPIC, "Sleep is treatment.")
    request = compose_request(Mode.STANDARD, _inputs(), topic=distilled)
    assert 'CORE INSIGHT: "Sleep is treatment."' in request.prompt_text
    assert f"(Derived from original raw notes: {TOPIC})" in request.prompt_text


def test_multi_format_forbids_new_claims():
    request = compose_request(Mode.MULTI_FORMAT, _inputs(format="Multi-Format Exploder"))
    assert "Do not add new claims" in request.prompt_text
    for platform in ("instagram", "linkedin", "email", "twitter"):
        assert platform in request.prompt_text


def test_batch_prompt_names_count_and_format():
    request = compose_request(Mode.BATCH, _inputs(batch_mode=True, batch_count=4,
                                                  format="Instagram Caption"))
    assert "write 4 UNIQUE" in request.prompt_text
    assert '"Instagram Caption"' in request.prompt_text


def test_carousel_hashtag_note_only_with_hashtags():
    with_tags = compose_request(Mode.CAROUSEL, _inputs(carousel_mode=True, include_hashtags=True))
    without = compose_request(Mode.CAROUSEL, _inputs(carousel_mode=True))
    assert "FINAL slide" in with_tags.prompt_text
    assert "FINAL slide" not in without.prompt_text


def test_summarizer_uses_default_goal_for_blank_topic():
    inputs = _inputs(summarizer_mode=True, topic="  ", context="Long transcript.")
    request = compose_request(Mode.SUMMARIZER, inputs)
    assert DEFAULT_SUMMARY_GOAL in request.prompt_text
    assert "Long transcript." in request.prompt_text
    assert "audience" not in request.block_names


def test_exam_summarizer_focus_block_is_optional():
    base = dict(summarizer_mode=True, exam_summarizer_mode=True, context="[00:10] Glycolysis...")
    with_focus = compose_request(Mode.SUMMARIZER_EXAM, _inputs(topic="enzymes", **base))
    without = compose_request(Mode.SUMMARIZER_EXAM, _inputs(topic="", **base))

    assert "topic" in with_focus.block_names
    assert "topic" not in without.block_names
    assert "EXAM PEARLS / HIGH-YIELD POINTS" in without.prompt_text
    assert "[14:10-22:45]" in without.prompt_text


def test_distillation_request():
    request = compose_distillation_request("messy notes about sleep")
    assert request.block_names == ["distillation"]
    assert request.temperature == 0.5
    assert request.system_instruction is None
    assert "messy notes about sleep" in request.prompt_text


def test_drift_request():
    request = compose_drift_request(PERSONA, "Draft body.")
    assert request.block_names == ["mode", "persona", "draft", "instructions"]
    assert request.temperature == 0.2
    assert request.response_shape is ResponseShape.JSON_OBJECT_DRIFT_RESULT
    assert "below 85" in request.prompt_text
    assert "Draft body." in request.prompt_text


def test_response_schemas():
    assert get_response_schema(ResponseShape.FREE_TEXT) is None
    for shape in ResponseShape:
        if shape is ResponseShape.FREE_TEXT:
            continue
        schema = get_response_schema(shape)
        assert schema["name"]
        assert schema["schema"]["type"] == "object"
    batch = get_response_schema(ResponseShape.JSON_ARRAY_OF_STRINGS)["schema"]
    assert batch["properties"]["items"]["type"] == "array"
