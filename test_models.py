"""Tests for generation inputs/results and mode-flag exclusivity"""
import pytest

import config
from core.models import (
    Audience,
    CarouselSlide,
    GenerationInputs,
    GenerationResult,
    Mode,
    MultiFormatContent,
)

MODE_FLAGS = ("batch_mode", "carousel_mode", "summarizer_mode")


def _all_flag_states():
    """Every combination of the three mode flags plus the exam flag"""
    for bits in range(16):
        yield GenerationInputs(
            persona="p", topic="t",
            batch_mode=bool(bits & 1),
            carousel_mode=bool(bits & 2),
            summarizer_mode=bool(bits & 4),
            exam_summarizer_mode=bool(bits & 8),
        )


def test_construction_keeps_at_most_one_mode_flag():
    for inputs in _all_flag_states():
        assert sum(getattr(inputs, f) for f in MODE_FLAGS) <= 1
        if inputs.exam_summarizer_mode:
            assert inputs.summarizer_mode


def test_enabling_a_mode_clears_the_others():
    for start in _all_flag_states():
        for flag in MODE_FLAGS:
            updated = start.with_flag(flag, True)
            assert getattr(updated, flag) is True
            others = [f for f in MODE_FLAGS if f != flag]
            assert not any(getattr(updated, f) for f in others)
            if flag != "summarizer_mode":
                assert updated.exam_summarizer_mode is False


def test_disabling_summarizer_clears_exam_mode():
    inputs = GenerationInputs(summarizer_mode=True, exam_summarizer_mode=True)
    assert inputs.exam_summarizer_mode

    updated = inputs.with_flag("summarizer_mode", False)
    assert updated.summarizer_mode is False
    assert updated.exam_summarizer_mode is False


def test_exam_mode_requires_summarizer():
    inputs = GenerationInputs().with_flag("exam_summarizer_mode", True)
    assert inputs.exam_summarizer_mode is False

    inputs = GenerationInputs(summarizer_mode=True).with_flag("exam_summarizer_mode", True)
    assert inputs.exam_summarizer_mode is True


def test_batch_mode_resets_multi_format():
    inputs = GenerationInputs(format=config.MULTI_FORMAT_LABEL).with_flag("batch_mode", True)
    assert inputs.format == config.DEFAULT_FORMAT

    inputs = GenerationInputs(format="Clinical Blog Post").with_flag("batch_mode", True)
    assert inputs.format == "Clinical Blog Post"


def test_with_flag_returns_new_inputs():
    original = GenerationInputs(topic="sleep")
    updated = original.with_flag("topic", "diet")
    assert original.topic == "sleep"
    assert updated.topic == "diet"


def test_with_flag_rejects_unknown_field():
    with pytest.raises(AttributeError):
        GenerationInputs().with_flag("image_mode", True)


@pytest.mark.parametrize("requested,expected", [
    (0, 1), (-5, 1), (1, 1), (4, 4), (10, 10), (11, 10), (99, 10), ("7", 7), (None, 3),
])
def test_batch_count_is_clamped(requested, expected):
    assert GenerationInputs(batch_count=requested).batch_count == expected
    assert GenerationInputs().with_flag("batch_count", requested).batch_count == expected


def test_audience_accepts_labels_and_short_names():
    assert Audience.from_label("Layperson (Patient/Public)") is Audience.LAYPERSON
    assert Audience.from_label("Layperson") is Audience.LAYPERSON
    assert Audience.from_label("student") is Audience.STUDENT
    assert Audience.from_label("Clinician") is Audience.CLINICIAN
    assert Audience.from_label("Business Decision-Maker") is Audience.BUSINESS
    assert GenerationInputs(audience="Licensed Clinician").audience is Audience.CLINICIAN

    with pytest.raises(ValueError):
        Audience.from_label("Investor")


def test_result_rejects_two_structured_outputs():
    with pytest.raises(ValueError):
        GenerationResult(
            mode=Mode.BATCH,
            content="x",
            batch_output=["a"],
            carousel_output=[CarouselSlide(1, "t", "c", "v")],
        )


def test_result_to_dict_serializes_enums():
    result = GenerationResult(
        mode=Mode.MULTI_FORMAT,
        content="done",
        drift_score=100,
        multi_format_output=MultiFormatContent("ig", "li", "em", "tw"),
    )
    data = result.to_dict()
    assert data["mode"] == "multi_format"
    assert data["multi_format_output"]["linkedin"] == "li"

    inputs = GenerationInputs(persona="p", audience=Audience.STUDENT).to_dict()
    assert inputs["audience"] == "Medical Student"
