"""Headless live run of every MedCopy generation mode.

Needs OPENAI_API_KEY in .env; makes real provider calls.

Usage:
    python test_full_pipeline.py
"""
import logging
import sys
import time
from dotenv import load_dotenv

load_dotenv()

import config
from core.generation_orchestrator import GenerationError, GenerationOrchestrator
from core.models import Audience, GenerationInputs
from prompts.persona_presets import get_preset

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("pipeline_test")

# ── config ──────────────────────────────────────────────────────────
TOPIC = (
    "new moms barely sleep, we blame hormones for the mood crash but "
    "sleep loss itself is a trigger we under-treat"
)
SOURCE_TEXT = (
    "[00:00] Today we look at glycolysis regulation. [02:15] Hexokinase is "
    "inhibited by glucose-6-phosphate, glucokinase is not. [05:40] PFK-1 is the "
    "rate-limiting enzyme, activated by fructose-2,6-bisphosphate and AMP, "
    "inhibited by ATP and citrate. [09:10] Pyruvate kinase deficiency causes "
    "hemolytic anemia."
)


def fmt_time(sec):
    m, s = divmod(int(sec), 60)
    return f"{m}m {s}s"


def print_result(result):
    print(f"  Mode: {result.mode.value}")
    print(f"  Drift: {result.drift_score}  ({result.drift_reasoning})")
    if result.distilled_insight:
        print(f"  Insight: {result.distilled_insight}")
    if result.multi_format_output is not None:
        for platform in result.multi_format_output.PLATFORMS:
            text = result.multi_format_output.for_platform(platform)
            print(f"  [{platform}] {text[:80]}...")
    elif result.batch_output is not None:
        for i, piece in enumerate(result.batch_output, 1):
            print(f"  [{i}] {piece[:80]}...")
    elif result.carousel_output is not None:
        for slide in result.carousel_output:
            print(f"  [Slide {slide.slide_number}] {slide.title}")
    else:
        print(f"  {result.content[:300]}...")


def main():
    api_key = config.OPENAI_API_KEY
    model = config.OPENAI_MODEL
    if not api_key:
        print("ERROR: OPENAI_API_KEY not set in .env")
        sys.exit(1)

    persona = get_preset("psychiatrist")["persona_prompt"]
    base = GenerationInputs(persona=persona, topic=TOPIC, audience=Audience.LAYPERSON)

    runs = [
        ("Standard + distillation", base.with_flag("enable_distillation", True)),
        ("Multi-Format", base.with_flag("format", config.MULTI_FORMAT_LABEL)),
        ("Batch (3)", base.with_flag("batch_mode", True)),
        ("Carousel", base.with_flag("carousel_mode", True).with_flag("include_hashtags", True)),
        ("Summarizer (exam)", GenerationInputs(
            persona=get_preset("biochem_mentor")["persona_prompt"],
            context=SOURCE_TEXT,
            audience=Audience.STUDENT,
            summarizer_mode=True,
            exam_summarizer_mode=True,
        )),
    ]

    print("=" * 60)
    print("  MedCopy Full Pipeline Test")
    print("=" * 60)
    print(f"  Model:  {model}")
    print(f"  Runs:   {len(runs)}")
    print("=" * 60)

    orch = GenerationOrchestrator.from_credentials(api_key=api_key, model=model)
    t_total = time.time()
    failures = 0

    for i, (label, inputs) in enumerate(runs, 1):
        print(f"\n[{i}/{len(runs)}] {label}...")
        t0 = time.time()
        try:
            result = orch.run(inputs)
        except GenerationError as e:
            failures += 1
            print(f"  FAILED ({fmt_time(time.time()-t0)}): {e}")
            continue
        print(f"  Done ({fmt_time(time.time()-t0)})")
        print_result(result)

    print("\n" + "=" * 60)
    print(f"  Total time: {fmt_time(time.time()-t_total)}")
    print(f"  Failures: {failures}/{len(runs)}")
    print("=" * 60)
    return failures == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
