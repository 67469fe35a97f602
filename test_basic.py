"""Test script for MedCopy - module smoke tests"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def test_imports():
    """Test that all modules can be imported"""
    print("Testing imports...")
    from core.llm_client import get_llm_client
    print("[OK] llm_client imported")

    from core.mode_resolver import resolve_mode, validate_inputs
    print("[OK] mode_resolver imported")

    from core.generation_orchestrator import GenerationOrchestrator
    print("[OK] generation_orchestrator imported")

    from core.result_normalizer import ResultNormalizer
    print("[OK] result_normalizer imported")

    from core.sheet_service import SheetService
    print("[OK] sheet_service imported")

    from prompts.content_generation import compose_request
    print("[OK] content_generation imported")

    from utils.settings_store import SettingsStore
    print("[OK] settings_store imported")

    from utils.export_utils import result_to_text
    print("[OK] export_utils imported")

    print("\n[PASS] All imports successful!")


def test_settings_store():
    """Test local settings persistence"""
    print("\n\nTesting settings store...")
    from utils.settings_store import SettingsStore
    import tempfile
    import config

    # Use a temporary file instead of :memory:
    fd, temp_db = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    try:
        store = SettingsStore(temp_db)

        assert store.get("missing") is None
        assert store.get("missing", "fallback") == "fallback"

        store.save_sheet_config("  client-123.apps.googleusercontent.com ", "sheet-abc")
        sheet_config = store.get_sheet_config()
        assert sheet_config["client_id"] == "client-123.apps.googleusercontent.com"
        assert sheet_config["spreadsheet_id"] == "sheet-abc"

        store.set("google_sheet_id", "sheet-def")
        assert store.get_sheet_config()["spreadsheet_id"] == "sheet-def"

        # A second store on the same file sees the saved values
        assert SettingsStore(temp_db).get("google_sheet_id") == "sheet-def"

        store.clear()
        assert store.get("google_sheet_id") is None
        # Cleared values fall back to the environment
        assert store.get_sheet_config() == {
            "client_id": config.GOOGLE_CLIENT_ID or "",
            "spreadsheet_id": config.GOOGLE_SPREADSHEET_ID or "",
        }
        print("[PASS] Settings store test successful!")
    finally:
        if os.path.exists(temp_db):
            os.remove(temp_db)


def test_persona_presets():
    """Test persona preset library"""
    print("\n\nTesting persona presets...")
    from prompts.persona_presets import PERSONA_PRESETS, get_preset

    assert len(PERSONA_PRESETS) == 8
    for preset_id, preset in PERSONA_PRESETS.items():
        assert preset["name"], preset_id
        assert preset["description"], preset_id
        assert preset["persona_prompt"].strip(), preset_id

    assert get_preset("psychiatrist")["name"] == PERSONA_PRESETS["psychiatrist"]["name"]
    assert get_preset("nonexistent") is None
    print("[PASS] Persona presets test successful!")


def test_content_options():
    """Test format list filtering"""
    print("\n\nTesting content options...")
    import config
    from prompts.content_options import CONTENT_FORMATS, available_formats

    assert config.MULTI_FORMAT_LABEL in CONTENT_FORMATS
    assert config.DEFAULT_FORMAT in CONTENT_FORMATS
    assert config.MULTI_FORMAT_LABEL in available_formats()
    for flags in ({"batch_mode": True}, {"carousel_mode": True}, {"summarizer_mode": True}):
        formats = available_formats(**flags)
        assert config.MULTI_FORMAT_LABEL not in formats
        assert config.DEFAULT_FORMAT in formats
    print("[PASS] Content options test successful!")


def test_export_utils():
    """Test copyable text rendering and drift colour bands"""
    print("\n\nTesting export utils...")
    from core.models import CarouselSlide, GenerationResult, Mode, MultiFormatContent
    from utils.export_utils import drift_score_color, result_to_text

    standard = GenerationResult(mode=Mode.STANDARD, content="Sleep matters.", drift_score=92)
    assert result_to_text(standard) == "Sleep matters."

    multi = GenerationResult(
        mode=Mode.MULTI_FORMAT, content="placeholder", drift_score=100,
        multi_format_output=MultiFormatContent("ig", "li", "em", "tw"),
    )
    assert result_to_text(multi) == "li"
    assert result_to_text(multi, "twitter") == "tw"

    carousel = GenerationResult(
        mode=Mode.CAROUSEL, content="placeholder", drift_score=100,
        carousel_output=[CarouselSlide(1, "Hook", "Body", "Icon")],
    )
    assert result_to_text(carousel) == "Slide 1: Hook\nBody\n[Visual: Icon]"

    batch = GenerationResult(
        mode=Mode.BATCH, content="placeholder", drift_score=100, batch_output=["a", "b"],
    )
    assert result_to_text(batch) == "a\n\n---\n\nb"

    assert drift_score_color(None) == "gray"
    assert drift_score_color(95) == "green"
    assert drift_score_color(85) == "blue"
    assert drift_score_color(72) == "orange"
    assert drift_score_color(0) == "red"
    print("[PASS] Export utils test successful!")


def main():
    """Run all tests"""
    print("=" * 60)
    print("MedCopy - Module Smoke Tests")
    print("=" * 60)

    tests = [
        ("Imports", test_imports),
        ("Settings Store", test_settings_store),
        ("Persona Presets", test_persona_presets),
        ("Content Options", test_content_options),
        ("Export Utils", test_export_utils),
    ]

    results = []
    for test_name, test_fn in tests:
        try:
            test_fn()
            results.append((test_name, True))
        except Exception as e:
            print("[FAIL] {} failed: {}".format(test_name, e))
            import traceback
            traceback.print_exc()
            results.append((test_name, False))

    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)

    for test_name, passed in results:
        status = "[PASS]" if passed else "[FAIL]"
        print("{}: {}".format(test_name, status))

    all_passed = all(passed for _, passed in results)

    if all_passed:
        print("\n[SUCCESS] All tests passed!")
    else:
        print("\n[WARNING] Some tests failed. Please review the errors above.")

    return all_passed


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
