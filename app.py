"""MedCopy - Streamlit Web Application"""
import streamlit as st
import logging
from typing import Optional, Tuple
from core.generation_orchestrator import GenerationOrchestrator, GenerationError
from core.mode_resolver import InputValidationError, resolve_mode, validate_inputs
from core.models import Audience, GenerationInputs, GenerationResult, Mode
from core.sheet_service import (
    AuthorizationRequired,
    AutoSaveGuard,
    PersistenceError,
    SheetService,
    SheetSession,
)
from prompts.content_options import PLATFORM_LABELS, available_formats
from prompts.persona_presets import PERSONA_PRESETS, get_preset
from utils.export_utils import drift_score_color, result_to_text
from utils.settings_store import SettingsStore
import config

logger = logging.getLogger(__name__)
logging.basicConfig(level=config.LOG_LEVEL)

# Configure page
st.set_page_config(
    page_title=config.APP_TITLE,
    page_icon="🩺",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Form fields bound to widgets, as "in_<field>" session keys
FORM_FIELDS = [
    "persona", "format", "topic", "context", "audience",
    "include_citations", "enable_distillation", "include_hashtags",
    "batch_mode", "carousel_mode", "summarizer_mode", "exam_summarizer_mode",
    "batch_count",
]


# ------------------------------------------------------------------
# Session state initialization
# ------------------------------------------------------------------

def _widget_value(inputs: GenerationInputs, name: str):
    value = getattr(inputs, name)
    return value.label if name == "audience" else value


def _sync_widgets(inputs: GenerationInputs):
    """Push the normalized inputs back into the widget keys"""
    for name in FORM_FIELDS:
        st.session_state[f"in_{name}"] = _widget_value(inputs, name)


def initialize_session():
    """Initialize session state variables"""
    if "settings_store" not in st.session_state:
        st.session_state.settings_store = SettingsStore()
    sheet_config = st.session_state.settings_store.get_sheet_config()

    defaults = {
        "inputs": GenerationInputs(),
        "preset_choice": None,
        "pipeline_state": "IDLE",
        "is_generating": False,
        "generation_result": None,
        "result_inputs": None,
        "error": None,
        "active_platform": "linkedin",
        # Provider credentials
        "api_key_stored": config.OPENAI_API_KEY or "",
        "model_stored": config.OPENAI_MODEL,
        "provider_stored": "openai",
        "azure_endpoint_stored": "",
        "azure_api_version_stored": config.AZURE_OPENAI_API_VERSION,
        "azure_base_model_stored": "",
        # Sheets
        "sheet_client_id": sheet_config["client_id"],
        "sheet_spreadsheet_id": sheet_config["spreadsheet_id"],
        "sheet_session": SheetSession(sheet_config["client_id"]),
        "auto_save_guard": AutoSaveGuard(),
        "sheet_auth_needed": False,
        "sheet_message": None,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default

    if "in_persona" not in st.session_state:
        _sync_widgets(st.session_state.inputs)


def reset_form():
    """Clear inputs and the current result"""
    st.session_state.inputs = GenerationInputs()
    _sync_widgets(st.session_state.inputs)
    st.session_state.preset_choice = None
    st.session_state.generation_result = None
    st.session_state.result_inputs = None
    st.session_state.error = None
    st.session_state.active_platform = "linkedin"
    st.session_state.pipeline_state = "IDLE"
    st.session_state.sheet_auth_needed = False
    st.session_state.sheet_message = None
    st.session_state.auto_save_guard.reset()


def get_orchestrator() -> Optional[GenerationOrchestrator]:
    """Create GenerationOrchestrator from stored credentials"""
    api_key = st.session_state.get("api_key_stored", "")
    model = st.session_state.get("model_stored") or None
    provider = st.session_state.get("provider_stored", "openai")

    if not api_key:
        return None

    if provider == "azure_openai" and not st.session_state.get("azure_endpoint_stored"):
        return None

    try:
        return GenerationOrchestrator.from_credentials(
            api_key=api_key,
            model=model,
            provider=provider,
            azure_endpoint=st.session_state.get("azure_endpoint_stored") or None,
            api_version=st.session_state.get("azure_api_version_stored") or None,
            base_model=st.session_state.get("azure_base_model_stored") or None,
        )
    except Exception as e:
        logger.error(f"Failed to create orchestrator: {e}")
        return None


def get_sheet_service() -> SheetService:
    session: SheetSession = st.session_state.sheet_session
    session.client_id = st.session_state.sheet_client_id
    return SheetService(
        spreadsheet_id=st.session_state.sheet_spreadsheet_id,
        session=session,
    )


# ------------------------------------------------------------------
# Widget callbacks
# ------------------------------------------------------------------

def _on_field_change(name: str):
    value = st.session_state[f"in_{name}"]
    if name == "audience":
        value = Audience.from_label(value)
    inputs = st.session_state.inputs.with_flag(name, value)
    st.session_state.inputs = inputs
    _sync_widgets(inputs)
    if name == "persona":
        st.session_state.preset_choice = None


def _on_preset_change():
    preset_id = st.session_state.preset_choice
    preset = get_preset(preset_id)
    if not preset:
        return
    inputs = st.session_state.inputs.with_flag("persona", preset["persona_prompt"])
    st.session_state.inputs = inputs
    _sync_widgets(inputs)


def _on_generate():
    """Validate and move to GENERATING (the is_generating gate)"""
    if st.session_state.is_generating:
        return
    st.session_state.error = None
    try:
        validate_inputs(st.session_state.inputs)
    except InputValidationError as e:
        st.session_state.error = str(e)
        return
    st.session_state.generation_result = None
    st.session_state.is_generating = True
    st.session_state.pipeline_state = "GENERATING"


# ------------------------------------------------------------------
# Header & sidebar
# ------------------------------------------------------------------

def display_header():
    """Display application header"""
    st.markdown(f"# 🩺 {config.APP_TITLE}")
    st.markdown(
        f"**{config.APP_DESCRIPTION}**  \n"
        "Pick a persona, give a topic and optional verified context, and get "
        "platform-ready medical copy."
    )


def setup_sidebar():
    """Setup sidebar configuration"""
    with st.sidebar:
        st.markdown("## ⚙️ Settings")

        provider = st.selectbox("LLM Provider", ["OpenAI", "Azure OpenAI"], index=0)
        provider_key = "openai" if provider == "OpenAI" else "azure_openai"

        api_key = st.text_input(
            "API Key",
            value=st.session_state.api_key_stored,
            type="password",
        )

        if provider_key == "openai":
            model = st.selectbox(
                "LLM Model",
                ["gpt-4o", "gpt-4o-mini", "gpt-4.1", "gpt-5", "gpt-5.2"],
                index=0,
            )
            st.session_state.azure_endpoint_stored = ""
            st.session_state.azure_base_model_stored = ""
        else:
            st.session_state.azure_endpoint_stored = st.text_input(
                "Azure Endpoint",
                placeholder="https://your-resource.openai.azure.com/",
            )
            model = st.text_input("Deployment Name", placeholder="gpt-4o-deployment")
            st.session_state.azure_api_version_stored = st.text_input(
                "API Version", value=config.AZURE_OPENAI_API_VERSION
            )
            st.session_state.azure_base_model_stored = st.text_input(
                "Base Model", value="gpt-4o",
                help="Actual model behind the deployment (used for reasoning-model detection)",
            )

        st.session_state.api_key_stored = api_key
        st.session_state.model_stored = model
        st.session_state.provider_stored = provider_key

        setup_sheet_settings()


def setup_sheet_settings():
    """Google Sheets link: ids, authorization and proxy status"""
    st.markdown("### 📊 Google Sheets")
    service = get_sheet_service()

    if service.uses_proxy:
        st.info("Saving through the configured proxy endpoint. No sign-in needed.")

    with st.expander("Sheet configuration", expanded=not service.is_configured):
        client_id = st.text_input(
            "Google Client ID",
            value=st.session_state.sheet_client_id,
            placeholder="7382...apps.googleusercontent.com",
        )
        spreadsheet_id = st.text_input(
            "Spreadsheet ID",
            value=st.session_state.sheet_spreadsheet_id,
            placeholder="1BxiM...",
        )
        if st.button("Save configuration", key="save_sheet_config"):
            st.session_state.settings_store.save_sheet_config(client_id, spreadsheet_id)
            st.session_state.sheet_client_id = client_id.strip()
            st.session_state.sheet_spreadsheet_id = spreadsheet_id.strip()
            st.success("Sheet configuration saved")
        if st.button("Forget saved configuration", key="clear_sheet_config"):
            st.session_state.settings_store.clear()
            sheet_config = st.session_state.settings_store.get_sheet_config()
            st.session_state.sheet_client_id = sheet_config["client_id"]
            st.session_state.sheet_spreadsheet_id = sheet_config["spreadsheet_id"]
            st.rerun()

    session: SheetSession = st.session_state.sheet_session
    if not service.uses_proxy and session.client_id:
        if session.is_authorized:
            st.caption("Signed in to Google Sheets")
            if st.button("Sign out", key="sheet_sign_out"):
                session.sign_out()
                st.rerun()
        else:
            redirect_uri = st.text_input("OAuth redirect URI", value="http://localhost:8501")
            st.link_button("Authorize Google Sheets", session.consent_url(redirect_uri))
            token = st.text_input("Access token", type="password",
                                  help="Paste the access token returned by the consent screen")
            if st.button("Use token", key="sheet_use_token") and token:
                session.authorize(token)
                st.session_state.sheet_auth_needed = False
                st.rerun()


# ------------------------------------------------------------------
# Input form
# ------------------------------------------------------------------

def render_input_form():
    """Persona, topic, context and mode toggles"""
    inputs: GenerationInputs = st.session_state.inputs
    mode = resolve_mode(inputs)

    st.markdown("## Persona")
    preset_ids = list(PERSONA_PRESETS.keys())
    st.selectbox(
        "Preset",
        preset_ids,
        index=None,
        format_func=lambda pid: f"{PERSONA_PRESETS[pid]['name']} · {PERSONA_PRESETS[pid]['description']}",
        placeholder="Choose a persona preset",
        key="preset_choice",
        on_change=_on_preset_change,
    )
    with st.expander("Persona system prompt", expanded=not inputs.persona):
        st.text_area("Persona", key="in_persona", height=200,
                     on_change=_on_field_change, args=("persona",))

    st.markdown("## Content")
    formats = available_formats(inputs.batch_mode, inputs.carousel_mode, inputs.summarizer_mode)
    if inputs.format not in formats:
        formats.append(inputs.format)
    col1, col2 = st.columns(2)
    with col1:
        st.selectbox("Format", formats, key="in_format", disabled=mode.is_summarizer
                     or mode is Mode.CAROUSEL, on_change=_on_field_change, args=("format",))
    with col2:
        st.selectbox("Audience", [a.label for a in Audience], key="in_audience",
                     on_change=_on_field_change, args=("audience",))

    topic_label = "Summary goal (optional)" if mode.is_summarizer else "Topic or raw thought"
    st.text_area(topic_label, key="in_topic", height=80,
                 on_change=_on_field_change, args=("topic",))
    context_label = "Source text / captions" if mode.is_summarizer else "Verified medical context (optional)"
    st.text_area(context_label, key="in_context", height=160,
                 on_change=_on_field_change, args=("context",))

    st.markdown("## Options")
    col1, col2 = st.columns(2)
    with col1:
        st.toggle("Citation injection", key="in_include_citations",
                  on_change=_on_field_change, args=("include_citations",))
        st.toggle("Thought distillation", key="in_enable_distillation",
                  on_change=_on_field_change, args=("enable_distillation",))
        st.toggle("Hashtags", key="in_include_hashtags",
                  on_change=_on_field_change, args=("include_hashtags",))
    with col2:
        st.toggle("Batch mode", key="in_batch_mode",
                  on_change=_on_field_change, args=("batch_mode",))
        if inputs.batch_mode:
            st.slider("Posts per batch", config.BATCH_COUNT_MIN, config.BATCH_COUNT_MAX,
                      key="in_batch_count", on_change=_on_field_change, args=("batch_count",))
        st.toggle("Instagram carousel", key="in_carousel_mode",
                  on_change=_on_field_change, args=("carousel_mode",))
        st.toggle("Summarizer", key="in_summarizer_mode",
                  on_change=_on_field_change, args=("summarizer_mode",))
        if inputs.summarizer_mode:
            st.toggle("Exam mode (timestamped captions)", key="in_exam_summarizer_mode",
                      on_change=_on_field_change, args=("exam_summarizer_mode",))

    col1, col2 = st.columns([1, 1])
    with col1:
        st.button("🚀 Generate", key="generate_btn", type="primary",
                  disabled=st.session_state.is_generating, on_click=_on_generate)
    with col2:
        st.button("Clear", key="clear_btn", on_click=reset_form)

    if st.session_state.error:
        st.error(st.session_state.error)


# ------------------------------------------------------------------
# State renderers
# ------------------------------------------------------------------

def render_generating_state():
    """GENERATING: run the pipeline once (auto-advance)"""
    orch = get_orchestrator()
    if not orch:
        st.session_state.error = "Please provide a valid API key in the sidebar."
        st.session_state.is_generating = False
        st.session_state.pipeline_state = "IDLE"
        st.rerun()
        return

    inputs = st.session_state.inputs
    with st.spinner("Generating content..."):
        result, error = run_pipeline(orch, inputs)
    st.session_state.is_generating = False

    if result is not None:
        st.session_state.generation_result = result
        st.session_state.result_inputs = inputs
        st.session_state.active_platform = "linkedin"
        st.session_state.sheet_message = None
        st.session_state.pipeline_state = "COMPLETE"
    else:
        st.session_state.error = error
        st.session_state.pipeline_state = "IDLE"
    st.rerun()


def run_pipeline(orch, inputs: GenerationInputs) -> Tuple[Optional[GenerationResult], Optional[str]]:
    """Run one generation; returns (result, None) or (None, error message)"""
    try:
        return orch.run(inputs), None
    except InputValidationError as e:
        return None, str(e)
    except GenerationError as e:
        logger.error(f"Generation error: {e}", exc_info=True)
        return None, f"Failed to generate content: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during generation: {e}", exc_info=True)
        return None, f"An unexpected error occurred: {e}"


def render_result():
    """COMPLETE: show the result for its shape"""
    result = st.session_state.generation_result
    if result is None:
        st.info("Generated content will appear here.")
        return

    st.markdown("## 📝 Result")

    if result.drift_score is not None:
        color = drift_score_color(result.drift_score)
        st.markdown(f"**Persona alignment:** :{color}[{result.drift_score}%]")
        if result.drift_reasoning:
            st.caption(result.drift_reasoning)

    if result.distilled_insight:
        st.info(f"Core insight: {result.distilled_insight}")

    if result.multi_format_output is not None:
        platforms = list(PLATFORM_LABELS.keys())
        platform = st.radio(
            "Platform", platforms, horizontal=True, key="active_platform",
            format_func=lambda p: PLATFORM_LABELS[p],
        )
        st.text_area("Content", result.multi_format_output.for_platform(platform), height=400)
    elif result.carousel_output is not None:
        for slide in result.carousel_output:
            with st.container(border=True):
                st.markdown(f"**Slide {slide.slide_number}: {slide.title}**")
                st.write(slide.content)
                st.caption(f"Visual: {slide.visual_description}")
    elif result.batch_output is not None:
        for i, piece in enumerate(result.batch_output, 1):
            with st.expander(f"Post {i}", expanded=i == 1):
                st.write(piece)
    else:
        st.text_area("Content", result.content, height=400)

    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "📋 Download text",
            result_to_text(result, st.session_state.active_platform),
            file_name=f"medcopy_{result.mode.value}.txt",
        )
    with col2:
        guard: AutoSaveGuard = st.session_state.auto_save_guard
        if guard.is_saved(result):
            st.caption("✅ Saved to Google Sheets")
        elif st.button("📊 Save to Sheets", key="save_sheet_btn"):
            save_result(manual=True)

    if st.session_state.sheet_message:
        st.success(st.session_state.sheet_message)
    if st.session_state.sheet_auth_needed:
        st.warning("Google Sheets authorization required. Authorize in the sidebar, then save again.")


def save_result(manual: bool = False):
    """Save the current result; auto-save runs at most once per result"""
    result = st.session_state.generation_result
    inputs = st.session_state.result_inputs
    guard: AutoSaveGuard = st.session_state.auto_save_guard
    service = get_sheet_service()

    if result is None or inputs is None:
        return
    if not service.is_configured:
        if manual:
            st.warning("Configure Google Sheets in the sidebar first.")
        return
    if not manual and not guard.should_save(result):
        return

    logger.debug(f"Sheet save check: manual={manual}, guard={guard.state}")
    active = st.session_state.active_platform if result.multi_format_output is not None else None
    try:
        service.save(inputs, result, active_format=active)
        guard.mark_saved(result)
        st.session_state.sheet_auth_needed = False
        st.session_state.sheet_message = "Saved to Google Sheets"
    except AuthorizationRequired:
        guard.mark_attempted(result)
        st.session_state.sheet_auth_needed = True
    except PersistenceError as e:
        guard.mark_attempted(result)
        st.error(f"Failed to save to Google Sheets: {e}")


def main():
    """Main application flow"""
    initialize_session()
    setup_sidebar()

    display_header()
    st.markdown("---")

    col_inputs, col_output = st.columns([1, 1])
    with col_inputs:
        render_input_form()
    with col_output:
        state = st.session_state.pipeline_state
        if state == "GENERATING":
            render_generating_state()
        else:
            if state == "COMPLETE":
                save_result(manual=False)
            render_result()


if __name__ == "__main__":
    main()
