"""Google Sheets persistence for generated content"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
from urllib.parse import urlencode

import requests

import config
from core.models import GenerationInputs, GenerationResult

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"


class AuthorizationRequired(Exception):
    """Saving needs an access token; the caller should start the consent flow"""
    pass


class PersistenceError(RuntimeError):
    """Saving to the sheet failed"""
    pass


class SheetSession:
    """Holds the Sheets access token for one application session

    The token is unset until authorize() is called with the token returned
    by the interactive consent flow, and stays set until sign_out().
    """

    def __init__(self, client_id: str = ""):
        self.client_id = client_id
        self._access_token: Optional[str] = None

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    @property
    def is_authorized(self) -> bool:
        return bool(self._access_token)

    def authorize(self, access_token: str):
        """Store the token obtained from the consent flow"""
        token = (access_token or "").strip()
        if not token:
            raise ValueError("Access token is empty")
        self._access_token = token
        logger.info("Google Sheets authorization received")

    def sign_out(self):
        self._access_token = None

    def consent_url(self, redirect_uri: str) -> str:
        """URL that starts the interactive consent flow for this client id"""
        if not self.client_id:
            raise AuthorizationRequired("Configure a Google Client ID first.")
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "token",
            "scope": config.SHEETS_SCOPE,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


@dataclass(frozen=True)
class SheetRecord:
    """One flat spreadsheet row"""
    timestamp: str
    persona_excerpt: str
    topic: str
    format_label: str
    audience: str
    drift_score_label: str
    content: str

    def to_row(self) -> List[str]:
        return [
            self.timestamp,
            self.persona_excerpt,
            self.topic,
            self.format_label,
            self.audience,
            self.drift_score_label,
            self.content,
        ]


def persona_excerpt(persona: str, limit: int = config.PERSONA_EXCERPT_LENGTH) -> str:
    """First `limit` characters of the persona, with an ellipsis if truncated"""
    if len(persona) > limit:
        return persona[:limit] + "..."
    return persona


def build_record(
    inputs: GenerationInputs,
    result: GenerationResult,
    active_format: Optional[str] = None,
    now: Optional[datetime] = None
) -> SheetRecord:
    """Flatten inputs + result into a sheet row

    Args:
        inputs: Inputs of the run that produced the result
        result: Generation result
        active_format: Multi-format platform being viewed (e.g. "linkedin")
        now: Timestamp override

    Returns:
        SheetRecord
    """
    format_label = inputs.format
    if result.multi_format_output is not None and active_format:
        content = result.multi_format_output.for_platform(active_format)
        format_label = f"{inputs.format} ({active_format})"
    elif result.carousel_output is not None:
        content = "\n".join(
            f"[Slide {s.slide_number}] {s.title}: {s.content}" for s in result.carousel_output
        )
        format_label = "Instagram Carousel"
    elif result.batch_output is not None:
        content = "\n\n---\n\n".join(result.batch_output)
        format_label = f"Batch ({inputs.batch_count})"
    else:
        content = result.content

    drift_label = f"{result.drift_score}%" if result.drift_score is not None else "N/A"

    return SheetRecord(
        timestamp=(now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S"),
        persona_excerpt=persona_excerpt(inputs.persona),
        topic=inputs.topic,
        format_label=format_label,
        audience=inputs.audience.label,
        drift_score_label=drift_label,
        content=content,
    )


class SheetTransport(ABC):
    """Appends records to a store"""

    @abstractmethod
    def append(self, record: SheetRecord, inputs: GenerationInputs, result: GenerationResult):
        pass


class SheetsApiTransport(SheetTransport):
    """Direct call to the Sheets values:append endpoint with a bearer token"""

    def __init__(
        self,
        spreadsheet_id: str,
        session: SheetSession,
        base_url: str = config.SHEETS_API_BASE_URL,
        timeout: float = config.SHEETS_REQUEST_TIMEOUT,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.session = session
        self.base_url = base_url
        self.timeout = timeout

    def append(self, record: SheetRecord, inputs: GenerationInputs, result: GenerationResult):
        if not self.session.is_authorized:
            raise AuthorizationRequired("Google Sheets authorization required.")

        url = f"{self.base_url}/{self.spreadsheet_id}/values/A1:append"
        try:
            response = requests.post(
                url,
                params={"valueInputOption": "USER_ENTERED"},
                headers={
                    "Authorization": f"Bearer {self.session.access_token}",
                    "Content-Type": "application/json",
                },
                json={"values": [record.to_row()]},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Sheets API request failed: {e}")
            raise PersistenceError(f"Failed to save to Sheets: {e}") from e

        if not response.ok:
            message = _error_message(response) or "Failed to save to Sheets"
            logger.error(f"Sheets API error {response.status_code}: {message}")
            raise PersistenceError(message)


class ProxyTransport(SheetTransport):
    """Plain POST of the full inputs + result to a proxy endpoint (no token)"""

    def __init__(self, url: str, timeout: float = config.SHEETS_REQUEST_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def append(self, record: SheetRecord, inputs: GenerationInputs, result: GenerationResult):
        payload = {
            "inputs": inputs.to_dict(),
            "result": result.to_dict(),
            "record": record.to_row(),
        }
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Proxy save failed: {e}")
            raise PersistenceError(f"Failed to save via proxy: {e}") from e


def _error_message(response) -> Optional[str]:
    try:
        return response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        return None


class SheetService:
    """Save generation results through the configured transport

    A configured proxy URL always wins over the direct API, so no token is
    needed in that case.
    """

    def __init__(
        self,
        spreadsheet_id: str = "",
        session: Optional[SheetSession] = None,
        proxy_url: Optional[str] = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.session = session or SheetSession()
        self.proxy_url = config.GOOGLE_APPS_SCRIPT_URL if proxy_url is None else proxy_url

    @property
    def uses_proxy(self) -> bool:
        return bool(self.proxy_url)

    @property
    def is_configured(self) -> bool:
        return self.uses_proxy or bool(self.spreadsheet_id and self.session.client_id)

    @property
    def transport(self) -> SheetTransport:
        if self.uses_proxy:
            return ProxyTransport(self.proxy_url)
        return SheetsApiTransport(self.spreadsheet_id, self.session)

    def save(
        self,
        inputs: GenerationInputs,
        result: GenerationResult,
        active_format: Optional[str] = None
    ) -> SheetRecord:
        """Append one result

        Raises:
            AuthorizationRequired: direct API selected and no token present
            PersistenceError: the transport failed
        """
        record = build_record(inputs, result, active_format)
        self.transport.append(record, inputs, result)
        logger.info(f"Saved result to sheet ({'proxy' if self.uses_proxy else 'api'}): {record.format_label}")
        return record


class AutoSaveGuard:
    """Automatic-save bookkeeping scoped to one result object

    A result is auto-saved at most once. A failed or unauthorized attempt
    also counts, so the UI does not retry on every rerun; the user can
    still save manually.
    """

    def __init__(self):
        self._result: Optional[GenerationResult] = None
        self._saved = False
        self._attempted = False

    def _track(self, result: GenerationResult):
        if result is not self._result:
            self._result = result
            self._saved = False
            self._attempted = False

    def should_save(self, result: Optional[GenerationResult]) -> bool:
        if result is None:
            return False
        self._track(result)
        return not self._attempted

    def mark_attempted(self, result: GenerationResult):
        self._track(result)
        self._attempted = True

    def mark_saved(self, result: GenerationResult):
        self._track(result)
        self._attempted = True
        self._saved = True

    def is_saved(self, result: Optional[GenerationResult]) -> bool:
        return result is not None and result is self._result and self._saved

    def reset(self):
        self._result = None
        self._saved = False
        self._attempted = False

    @property
    def state(self) -> Dict:
        return {
            "has_result": self._result is not None,
            "attempted": self._attempted,
            "saved": self._saved,
        }
