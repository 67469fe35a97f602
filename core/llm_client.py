"""Generation provider clients for MedCopy (OpenAI and Azure OpenAI)"""
from typing import Dict, List, Optional
import logging
from abc import ABC, abstractmethod
from openai import OpenAI, AzureOpenAI
import config
from prompts.content_generation import ProviderRequest
from prompts.response_schemas import get_response_schema

logger = logging.getLogger(__name__)
logging.basicConfig(level=config.LOG_LEVEL)

# Models that reject temperature/top_p and take a reasoning effort instead
REASONING_MODEL_PREFIXES = ("gpt-5", "o3", "o4")

# Reasoning tokens granted on top of the output tokens, per effort
REASONING_TOKEN_BUDGETS = {
    "none":   0,
    "low":    8192,
    "medium": 16384,
    "high":   32768,
    "xhigh":  65536,
}

# Effort to retry with when reasoning used up the whole completion budget
EFFORT_FALLBACK = {
    "xhigh": "high",
    "high":  "medium",
    "medium": "low",
    "low":   "none",
}

DEFAULT_OUTPUT_TOKENS = 4096


class ProviderError(RuntimeError):
    """The provider refused the request or returned nothing usable"""
    pass


def is_reasoning_model(model_name: str) -> bool:
    return bool(model_name) and model_name.startswith(REASONING_MODEL_PREFIXES)


def structured_output_format(response_schema: Dict) -> Dict:
    """response_format value requesting strict JSON for a named schema

    Args:
        response_schema: {"name": str, "schema": dict} as returned by
            get_response_schema()
    """
    return {
        "type": "json_schema",
        "json_schema": {
            "name": response_schema["name"],
            "schema": response_schema["schema"],
            "strict": True,
        },
    }


class LLMClient(ABC):
    """Generation provider: prompt (+ optional schema) in, text or JSON out"""

    @abstractmethod
    def generate(self, prompt: str, **kwargs) -> str:
        """Generate text (or a JSON document when response_schema is given)"""
        pass

    def complete(self, request: ProviderRequest, reasoning_effort: str = "medium") -> str:
        """Send a composed request with its system instruction, temperature and schema"""
        return self.generate(
            prompt=request.prompt_text,
            system_prompt=request.system_instruction,
            temperature=request.temperature,
            reasoning_effort=reasoning_effort,
            response_schema=get_response_schema(request.response_shape),
        )


class OpenAIClient(LLMClient):
    """OpenAI chat completions client"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize OpenAI client

        Args:
            api_key: OpenAI API key. If None, uses config.OPENAI_API_KEY
            model: Model name. If None, uses config.OPENAI_MODEL
        """
        self.api_key = api_key or config.OPENAI_API_KEY
        self.model = model or config.OPENAI_MODEL

        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not set. Please check your .env file or config.")

        self.client = OpenAI(api_key=self.api_key)
        logger.info(f"OpenAI client initialized with model: {self.model}")

    @property
    def reasoning(self) -> bool:
        return is_reasoning_model(self.model)

    def _messages(self, prompt: str, system_prompt: Optional[str]) -> List[Dict]:
        """User message, preceded by the system instruction if any

        Reasoning models take the instruction in the 'developer' role.
        """
        messages = []
        if system_prompt:
            role = "developer" if self.reasoning else "system"
            messages.append({"role": role, "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _params(
        self,
        messages: List[Dict],
        temperature: float,
        max_tokens: Optional[int],
        reasoning_effort: str,
        response_schema: Optional[Dict],
        **kwargs
    ) -> Dict:
        params = {"model": self.model, "messages": messages, **kwargs}
        if response_schema:
            params["response_format"] = structured_output_format(response_schema)

        if not self.reasoning:
            params["temperature"] = temperature
            if max_tokens is not None:
                params["max_tokens"] = max_tokens
            return params

        budget = REASONING_TOKEN_BUDGETS.get(reasoning_effort, REASONING_TOKEN_BUDGETS["medium"])
        if max_tokens is not None or budget:
            output_tokens = DEFAULT_OUTPUT_TOKENS if max_tokens is None else max_tokens
            params["max_completion_tokens"] = output_tokens + budget
        params["reasoning_effort"] = reasoning_effort
        # temperature only with effort "none"
        if reasoning_effort == "none":
            params["temperature"] = temperature
        params.pop("top_p", None)
        return params

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        reasoning_effort: str = "medium",
        response_schema: Optional[Dict] = None,
        **kwargs
    ) -> str:
        """Generate text from a prompt

        A reasoning model that spends its whole budget thinking is retried
        with the next lower effort until one returns content.

        Args:
            prompt: The user prompt
            system_prompt: System message to set context
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum output tokens
            reasoning_effort: "none"|"low"|"medium"|"high"|"xhigh", ignored for
                non-reasoning models
            response_schema: {"name", "schema"} dict; requests strict JSON output
            **kwargs: Additional parameters for OpenAI API

        Returns:
            Generated text ("" if the model returned no content)

        Raises:
            ProviderError: refusal, or no content even at the lowest effort
        """
        messages = self._messages(prompt, system_prompt)
        effort = reasoning_effort

        while True:
            params = self._params(messages, temperature, max_tokens, effort, response_schema, **kwargs)
            logger.debug(
                f"API call: model={self.model}, reasoning={self.reasoning}, effort={effort}, "
                f"structured={bool(response_schema)}, msgs={len(messages)}"
            )

            try:
                response = self.client.chat.completions.create(**params)
            except Exception as e:
                logger.error(f"Error generating text: {e}")
                raise

            choice = response.choices[0]
            refusal = getattr(choice.message, "refusal", None)
            if refusal:
                logger.error(f"Model refused request: {refusal}")
                raise ProviderError(f"Model refused request: {refusal}")

            if choice.message.content:
                return choice.message.content

            if not (choice.finish_reason == "length" and self.reasoning):
                logger.warning(f"Empty response from {self.model} (finish_reason={choice.finish_reason})")
                return ""

            lower_effort = EFFORT_FALLBACK.get(effort)
            if lower_effort is None:
                diag = (
                    f"Empty response from {self.model} | "
                    f"finish_reason={choice.finish_reason} | usage={response.usage}"
                )
                logger.error(diag)
                raise ProviderError(diag)

            logger.warning(
                f"Reasoning overflow: effort={effort} used all "
                f"{response.usage.completion_tokens} tokens. Retrying with effort={lower_effort}"
            )
            effort = lower_effort


class AzureOpenAIClient(OpenAIClient):
    """Azure OpenAI deployment; same request handling as OpenAIClient"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        azure_endpoint: Optional[str] = None,
        api_version: Optional[str] = None,
        base_model: Optional[str] = None,
    ):
        """Initialize Azure OpenAI client

        Args:
            api_key: Azure key. If None, uses config.AZURE_OPENAI_API_KEY
            model: Deployment name. If None, uses config.AZURE_OPENAI_DEPLOYMENT
            azure_endpoint: Resource endpoint URL
            api_version: Azure API version
            base_model: Model behind the deployment, for reasoning detection
        """
        self.api_key = api_key or config.AZURE_OPENAI_API_KEY
        self.model = model or config.AZURE_OPENAI_DEPLOYMENT
        self.base_model = base_model or ""
        azure_endpoint = azure_endpoint or config.AZURE_OPENAI_ENDPOINT

        if not self.api_key:
            raise ValueError("Azure OpenAI API key not set.")
        if not azure_endpoint:
            raise ValueError("Azure OpenAI endpoint not set.")
        if not self.model:
            raise ValueError("Azure OpenAI deployment name not set.")

        self.client = AzureOpenAI(
            api_key=self.api_key,
            azure_endpoint=azure_endpoint,
            api_version=api_version or config.AZURE_OPENAI_API_VERSION,
        )
        logger.info(
            f"Azure OpenAI client initialized: deployment={self.model}, "
            f"base_model={self.base_model or '(not set)'}, endpoint={azure_endpoint}"
        )

    @property
    def reasoning(self) -> bool:
        # Deployment names are arbitrary, so prefer the declared base model
        return is_reasoning_model(self.base_model or self.model)


def get_llm_client(
    provider: str = "openai",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    azure_endpoint: Optional[str] = None,
    api_version: Optional[str] = None,
    base_model: Optional[str] = None,
) -> LLMClient:
    """Get an LLM client instance

    Args:
        provider: 'openai' or 'azure_openai'
        api_key: API key for the provider
        model: Model name (or Azure deployment name)
        azure_endpoint: Azure OpenAI endpoint URL
        api_version: Azure OpenAI API version
        base_model: Actual model name for reasoning detection (Azure only)

    Returns:
        LLMClient instance
    """
    if provider == "openai":
        return OpenAIClient(api_key=api_key, model=model)
    elif provider == "azure_openai":
        return AzureOpenAIClient(
            api_key=api_key,
            model=model,
            azure_endpoint=azure_endpoint,
            api_version=api_version,
            base_model=base_model,
        )
    else:
        raise ValueError(f"Unknown provider: {provider}")
