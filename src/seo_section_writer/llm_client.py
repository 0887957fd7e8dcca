"""
LLM client for bilingual section copy generation.

This module provides the generation collaborator used by the orchestrator:
it sends a section prompt to Claude (Anthropic) and returns the English copy
together with its Chinese translation.
"""

import json
import logging
import os
import re
from typing import Optional

import anthropic
import httpx

from .config import DEFAULT_MODEL
from .models import BilingualText, GenerationRequest
from .sections import SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """Raised when LLM operations fail."""
    pass


MISSING_KEY_MESSAGE = (
    "No API key provided. Set ANTHROPIC_API_KEY environment variable "
    "or pass api_key parameter."
)


# Matches a ```json ... ``` (or bare ```) fenced block
_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


def _build_http_client() -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(60.0, connect=30.0),
        follow_redirects=True,
    )


class LLMClient:
    """
    Client for bilingual section generation.

    Supports Anthropic Claude API. Instances are callable with a
    GenerationRequest so they can be handed straight to the orchestrator.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        require_key: bool = True,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the LLM provider. If None, reads from ANTHROPIC_API_KEY env var.
            model: Model identifier to use.
            max_tokens: Maximum tokens per response.
            require_key: Fail now when no default key is available. With
                False, only requests carrying their own credential succeed.
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model
        self.max_tokens = max_tokens

        if not self.api_key and require_key:
            raise LLMClientError(MISSING_KEY_MESSAGE)

        self.client: Optional[anthropic.Anthropic] = None
        if self.api_key:
            self.client = anthropic.Anthropic(
                api_key=self.api_key,
                http_client=_build_http_client(),
            )
        self._credential_clients: dict[str, anthropic.Anthropic] = {}

    def _client_for(self, credential: Optional[str]) -> anthropic.Anthropic:
        """Return the SDK client for a per-request credential (or the default)."""
        if not credential or credential == self.api_key:
            if self.client is None:
                raise LLMClientError(MISSING_KEY_MESSAGE)
            return self.client
        if credential not in self._credential_clients:
            self._credential_clients[credential] = anthropic.Anthropic(
                api_key=credential,
                http_client=_build_http_client(),
            )
        return self._credential_clients[credential]

    def generate_section(self, request: GenerationRequest) -> BilingualText:
        """
        Generate copy for one section.

        Args:
            request: Prompt plus optional caller credential.

        Returns:
            English copy and Chinese translation.

        Raises:
            LLMClientError: If the prompt is empty, the API call fails or
                the response is not the expected JSON object.
        """
        if not request.prompt.strip():
            raise LLMClientError("Cannot generate from an empty prompt")

        client = self._client_for(request.credential)
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_INSTRUCTION,
                messages=[{"role": "user", "content": request.prompt}],
            )
            text = response.content[0].text
        except Exception as e:
            raise LLMClientError(f"LLM API call failed: {e}")

        return parse_bilingual_response(text)

    def __call__(self, request: GenerationRequest) -> BilingualText:
        return self.generate_section(request)


def parse_bilingual_response(response: str) -> BilingualText:
    """
    Parse the model's JSON reply into BilingualText.

    Accepts a bare JSON object, a fenced ```json block, or a JSON object
    surrounded by stray prose.

    Raises:
        LLMClientError: If no valid object with both keys is found.
    """
    if not response or not response.strip():
        raise LLMClientError("Empty response from LLM")

    candidate = response.strip()
    fenced = _FENCED_JSON_RE.search(candidate)
    if fenced:
        candidate = fenced.group(1)
    elif not candidate.startswith("{"):
        start, end = candidate.find("{"), candidate.rfind("}")
        if start == -1 or end <= start:
            raise LLMClientError("No JSON object found in LLM response")
        candidate = candidate[start:end + 1]

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise LLMClientError(f"Invalid JSON in LLM response: {e}")

    if not isinstance(data, dict):
        raise LLMClientError("LLM response JSON is not an object")

    missing = [key for key in ("english", "chinese") if key not in data]
    if missing:
        raise LLMClientError(f"LLM response missing key(s): {', '.join(missing)}")

    return BilingualText(
        english=str(data["english"]).strip(),
        chinese=str(data["chinese"]).strip(),
    )


def create_llm_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    max_tokens: int = 4096,
    require_key: bool = True,
) -> LLMClient:
    """
    Factory function to create an LLM client.

    Args:
        api_key: Optional API key. If None, uses environment variable.
        model: Model to use.
        max_tokens: Maximum tokens per response.
        require_key: Fail immediately when no default key is available.

    Returns:
        Configured LLMClient instance.
    """
    return LLMClient(api_key=api_key, model=model, max_tokens=max_tokens, require_key=require_key)
