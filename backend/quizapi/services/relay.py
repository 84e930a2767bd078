import logging
from typing import Any, Optional

import requests

from quizapi.errors import ConfigurationError, InvalidInput, UpstreamError


class PromptRelay:
    """Forward a prompt to Gemini ``generateContent`` and hand back its JSON.

    The response body is returned as-is; tool calls or candidates in it are
    not interpreted here.
    """

    def __init__(self, api_key: Optional[str], api_base: str, model: str, session=None, logger=None):
        self.api_key = api_key
        self.api_base = api_base.rstrip('/')
        self.model = model
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    @staticmethod
    def build_payload(prompt: str, tools: Any = None) -> dict:
        payload = {'contents': [{'parts': [{'text': prompt}]}]}
        if isinstance(tools, list) and tools:
            payload['tools'] = tools
        return payload

    def _redact(self, text: str) -> str:
        return text.replace(self.api_key, '***') if self.api_key else text

    def relay(self, prompt: Any, tools: Any = None) -> Any:
        if not self.api_key:
            self.logger.error("[relay-config] GEMINI_API_KEY is not set")
            raise ConfigurationError('Missing GEMINI_API_KEY in environment variables')
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidInput('Missing prompt in request body')

        payload = self.build_payload(prompt, tools)
        try:
            response = self.session.post(
                self.endpoint,
                params={'key': self.api_key},
                json=payload,
                headers={'Content-Type': 'application/json'},
            )
        except requests.exceptions.RequestException as exc:
            self.logger.error(f"[relay-transport] model={self.model} error={exc.__class__.__name__}: {self._redact(str(exc))}")
            raise UpstreamError('Failed to fetch from Gemini') from exc

        if not response.ok:
            self.logger.error(
                f"[relay-upstream] model={self.model} status={response.status_code} reason={response.reason} body={response.text[:2000]}"
            )
            raise UpstreamError('Failed to fetch from Gemini')

        try:
            return response.json()
        except ValueError as exc:
            self.logger.error(f"[relay-decode] model={self.model} status={response.status_code} body={response.text[:2000]}")
            raise UpstreamError('Failed to fetch from Gemini') from exc
