"""External classifier contract and its OpenAI implementation.

The categorization engine only depends on ``Classifier.classify``: it sends
one prompt and gets back a ``ClassifierReply`` (or None when the classifier
is not configured). Transport problems and unusable replies are raised as
``ClassifierError`` subclasses for the engine to absorb.
"""

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import openai
from openai import OpenAI

from fintrack.config import DEFAULT_CLASSIFIER_TIMEOUT, DEFAULT_OPENAI_MODEL
from fintrack.domain.errors import (
    ClassifierMalformedReplyError,
    ClassifierTimeoutError,
    ClassifierUnavailableError,
)
from fintrack.logging_setup import get_logger

logger = get_logger("fintrack.classifier")

DEFAULT_REPLY_CONFIDENCE = 0.5
DEFAULT_REPLY_REASONING = "Classificação automática"

_FENCE_OPEN_RE = re.compile(r"```(?:json)?\s*")
_FENCE_CLOSE_RE = re.compile(r"```\s*$")


@dataclass(frozen=True)
class ClassifierPrompt:
    """System instructions plus user content for one classification."""

    system: str
    user: str


@dataclass(frozen=True)
class ClassifierReply:
    """Decoded classifier answer. The category is a name, not an id."""

    category_name: str
    confidence: float
    reasoning: str


def parse_classifier_reply(text: str) -> ClassifierReply:
    """Decode the JSON reply, tolerating Markdown code fences.

    Raises:
        ClassifierMalformedReplyError: If the text is not a JSON object with a
            ``category_name`` string or the confidence is not a number
    """
    cleaned = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", text or "")).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ClassifierMalformedReplyError(f"Classifier reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ClassifierMalformedReplyError("Classifier reply is not a JSON object")

    category_name = data.get("category_name")
    if not isinstance(category_name, str) or not category_name.strip():
        raise ClassifierMalformedReplyError("Classifier reply has no category_name")

    confidence: Any = data.get("confidence", DEFAULT_REPLY_CONFIDENCE)
    if confidence is None:
        confidence = DEFAULT_REPLY_CONFIDENCE
    if isinstance(confidence, bool):
        raise ClassifierMalformedReplyError(f"Invalid confidence: {confidence!r}")
    try:
        confidence = float(confidence)
    except (TypeError, ValueError) as e:
        raise ClassifierMalformedReplyError(f"Invalid confidence: {confidence!r}") from e

    reasoning = data.get("reasoning") or DEFAULT_REPLY_REASONING
    return ClassifierReply(
        category_name=category_name.strip(),
        confidence=min(max(confidence, 0.0), 1.0),
        reasoning=str(reasoning),
    )


class Classifier(ABC):
    """Something that can suggest a category for a transaction prompt."""

    @abstractmethod
    def classify(self, prompt: ClassifierPrompt) -> Optional[ClassifierReply]:
        """Classify one prompt.

        Returns:
            The reply, or None when the classifier is not available at all

        Raises:
            ClassifierError: On timeout, transport failure or a malformed reply
        """
        pass


class OpenAIClassifier(Classifier):
    """Classifier backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_OPENAI_MODEL,
        timeout: float = DEFAULT_CLASSIFIER_TIMEOUT,
        client: Optional[Any] = None,
    ):
        """Initialize the classifier.

        Args:
            api_key: OpenAI API key. Without a key (and without an injected
                client) the classifier is unavailable and ``classify`` returns None.
            model: Chat model name
            timeout: Per-request timeout in seconds
            client: Pre-built client, used by tests to inject a stub
        """
        self.model = model
        self.timeout = timeout
        if client is None and api_key:
            # One attempt per categorization.
            client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._client = client

    @property
    def available(self) -> bool:
        return self._client is not None

    def classify(self, prompt: ClassifierPrompt) -> Optional[ClassifierReply]:
        if self._client is None:
            return None

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            raise ClassifierTimeoutError(f"Classifier timed out after {self.timeout}s") from e
        except openai.OpenAIError as e:
            raise ClassifierUnavailableError(f"Classifier request failed: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ClassifierMalformedReplyError("Unexpected chat completion shape") from e

        logger.debug("Classifier reply: %s", text)
        return parse_classifier_reply(text)
