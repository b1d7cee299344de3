"""
Narrative generation service: cached OpenAI-compatible clients, an ordered
list of (base_url, model) candidates and a closed set of response shapes.
"""
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from dotenv import load_dotenv
from openai import OpenAI

from text_utils import PROMPT_CHAR_LIMIT, strip_reasoning_blocks, truncate_prompt

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

PERF_LOG = os.getenv("PERF_LOG") == "1"

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODELS = "deepseek-chat,deepseek-reasoner"
DEFAULT_TIMEOUT = 60.0
MAX_TOKENS = 2000

SYSTEM_MESSAGE = "你是中国八字命理专家。你必须用简体中文回答所有问题。不要用英文。"
USER_PREFIX = "请用中文回答："


class NarrativeServiceError(RuntimeError):
    """Raised when every narrative candidate failed."""


def log_perf(message: str) -> None:
    if PERF_LOG:
        print(message, flush=True)


@lru_cache(maxsize=8)
def get_llm_client(api_key: str, base_url: str) -> OpenAI:
    """Return a cached OpenAI client for a given key/base URL pair."""
    return OpenAI(api_key=api_key, base_url=base_url)


# Model-specific temperature settings
MODEL_TEMPERATURES = {
    # DeepSeek
    "deepseek-chat": 0.7,
    "deepseek-reasoner": 0.6,
    # OpenAI
    "gpt-4o": 0.7,
    "gpt-4o-mini": 0.7,
    # Gemini (OpenAI-compatible endpoint)
    "gemini-2.0-flash-exp": 0.8,
    "gemini-1.5-flash": 0.8,
    # MiniMax / Moonshot / GLM
    "abab6.5s-chat": 0.7,
    "moonshot-v1-8k": 0.7,
    "glm-4-flash": 0.8,
}


def get_optimal_temperature(model: str) -> float:
    """Get the temperature for a given model, 0.7 when unknown."""
    return MODEL_TEMPERATURES.get(model, 0.7)


def is_safe_input(user_text: str) -> bool:
    """
    检查用户问题是否安全，拦截 Prompt 注入。

    Returns:
        True 如果输入安全，False 如果命中敏感词
    """
    blocklist = [
        "system instruction", "system prompt", "ignore all instructions",
        "repeat the text above", "your prompt", "ignore previous",
        "disregard all", "forget everything", "override", "bypass",
        "系统指令", "提示词", "你的设定", "忽略之前的", "重复上面的",
        "忽略以上", "无视规则", "跳过限制", "绕过", "告诉我你的",
        "输出你的", "显示你的", "打印你的",
    ]
    lower_text = (user_text or "").lower()
    return not any(word in lower_text for word in blocklist)


# --- Response shapes ---

@dataclass(frozen=True)
class TextBlockArray:
    """Anthropic-style `content: [{"type": "text", "text": ...}, ...]`."""
    blocks: Tuple[str, ...]

    @property
    def text(self) -> str:
        return self.blocks[0]


@dataclass(frozen=True)
class ChatCompletionChoice:
    """OpenAI-style `choices[0].message.content` string."""
    content: str

    @property
    def text(self) -> str:
        return self.content


@dataclass(frozen=True)
class RawText:
    """A bare string reply (`content` string or top-level `text`)."""
    value: str

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class ErrorEnvelope:
    """Provider error (`base_resp.status_msg`, `error`) or an unknown shape."""
    message: str


NarrativeResponse = Union[TextBlockArray, ChatCompletionChoice, RawText, ErrorEnvelope]


def _text_blocks(items: Sequence[Any]) -> Tuple[str, ...]:
    # thinking/reflection blocks are skipped, only type == "text" counts
    return tuple(
        item["text"] for item in items
        if isinstance(item, dict) and item.get("type") == "text" and item.get("text")
    )


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


def parse_narrative_response(payload: Any) -> NarrativeResponse:
    """
    Match a decoded provider payload against the known response shapes.
    Checked in order: content blocks, top-level text, chat completion choice,
    MiniMax base_resp error, generic error.
    """
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump()
    if not isinstance(payload, dict):
        return ErrorEnvelope(f"unexpected payload type: {type(payload).__name__}")

    content = payload.get("content")
    if isinstance(content, str) and content:
        # content may be stringified JSON of a block list
        try:
            decoded = json.loads(content)
        except ValueError:
            return RawText(content)
        if not isinstance(decoded, list):
            return RawText(content)
        content = decoded
    if isinstance(content, list):
        blocks = _text_blocks(content)
        if blocks:
            return TextBlockArray(blocks)

    text = payload.get("text")
    if isinstance(text, str) and text:
        return RawText(text)

    choices = payload.get("choices") or []
    if choices:
        message = (choices[0] or {}).get("message") or {}
        message_content = message.get("content")
        if isinstance(message_content, list):
            blocks = _text_blocks(message_content)
            if blocks:
                return TextBlockArray(blocks)
        elif isinstance(message_content, str) and message_content:
            return ChatCompletionChoice(message_content)

    base_resp = payload.get("base_resp") or {}
    if base_resp.get("status_msg") and base_resp.get("status_code") != 0:
        return ErrorEnvelope(f"{base_resp['status_msg']} ({base_resp.get('status_code')})")

    if payload.get("error"):
        return ErrorEnvelope(_error_message(payload["error"]))

    return ErrorEnvelope("unrecognized response shape")


# --- Candidates ---

@dataclass(frozen=True)
class NarrativeCandidate:
    base_url: str
    model: str


def load_candidates_from_env() -> List[NarrativeCandidate]:
    """Build the ordered candidate list from LLM_* environment variables."""
    base_url = os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL
    models = [m.strip() for m in (os.getenv("LLM_MODELS") or DEFAULT_MODELS).split(",") if m.strip()]
    candidates = [NarrativeCandidate(base_url, model) for model in models]

    fallback_url = os.getenv("LLM_FALLBACK_BASE_URL")
    fallback_model = os.getenv("LLM_FALLBACK_MODEL")
    if fallback_url and fallback_model:
        candidates.append(NarrativeCandidate(fallback_url, fallback_model))
    return candidates


class NarrativeService:
    """
    Tries each candidate in order and returns the first usable reply.
    """

    def __init__(
        self,
        api_key: Optional[str],
        candidates: Sequence[NarrativeCandidate],
        client_factory: Callable[[str, str], Any] = get_llm_client,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.candidates = list(candidates)
        self.client_factory = client_factory
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.candidates)

    def _request(self, candidate: NarrativeCandidate, prompt: str) -> Any:
        client = self.client_factory(self.api_key, candidate.base_url)
        return client.chat.completions.create(
            model=candidate.model,
            messages=[
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": USER_PREFIX + prompt},
            ],
            temperature=get_optimal_temperature(candidate.model),
            max_tokens=MAX_TOKENS,
            timeout=self.timeout,
        )

    def generate(self, prompt: str) -> str:
        """
        Generate narrative text for a prompt (truncated to 600 characters).

        Raises:
            NarrativeServiceError: no API key, or every candidate failed
        """
        if not self.api_key:
            raise NarrativeServiceError("LLM API key not configured")
        if not self.candidates:
            raise NarrativeServiceError("No narrative candidates configured")

        prompt = truncate_prompt(prompt, PROMPT_CHAR_LIMIT)
        last_error = ""
        for candidate in self.candidates:
            start_time = time.monotonic()
            try:
                response = parse_narrative_response(self._request(candidate, prompt))
            except Exception as e:
                last_error = str(e)
                print(f"WARNING: narrative candidate {candidate.model} @ {candidate.base_url} failed: {e}")
                continue

            elapsed_ms = int((time.monotonic() - start_time) * 1000)
            if isinstance(response, ErrorEnvelope):
                last_error = response.message
                print(f"WARNING: narrative candidate {candidate.model} returned error: {last_error}")
                continue

            text = strip_reasoning_blocks(response.text)
            if not text:
                last_error = "empty reply after removing reasoning blocks"
                continue

            log_perf(f"[PERF] narrative model={candidate.model} shape={type(response).__name__} total_ms={elapsed_ms}")
            return text

        raise NarrativeServiceError(f"All API attempts failed. Last error: {last_error}")


def get_narrative_service() -> NarrativeService:
    """Service configured from the environment (.env is loaded at import)."""
    api_key = os.getenv("LLM_API_KEY") or os.getenv("DEEPSEEK_API_KEY")
    timeout = float(os.getenv("LLM_TIMEOUT") or DEFAULT_TIMEOUT)
    return NarrativeService(api_key, load_candidates_from_env(), timeout=timeout)
