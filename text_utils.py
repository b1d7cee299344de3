"""
Text helpers for narrative prompts and replies.
"""
from __future__ import annotations

import re

PROMPT_CHAR_LIMIT = 600

_THINK_BLOCK_RE = re.compile(r'<think>.*?</think>', re.DOTALL | re.IGNORECASE)
_UNCLOSED_THINK_RE = re.compile(r'<think>.*\Z', re.DOTALL | re.IGNORECASE)

_MD_HEADER_RE = re.compile(r'^\s*#{1,6}\s*(.+?)\s*$', re.MULTILINE)
_MD_BOLD_RE = re.compile(r'\*\*(.+?)\*\*|__(.+?)__')
_MD_ITALIC_RE = re.compile(r'(?<![\w*])\*([^*\n]+?)\*(?![\w*])')
_MD_BULLET_RE = re.compile(r'^\s*[-*•]\s+', re.MULTILINE)
_MD_NUMBERED_RE = re.compile(r'^\s*(\d+)\.\s+', re.MULTILINE)
_EXTRA_NEWLINES_RE = re.compile(r'\n{3,}')


def truncate_prompt(text: str, limit: int = PROMPT_CHAR_LIMIT) -> str:
    """Keep the first `limit` characters (not bytes) of a prompt."""
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    return text[:limit]


def strip_reasoning_blocks(text: str) -> str:
    """
    Remove <think>...</think> sections emitted by reasoning models.
    An unclosed <think> swallows the rest of the reply.
    """
    if not text:
        return text
    text = _THINK_BLOCK_RE.sub('', text)
    text = _UNCLOSED_THINK_RE.sub('', text)
    return _EXTRA_NEWLINES_RE.sub('\n\n', text).strip()


def clean_markdown_for_display(text: str) -> str:
    """
    Convert the markdown of an analysis reply into light HTML for the web client.
    Handles headers, bold, italic, bullets, numbered lists and line breaks.
    """
    if not text:
        return text

    text = _MD_HEADER_RE.sub(r'<div class="section-title">\1</div>', text)
    text = _MD_BOLD_RE.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", text)
    text = _MD_ITALIC_RE.sub(r'<em>\1</em>', text)
    text = _MD_BULLET_RE.sub('<span class="bullet">▸</span> ', text)
    text = _MD_NUMBERED_RE.sub(r'<span class="bullet">\1.</span> ', text)

    text = _EXTRA_NEWLINES_RE.sub('\n\n', text)
    return text.replace('\n\n', '<br><br>').replace('\n', '<br>')
