"""
Best-effort projection of wikitext to plain text.

Each rule is a plain `str -> str` function. WIKITEXT_RULES applies them in a
fixed order. None of the rules raise on malformed markup; unmatched brackets
simply survive as stray punctuation.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence

COMMENT_PATTERN = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
REF_PATTERN = re.compile(r"<ref\b[^>]*/>|<ref\b[^>]*>.*?</ref\s*>", re.DOTALL | re.IGNORECASE)
TEMPLATE_PATTERN = re.compile(r"\{\{[^{}]*\}\}")
TABLE_PATTERN = re.compile(r"\{\|.*?\|\}", re.DOTALL)
FILE_LINK_PATTERN = re.compile(
    r"\[\[\s*(?:File|Image|ملف|صورة)\s*:(?:[^\[\]]|\[\[[^\[\]]*\]\])*\]\]",
    re.IGNORECASE,
)
CATEGORY_LINK_PATTERN = re.compile(r"\[\[\s*(?:Category|تصنيف)\s*:[^\[\]]*\]\]", re.IGNORECASE)
# [[en:Title]], [[fr:Titre]], [[zh-yue:...]]
INTERLANGUAGE_LINK_PATTERN = re.compile(r"\[\[\s*[a-z]{2,3}(?:-[a-z]+)*\s*:[^\[\]]*\]\]")
INTERNAL_LINK_PATTERN = re.compile(r"\[\[(?:[^|\[\]]*\|)?([^\[\]]*)\]\]")
EXTERNAL_LINK_PATTERN = re.compile(r"\[(?:https?:)?//[^\s\]]+\s*([^\]]*)\]")
EMPHASIS_PATTERN = re.compile(r"'{2,}")
HEADING_PATTERN = re.compile(r"^[ \t]*=+[ \t]*(.*?)[ \t]*=+[ \t]*$", re.MULTILINE)
TAG_PATTERN = re.compile(r"</?[a-zA-Z][^>]*(?:>|$)")

# Bound on repeated passes for nested constructs
MAX_PASSES = 10


def _sub_until_stable(pattern: re.Pattern, repl: str, text: str) -> str:
    for _ in range(MAX_PASSES):
        text, count = pattern.subn(repl, text)
        if not count:
            break
    return text


def strip_comments(text: str) -> str:
    return COMMENT_PATTERN.sub("", text)


def strip_references(text: str) -> str:
    return REF_PATTERN.sub("", text)


def strip_templates(text: str) -> str:
    """Remove {{...}} invocations, innermost first so nesting unwinds."""
    return _sub_until_stable(TEMPLATE_PATTERN, "", text)


def strip_tables(text: str) -> str:
    return TABLE_PATTERN.sub("", text)


def strip_file_links(text: str) -> str:
    return _sub_until_stable(FILE_LINK_PATTERN, "", text)


def strip_category_links(text: str) -> str:
    """[[Category:X]], [[تصنيف:X]] and [[en:X]] links are dropped."""
    text = CATEGORY_LINK_PATTERN.sub("", text)
    return INTERLANGUAGE_LINK_PATTERN.sub("", text)


def resolve_internal_links(text: str) -> str:
    """[[target|label]] -> label, [[target]] -> target."""
    return _sub_until_stable(INTERNAL_LINK_PATTERN, r"\1", text)


def resolve_external_links(text: str) -> str:
    """[url label] -> label; a bare [url] disappears."""
    return EXTERNAL_LINK_PATTERN.sub(r"\1", text)


def strip_emphasis(text: str) -> str:
    return EMPHASIS_PATTERN.sub("", text)


def collapse_headings(text: str) -> str:
    """== Heading == -> Heading"""
    return HEADING_PATTERN.sub(r"\1", text)


def strip_tags(text: str) -> str:
    return TAG_PATTERN.sub("", text)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of spaces per line and keep at most one blank line between paragraphs."""
    lines = [re.sub(r"[ \t\u00a0]+", " ", line).strip() for line in text.splitlines()]
    text = "\n".join(lines)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


WIKITEXT_RULES: tuple[Callable[[str], str], ...] = (
    strip_comments,
    strip_references,
    strip_templates,
    strip_tables,
    strip_file_links,
    strip_category_links,
    resolve_internal_links,
    resolve_external_links,
    strip_emphasis,
    collapse_headings,
    strip_tags,
    collapse_whitespace,
)


def wikitext_to_plain(
    wikitext: Optional[str],
    rules: Sequence[Callable[[str], str]] = WIKITEXT_RULES,
) -> Optional[str]:
    """Apply the rewrite rules in order. Returns None for empty input or output."""
    if not wikitext:
        return None
    text = wikitext
    for rule in rules:
        text = rule(text)
    return text or None
