"""
Text helpers for TopicPress: slugs, hashtag scanning and summaries.
"""

import re
import html

QUOTES_RE = re.compile(r'[\'"]')
NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')

FENCED_BACKTICK_RE = re.compile(r'```[\s\S]*?```')
FENCED_TILDE_RE = re.compile(r'~~~[\s\S]*?~~~')
INLINE_CODE_RE = re.compile(r'`[^`]*`')

# '#' must open the text or follow a character that can't be part of a word.
HASHTAG_RE = re.compile(r'(?:^|[^A-Za-z0-9_])#([A-Za-z0-9][A-Za-z0-9_-]*)')

IMAGE_RE = re.compile(r'!\[.*?\]\(.*?\)')
LINK_RE = re.compile(r'\[([^\]]+)\]\([^)]+\)')
DECORATION_RE = re.compile(r'[#>*_~-]')
WHITESPACE_RE = re.compile(r'\s+')

SUMMARY_LENGTH = 180


def slugify(value):
    """Turn arbitrary text into a lowercase, hyphen-separated URL token.

    Returns an empty string for degenerate input; callers pick the default.
    """
    text = str(value or '').strip().lower()
    text = QUOTES_RE.sub('', text)
    text = NON_ALNUM_RE.sub('-', text)
    return text.strip('-')


def strip_code_blocks(markdown_text):
    """Remove fenced blocks and inline code spans from markdown."""
    text = FENCED_BACKTICK_RE.sub('', markdown_text)
    text = FENCED_TILDE_RE.sub('', text)
    return INLINE_CODE_RE.sub('', text)


def extract_hashtags(markdown_text):
    """
    Find inline #tags in markdown, ignoring anything inside code.

    The result holds each lowercased tag once, in the order it was first seen.
    """
    text = strip_code_blocks(markdown_text or '')
    tags = {}
    for match in HASHTAG_RE.finditer(text):
        tags.setdefault(match.group(1).lower(), None)
    return list(tags)


def strip_markdown(markdown_text):
    """Reduce markdown to plain prose on a single line."""
    text = strip_code_blocks(markdown_text or '')
    text = IMAGE_RE.sub('', text)
    text = LINK_RE.sub(r'\1', text)
    text = DECORATION_RE.sub('', text)
    return WHITESPACE_RE.sub(' ', text).strip()


def make_summary(markdown_text, limit=SUMMARY_LENGTH):
    return strip_markdown(markdown_text)[:limit].strip()


def escape_html(value):
    """Escape & < > " ' for embedding metadata in markup."""
    if value is None:
        return ''
    return html.escape(str(value), quote=True)
