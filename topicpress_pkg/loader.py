import os
import re
import logging
from datetime import datetime, date, timezone
from typing import NamedTuple, Optional, Tuple

import yaml

from .text import slugify, extract_hashtags, make_summary

DEFAULT_TOPIC = 'general'
DEFAULT_SLUG = 'untitled'

FRONT_MATTER_RE = re.compile(
    r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)',
    re.DOTALL | re.MULTILINE,
)

DATE_FORMATS = ['%Y-%m-%d', '%b %d, %Y', '%B %d, %Y', '%Y/%m/%d']


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible timestamps such as 2023-02-30 as strings."""


def construct_timestamp(loader, node):
    try:
        return loader.construct_yaml_timestamp(node)
    except ValueError:
        return loader.construct_scalar(node)


FrontMatterLoader.add_constructor('tag:yaml.org,2002:timestamp', construct_timestamp)


class Document(NamedTuple):
    """A loaded source document with everything derived from it."""
    title: str
    slug: str
    topic_label: str
    topic_slug: str
    tags: Tuple[str, ...]
    date: str
    summary: str
    body: str
    body_html: str
    url: str
    source_path: str

    @property
    def output_path(self):
        return os.path.join(self.topic_slug, self.slug, 'index.html')


def split_front_matter(text):
    """
    Split a markdown file into (metadata, body).

    A missing front matter block gives empty metadata. A block that is not
    valid YAML, or not a mapping, also gives empty metadata.
    """
    if text.startswith('\ufeff'):
        text = text[1:]

    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    body = text[match.end():]
    try:
        metadata = yaml.load(match.group(1), Loader=FrontMatterLoader)
    except yaml.YAMLError as e:
        logging.getLogger('TopicPress').warning(f"Invalid YAML front matter: {e}")
        return {}, body

    if not isinstance(metadata, dict):
        return {}, body
    return metadata, body


def parse_tags(value):
    """Normalize a declared `tags` value to a list of lowercase tags."""
    if not value:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(tag).lower() for tag in value if tag is not None]
    return [tag.strip().lower() for tag in str(value).split(',') if tag.strip()]


def _to_utc(dt):
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc)
    return dt


def parse_date(value, fallback=None):
    """
    Parse a front matter date into an ISO calendar date string.

    `fallback` is a POSIX timestamp used when no date was declared.
    Anything that can't be read as a date gives an empty string.
    """
    if value is None or value == '':
        if fallback is None:
            return ''
        return datetime.fromtimestamp(fallback, tz=timezone.utc).date().isoformat()

    if isinstance(value, datetime):
        return _to_utc(value).date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return ''

    text = value.strip()
    try:
        return _to_utc(datetime.fromisoformat(text.replace('Z', '+00:00'))).date().isoformat()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    return ''


class DocumentLoader:
    """Reads markdown sources and turns them into Documents."""

    def __init__(self, base_url='', markdown_renderer=None):
        self.base_url = base_url
        self.markdown_renderer = markdown_renderer
        self.logger = logging.getLogger('TopicPress')

    def load(self, filepath):
        """Load one source file. Read errors propagate to the caller."""
        with open(filepath, 'r', encoding='utf-8') as f:
            raw = f.read()
        mtime = os.stat(filepath).st_mtime
        stem = os.path.splitext(os.path.basename(filepath))[0]
        return self.load_text(raw, stem, mtime=mtime, source_path=filepath)

    def load_text(self, raw, stem, mtime: Optional[float] = None, source_path=''):
        metadata, body = split_front_matter(raw)

        tags = {}
        for tag in parse_tags(metadata.get('tags')) + extract_hashtags(body):
            tags.setdefault(tag, None)

        topic_label = str(metadata.get('topic') or next(iter(tags), None) or DEFAULT_TOPIC).lower()
        tags.setdefault(topic_label, None)

        slug = slugify(metadata.get('slug') or stem)
        if not slug:
            self.logger.warning(f"No usable slug for {source_path or stem}, using '{DEFAULT_SLUG}'")
            slug = DEFAULT_SLUG
        topic_slug = slugify(topic_label) or DEFAULT_TOPIC

        doc_date = parse_date(metadata.get('date'), fallback=mtime)
        if metadata.get('date') and not doc_date:
            self.logger.warning(f"Unreadable date {metadata.get('date')!r} in {source_path or stem}")

        summary = metadata.get('summary')
        summary = str(summary) if summary else make_summary(body)

        title = metadata.get('title')
        title = str(title) if title else slug.replace('-', ' ')

        body_html = self.markdown_renderer(body) if self.markdown_renderer else ''

        return Document(
            title=title,
            slug=slug,
            topic_label=topic_label,
            topic_slug=topic_slug,
            tags=tuple(sorted(tags)),
            date=doc_date,
            summary=summary,
            body=body,
            body_html=body_html,
            url=f"{self.base_url}/{topic_slug}/{slug}/",
            source_path=source_path,
        )
