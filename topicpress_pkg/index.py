"""
Topic index: groups documents under every tag they carry.
"""

from typing import List, NamedTuple

from .loader import Document, DEFAULT_TOPIC
from .text import slugify


class TopicEntry(NamedTuple):
    slug: str
    label: str
    documents: List[Document]


class SiteIndex(NamedTuple):
    topics: List[TopicEntry]
    listing: List[Document]


def sort_by_date(documents):
    """
    Newest first. Undated documents go last; ties keep their input order.

    ISO dates compare correctly as strings and '' sorts below any date.
    """
    return sorted(documents, key=lambda doc: doc.date or '', reverse=True)


def build_index(documents):
    """
    Build the topic index and the global listing for a set of documents.

    Topics are keyed by tag slug and labelled with the first tag spelling
    seen for that slug. The returned topics are in slug order.
    """
    tag_map = {}

    for doc in documents:
        for tag in doc.tags:
            tag_slug = slugify(tag) or DEFAULT_TOPIC
            if tag_slug not in tag_map:
                tag_map[tag_slug] = {'label': tag, 'documents': []}
            entry_docs = tag_map[tag_slug]['documents']
            # 'web dev' and 'web-dev' share a slug; list the document once, so
            # topic counts are per document rather than per tag spelling
            if entry_docs and entry_docs[-1] is doc:
                continue
            entry_docs.append(doc)

    topics = [
        TopicEntry(slug=tag_slug, label=info['label'], documents=sort_by_date(info['documents']))
        for tag_slug, info in sorted(tag_map.items())
    ]
    return SiteIndex(topics=topics, listing=sort_by_date(documents))
