"""
TopicPress - a static site generator that organizes writing by topic.

TopicPress reads markdown files with YAML front matter, collects tags from
the front matter and from inline #hashtags, and renders Jinja2 templates into
one page per article, one page per topic, a topics overview and a home page.
"""

__version__ = "1.0.0"

from .core import TopicPress, BuildError
from .loader import Document, DocumentLoader
from .index import SiteIndex, TopicEntry, build_index

__all__ = ['TopicPress', 'BuildError', 'Document', 'DocumentLoader',
           'SiteIndex', 'TopicEntry', 'build_index']
