import os
import logging

import mistune
from jinja2 import Environment, FileSystemLoader

from .text import escape_html, slugify

PACKAGE_TEMPLATES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')

ARTICLE_TEMPLATE = 'article.html'
TOPIC_TEMPLATE = 'topic.html'
INDEX_TEMPLATE = 'index.html'

LATEST_COUNT = 10


def resolve_templates_dir(templates_dir):
    """Fall back to the bundled templates when a relative directory is missing."""
    if not os.path.isabs(templates_dir) and not os.path.exists(templates_dir):
        return PACKAGE_TEMPLATES
    return templates_dir


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    class CustomRenderer(mistune.HTMLRenderer):
        def __init__(self):
            super().__init__(escape=False)

        def block_code(self, code, info=None):
            escaped_code = mistune.escape(code)
            return '<pre><code>{}</code></pre>\n'.format(escaped_code)

    return mistune.create_markdown(
        renderer=CustomRenderer(),
        plugins=['table', 'task_lists', 'strikethrough']
    )


class PageRenderer:
    """
    Turns documents and topic entries into HTML pages.

    Display strings taken from metadata are escaped here before they reach a
    template. Rendered markdown is passed through untouched.
    """

    def __init__(self, templates_dir, site_title='Articles', base_url=''):
        self.templates_dir = resolve_templates_dir(templates_dir)
        self.site_title = site_title
        self.base_url = base_url
        self.logger = logging.getLogger('TopicPress')
        self.env = Environment(loader=FileSystemLoader(self.templates_dir))
        self.markdown_parser = create_markdown_parser()

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def with_base(self, pathname):
        if not pathname.startswith('/'):
            return f"{self.base_url}/{pathname}"
        return f"{self.base_url}{pathname}"

    def topic_url(self, tag):
        return self.with_base(f"/topics/{slugify(tag)}/")

    def render_template(self, template_name, **context):
        template = self.env.get_template(template_name)
        return template.render(**context)

    def tags_html(self, tags):
        return ' '.join(
            f'<a class="tag" href="{escape_html(self.topic_url(tag))}">#{escape_html(tag)}</a>'
            for tag in tags
        )

    def article_list_html(self, documents):
        return '\n'.join(
            f"""<li>
  <a href="{escape_html(doc.url)}">{escape_html(doc.title)}</a>
  <span class="meta">{escape_html(doc.date)}</span>
  <p class="summary">{escape_html(doc.summary)}</p>
</li>"""
            for doc in documents
        )

    def topic_list_html(self, topics):
        return '\n'.join(
            f"""<li>
  <a href="{escape_html(self.with_base(f'/topics/{entry.slug}/'))}">{escape_html(entry.label)}</a>
  <span class="meta">{len(entry.documents)} posts</span>
</li>"""
            for entry in topics
        )

    def render_article(self, doc):
        return self.render_template(
            ARTICLE_TEMPLATE,
            siteTitle=escape_html(self.site_title),
            title=escape_html(doc.title),
            date=escape_html(doc.date),
            topicLabel=escape_html(doc.topic_label),
            topicSlug=escape_html(doc.topic_slug),
            tags=self.tags_html(doc.tags),
            summary=escape_html(doc.summary),
            url=escape_html(doc.url),
            content=doc.body_html,
            baseUrl=escape_html(self.base_url),
        )

    def render_topic(self, entry):
        return self.render_template(
            TOPIC_TEMPLATE,
            siteTitle=escape_html(self.site_title),
            topicLabel=escape_html(entry.label),
            topicSlug=entry.slug,
            topicCount=str(len(entry.documents)),
            articles=self.article_list_html(entry.documents),
            baseUrl=escape_html(self.base_url),
        )

    def render_topics_overview(self, topics):
        return self.render_template(
            TOPIC_TEMPLATE,
            siteTitle=escape_html(self.site_title),
            topicLabel='Topics',
            topicCount=str(len(topics)),
            articles=self.topic_list_html(topics),
            baseUrl=escape_html(self.base_url),
        )

    def render_home(self, site_index):
        return self.render_template(
            INDEX_TEMPLATE,
            siteTitle=escape_html(self.site_title),
            latest=self.article_list_html(site_index.listing[:LATEST_COUNT]),
            topics=self.topic_list_html(site_index.topics),
            articleCount=str(len(site_index.listing)),
            topicCount=str(len(site_index.topics)),
            baseUrl=escape_html(self.base_url),
        )
