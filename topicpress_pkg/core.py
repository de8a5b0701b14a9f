import os
import logging
from datetime import datetime

from jinja2 import TemplateError

from .loader import DocumentLoader
from .index import build_index
from .render import PageRenderer
from .writer import SiteWriter
from .settings import normalize_base_url

MARKDOWN_EXTENSIONS = ('.md', '.markdown')


class BuildError(Exception):
    """A fatal problem that stops the build, such as an unreadable source."""


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Site build completed in",
            "Total articles generated:",
            "Total topics generated:",
            "Building topic pages",
            "Building index page",
            "Copied",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def get_markdown_files(directory):
    """Find markdown files anywhere under directory, in sorted path order."""
    markdown_files = []
    if not os.path.isdir(directory):
        return markdown_files
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for file in sorted(files):
            if file.lower().endswith(MARKDOWN_EXTENSIONS):
                markdown_files.append(os.path.join(root, file))
    return markdown_files


class TopicPress:
    """
    Builds a topic-organized static site from a directory of markdown files.

    Every setting is passed in explicitly; a build reads all sources, indexes
    them in memory and then replaces the whole output directory.
    """

    def __init__(self, content_dir='content', templates_dir='templates', output_dir='dist',
                 static_dir='static', site_title='Articles', base_url='', log_dir=None,
                 verbose=False):
        self.content_dir = content_dir
        self.output_dir = output_dir
        self.static_dir = static_dir
        self.site_title = site_title
        self.base_url = normalize_base_url(base_url)
        self.articles_generated = 0
        self.topics_generated = 0

        self.setup_logging(log_dir, verbose)

        self.renderer = PageRenderer(templates_dir, site_title=self.site_title, base_url=self.base_url)
        self.templates_dir = self.renderer.templates_dir
        self.loader = DocumentLoader(base_url=self.base_url, markdown_renderer=self.renderer.markdown_filter)
        self.writer = SiteWriter(self.output_dir)

    def setup_logging(self, log_dir=None, verbose=False):
        """Set up logging configuration."""
        self.logger = logging.getLogger('TopicPress')
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

        if not self.logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
            if not verbose:
                console_handler.addFilter(InfoFilter())
            console_handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(console_handler)

            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                log_filename = datetime.now().strftime('topicpress_%Y-%m-%d_%H-%M-%S.log')
                file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(
                    logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
                self.logger.addHandler(file_handler)

    def load_documents(self):
        documents = []
        for file_path in get_markdown_files(self.content_dir):
            try:
                documents.append(self.loader.load(file_path))
            except (OSError, UnicodeDecodeError) as e:
                raise BuildError(f"Failed to read markdown file {file_path}: {e}") from e
            self.logger.debug(f"Loaded {file_path}")

        if not documents:
            self.logger.warning(f"No markdown files found in {self.content_dir}")
        return documents

    def write(self, relative_path, html):
        try:
            self.writer.write_page(relative_path, html)
        except OSError as e:
            raise BuildError(f"Failed to write {relative_path}: {e}") from e

    def render(self, method, *args):
        try:
            return method(*args)
        except (TemplateError, OSError) as e:
            raise BuildError(f"Template error: {e}") from e

    def build_articles(self, documents):
        written = {}
        for doc in documents:
            if doc.output_path in written:
                self.logger.warning(
                    f"{doc.source_path} and {written[doc.output_path]} both map to "
                    f"/{doc.topic_slug}/{doc.slug}/; the later file wins")
            written[doc.output_path] = doc.source_path
            self.write(doc.output_path, self.render(self.renderer.render_article, doc))
            self.articles_generated += 1

    def build_topic_pages(self, site_index):
        self.logger.info("Building topic pages")
        for entry in site_index.topics:
            self.write(os.path.join('topics', entry.slug, 'index.html'),
                       self.render(self.renderer.render_topic, entry))
            self.topics_generated += 1
        self.write(os.path.join('topics', 'index.html'),
                   self.render(self.renderer.render_topics_overview, site_index.topics))

    def build_index_page(self, site_index):
        self.logger.info("Building index page")
        self.write('index.html', self.render(self.renderer.render_home, site_index))

    def copy_static(self):
        try:
            self.writer.copy_static(self.static_dir)
        except OSError as e:
            raise BuildError(f"Failed to copy static files from {self.static_dir}: {e}") from e

    def build(self):
        """Main build process. Returns the SiteIndex that was rendered."""
        self.logger.debug("Starting site build...")
        self.articles_generated = 0
        self.topics_generated = 0

        try:
            self.writer.clear()
        except OSError as e:
            raise BuildError(f"Failed to clear output directory {self.output_dir}: {e}") from e

        documents = self.load_documents()
        site_index = build_index(documents)

        self.build_articles(documents)
        self.build_topic_pages(site_index)
        self.build_index_page(site_index)
        self.copy_static()
        return site_index
