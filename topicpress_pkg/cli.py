#!/usr/bin/env python3
"""
Command-line interface for TopicPress - topic-organized static site generator.
"""

import os
import sys
import argparse
import time
import shutil
from . import __version__
from .core import TopicPress
from .render import PACKAGE_TEMPLATES
from .settings import TopicPressSettings

SAMPLE_ARTICLE = """---
title: "Hello, TopicPress"
date: 2025-01-01
topic: writing
tags: [meta]
summary: "The first article on a new TopicPress site."
---

# Hello, TopicPress

Every markdown file under `content/` becomes a page at `/<topic>/<slug>/`.
Tag an article in its front matter, or inline with hashtags like #getting-started.

```
Hashtags inside code, such as #not-a-tag, are ignored.
```
"""

SAMPLE_STYLES = """body { font-family: system-ui, sans-serif; max-width: 42rem; margin: 2rem auto; padding: 0 1rem; }
.meta { color: #666; font-size: 0.9rem; }
.tag { margin-right: 0.5rem; }
"""


def write_if_missing(path: str, contents: str, label: str) -> None:
    if os.path.exists(path):
        print(f"{label} already exists: {os.path.relpath(path)}")
        return
    with open(path, 'w', encoding='utf-8') as f:
        f.write(contents)
    print(f"Created {label.lower()}: {os.path.relpath(path)}")


def create_starter_structure(target_dir: str = None) -> None:
    """Create a starter structure with templates, content, and static files."""
    current_dir = target_dir or os.getcwd()

    for directory in ['templates', 'content', 'static']:
        dir_path = os.path.join(current_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    for template_file in sorted(os.listdir(PACKAGE_TEMPLATES)):
        if template_file.endswith('.html'):
            dest_path = os.path.join(current_dir, 'templates', template_file)
            if os.path.exists(dest_path):
                print(f"Template already exists: templates/{template_file}")
            else:
                shutil.copy2(os.path.join(PACKAGE_TEMPLATES, template_file), dest_path)
                print(f"Created template: templates/{template_file}")

    write_if_missing(os.path.join(current_dir, 'content', 'hello-topicpress.md'), SAMPLE_ARTICLE, 'Sample article')
    write_if_missing(os.path.join(current_dir, 'static', 'styles.css'), SAMPLE_STYLES, 'Stylesheet')

    print("\nStarter structure created successfully!")
    print("\nNext steps:")
    print("1. Edit the configuration file (topicpress.yml)")
    print("2. Add markdown files to 'content/'")
    print("3. Run 'topicpress' to build your site into 'dist/'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='TopicPress - Topic-Organized Static Site Generator')
    parser.add_argument('--content', type=str,
                        help='Content directory containing markdown files')
    parser.add_argument('--templates', type=str,
                        help='Templates directory')
    parser.add_argument('--static', type=str,
                        help='Static directory copied to the output root')
    parser.add_argument('--output', type=str,
                        help='Output directory for generated site')
    parser.add_argument('--site-title', type=str, help='Site title')
    parser.add_argument('--base-url', type=str,
                        help='Path prefix for every generated link, e.g. /my-repo')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for a detailed build log')
    parser.add_argument('--verbose', action='store_true',
                        help='Show every log message on the console')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter structure')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv=None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.init:
        settings_loader = TopicPressSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")

        print("\nCreating starter project structure...")
        create_starter_structure()
        return

    settings_loader = TopicPressSettings()
    settings_loader.load_settings()

    # Excluding None values so unset flags don't mask config or environment
    args_dict = {k: v for k, v in vars(args).items() if v is not None}
    final_settings = settings_loader.merge_with_args(args_dict)

    output_dir = os.path.expanduser(final_settings['output'])

    overall_start_time = time.time()

    try:
        generator = TopicPress(
            content_dir=final_settings['content'],
            templates_dir=final_settings['templates'],
            output_dir=output_dir,
            static_dir=final_settings['static'],
            site_title=final_settings['site_title'],
            base_url=final_settings['base_url'],
            log_dir=args.log_dir,
            verbose=args.verbose,
        )

        generator.build()

        total_time = time.time() - overall_start_time
        generator.logger.info(f"Site build completed in {total_time:.6f} seconds.")
        generator.logger.info(f"Total articles generated: {generator.articles_generated}")
        generator.logger.info(f"Total topics generated: {generator.topics_generated}")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
