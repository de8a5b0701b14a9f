#!/usr/bin/env python3
"""
Settings loader for TopicPress.
Supports configuration from topicpress.yml, topicpress.yaml or topicpress.json
files, environment variables and command-line arguments.
"""

import os
import json
import yaml
from typing import Dict, Any, Mapping, Optional


class TopicPressSettings:
    """Load and manage TopicPress configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'content': 'content',
        'templates': 'templates',
        'static': 'static',
        'output': 'dist',
        'site_title': 'Articles',
        'base_url': '',
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['topicpress.yml', 'topicpress.yaml', 'topicpress.json']

    def __init__(self, config_dir: str = None, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
            environ: Environment mapping. Defaults to os.environ.
        """
        self.config_dir = config_dir or os.getcwd()
        self.environ = os.environ if environ is None else environ
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from the configuration file and the environment.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    self.settings.update(
                        {k: v for k, v in loaded_settings.items() if k in self.DEFAULT_SETTINGS})
                    print(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except (ValueError, OSError) as e:
                print(f"Warning: Failed to load config file {config_file}: {e}")

        self.settings.update(self._load_environment())
        self.settings['base_url'] = normalize_base_url(self.settings['base_url'])
        return self.settings.copy()

    def _load_environment(self) -> Dict[str, Any]:
        """
        Read SITE_TITLE and BASE_URL. Without BASE_URL, a GitHub project
        repository (owner/name, not *.github.io) implies a base path of /name.
        """
        env_settings = {}
        if self.environ.get('SITE_TITLE'):
            env_settings['site_title'] = self.environ['SITE_TITLE']

        if self.environ.get('BASE_URL'):
            env_settings['base_url'] = self.environ['BASE_URL']
        else:
            repository = self.environ.get('GITHUB_REPOSITORY', '')
            parts = repository.split('/')
            repo_name = parts[1] if len(parts) > 1 else ''
            if repo_name and not repo_name.endswith('.github.io'):
                env_settings['base_url'] = f"/{repo_name}"
        return env_settings

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    loaded = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    loaded = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        return loaded

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'topicpress.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# TopicPress Configuration File\n")
                    f.write("# SITE_TITLE and BASE_URL environment variables override these values\n\n")
                    f.write("# Site information\n")
                    f.write("site_title: Articles\n")
                    f.write("base_url: ''  # e.g. /my-repo when served from a subpath\n\n")
                    f.write("# Build settings\n")
                    f.write("content: content\n")
                    f.write("templates: templates\n")
                    f.write("static: static\n")
                    f.write("output: dist\n")
                elif file_format == 'json':
                    json.dump(self.DEFAULT_SETTINGS, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file and environment.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        for key, value in args_dict.items():
            if value is not None and key in self.DEFAULT_SETTINGS:
                merged[key] = value

        merged['base_url'] = normalize_base_url(merged['base_url'])
        return merged


def normalize_base_url(value) -> str:
    """Drop a single trailing slash so paths can be appended with '/'."""
    value = str(value or '')
    if value.endswith('/'):
        value = value[:-1]
    return value
