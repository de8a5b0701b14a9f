"""Tests for configuration loading."""

import pytest
import os
import json
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from topicpress_pkg.settings import TopicPressSettings, normalize_base_url


class TestTopicPressSettings:
    """Test cases for TopicPressSettings."""

    def test_defaults(self, temp_dir):
        settings = TopicPressSettings(config_dir=temp_dir, environ={}).load_settings()
        assert settings == TopicPressSettings.DEFAULT_SETTINGS

    def test_yaml_config_file(self, temp_dir):
        Path(temp_dir, 'topicpress.yml').write_text(
            "site_title: Field Notes\noutput: public\nunknown: ignored\n", encoding='utf-8')
        settings = TopicPressSettings(config_dir=temp_dir, environ={}).load_settings()
        assert settings['site_title'] == 'Field Notes'
        assert settings['output'] == 'public'
        assert 'unknown' not in settings

    def test_json_config_file(self, temp_dir):
        Path(temp_dir, 'topicpress.json').write_text(json.dumps({'base_url': '/docs/'}), encoding='utf-8')
        settings = TopicPressSettings(config_dir=temp_dir, environ={}).load_settings()
        assert settings['base_url'] == '/docs'

    def test_broken_config_file_is_ignored(self, temp_dir, capsys):
        Path(temp_dir, 'topicpress.yml').write_text("site_title: [oops\n", encoding='utf-8')
        settings = TopicPressSettings(config_dir=temp_dir, environ={}).load_settings()
        assert settings['site_title'] == 'Articles'
        assert 'Warning: Failed to load config file' in capsys.readouterr().out

    def test_environment_overrides_config(self, temp_dir):
        Path(temp_dir, 'topicpress.yml').write_text("site_title: From File\n", encoding='utf-8')
        environ = {'SITE_TITLE': 'From Env', 'BASE_URL': '/env/'}
        settings = TopicPressSettings(config_dir=temp_dir, environ=environ).load_settings()
        assert settings['site_title'] == 'From Env'
        assert settings['base_url'] == '/env'

    @pytest.mark.parametrize('repository, expected', [
        ('octo/notes', '/notes'),
        ('octo/octo.github.io', ''),
        ('', ''),
        ('malformed', ''),
    ])
    def test_base_url_inferred_from_repository(self, temp_dir, repository, expected):
        environ = {'GITHUB_REPOSITORY': repository}
        settings = TopicPressSettings(config_dir=temp_dir, environ=environ).load_settings()
        assert settings['base_url'] == expected

    def test_explicit_base_url_beats_repository(self, temp_dir):
        environ = {'GITHUB_REPOSITORY': 'octo/notes', 'BASE_URL': '/custom'}
        settings = TopicPressSettings(config_dir=temp_dir, environ=environ).load_settings()
        assert settings['base_url'] == '/custom'

    def test_args_take_precedence(self, temp_dir):
        loader = TopicPressSettings(config_dir=temp_dir, environ={'SITE_TITLE': 'Env'})
        loader.load_settings()
        merged = loader.merge_with_args({'site_title': 'Flag', 'base_url': '/x/', 'verbose': True})
        assert merged['site_title'] == 'Flag'
        assert merged['base_url'] == '/x'
        assert 'verbose' not in merged

    @pytest.mark.parametrize('file_format', ['yml', 'json'])
    def test_create_sample_config_round_trips(self, temp_dir, file_format):
        path = TopicPressSettings(config_dir=temp_dir, environ={}).create_sample_config(file_format)
        assert os.path.basename(path) == f'topicpress.{file_format}'
        settings = TopicPressSettings(config_dir=temp_dir, environ={}).load_settings()
        assert settings == TopicPressSettings.DEFAULT_SETTINGS


class TestNormalizeBaseUrl:

    @pytest.mark.parametrize('value, expected', [
        ('', ''), (None, ''), ('/', ''), ('/blog/', '/blog'), ('/blog', '/blog'),
    ])
    def test_normalize(self, value, expected):
        assert normalize_base_url(value) == expected
