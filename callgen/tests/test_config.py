"""Tests for configuration loading and environment variable expansion."""

import json

import pytest
import yaml

from callgen.config import (
    CodegenConfig,
    DocumentConfig,
    _expand_env_vars,
    _expand_env_vars_recursive,
    create_default_config,
    get_config,
    load_config_file,
)
from callgen.exceptions import ConfigurationError


class TestDocumentConfig:
    def test_defaults(self):
        config = DocumentConfig(source='endpoints.json', output='./slack')
        assert config.services_file == 'services.py'
        assert config.runtime_file == '_runtime.py'
        assert config.objects_module == '.objects'
        assert config.base_url is None
        assert config.format_code

    def test_module_names(self):
        config = DocumentConfig(
            source='endpoints.json',
            output='./slack',
            services_file='api.py',
            runtime_file='transport.py',
        )
        assert config.services_module == '.api'
        assert config.runtime_module == '.transport'


class TestEnvironmentExpansion:
    def test_expand(self, monkeypatch):
        monkeypatch.setenv('CATALOG_DIR', '/srv/catalogs')
        assert _expand_env_vars('${CATALOG_DIR}/slack.json') == '/srv/catalogs/slack.json'

    def test_default(self, monkeypatch):
        monkeypatch.delenv('CATALOG_DIR', raising=False)
        assert _expand_env_vars('${CATALOG_DIR:-./catalogs}/x.json') == './catalogs/x.json'

    def test_unset_variable(self, monkeypatch):
        monkeypatch.delenv('CATALOG_DIR', raising=False)
        with pytest.raises(ConfigurationError, match='CATALOG_DIR'):
            _expand_env_vars('${CATALOG_DIR}/x.json')

    def test_recursive(self, monkeypatch):
        monkeypatch.setenv('OUT', 'generated')
        data = {'documents': [{'source': 'a.json', 'output': '${OUT}'}], 'n': 1}
        assert _expand_env_vars_recursive(data) == {
            'documents': [{'source': 'a.json', 'output': 'generated'}],
            'n': 1,
        }


class TestConfigFiles:
    def test_yaml(self, tmp_path):
        path = tmp_path / 'callgen.yaml'
        path.write_text(yaml.safe_dump(create_default_config('a.json', './out')))
        config = load_config_file(path)
        assert isinstance(config, CodegenConfig)
        assert config.documents[0].source == 'a.json'

    def test_json(self, tmp_path):
        path = tmp_path / 'callgen.json'
        path.write_text(json.dumps(create_default_config('a.json', './out')))
        assert load_config_file(path).documents[0].output == './out'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match='not found'):
            load_config_file(tmp_path / 'callgen.yaml')

    def test_invalid(self, tmp_path):
        path = tmp_path / 'callgen.yaml'
        path.write_text(yaml.safe_dump({'documents': [{'source': 'a.json'}]}))
        with pytest.raises(ConfigurationError, match='Invalid configuration'):
            load_config_file(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'callgen.yaml'
        path.write_text('documents: [')
        with pytest.raises(ConfigurationError, match='Failed to read configuration'):
            load_config_file(path)


class TestGetConfig:
    def test_explicit_path(self, tmp_path):
        path = tmp_path / 'custom.yaml'
        path.write_text(yaml.safe_dump(create_default_config('a.json', './out')))
        assert get_config(str(path)).documents[0].source == 'a.json'

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / 'callgen.yml').write_text(
            yaml.safe_dump(create_default_config('b.json', './out'))
        )
        monkeypatch.chdir(tmp_path)
        assert get_config().documents[0].source == 'b.json'

    def test_pyproject(self, tmp_path, monkeypatch):
        (tmp_path / 'pyproject.toml').write_text(
            '[tool.callgen]\n'
            '[[tool.callgen.documents]]\n'
            'source = "c.json"\n'
            'output = "./out"\n'
            'base_url = "https://example.com/api/"\n'
        )
        monkeypatch.chdir(tmp_path)
        document = get_config().documents[0]
        assert document.source == 'c.json'
        assert document.base_url == 'https://example.com/api/'

    def test_not_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigurationError, match='Configuration not found'):
            get_config()
