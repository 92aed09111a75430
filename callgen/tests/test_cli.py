"""Test CLI functionality."""

from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from callgen import __version__
from callgen.cli import app
from callgen.config import CodegenConfig, DocumentConfig
from callgen.exceptions import CatalogLoadError, ConfigurationError

from .fixtures import SLACK_CATALOG, write_catalog


@pytest.fixture
def runner():
    """Fixture providing CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_config():
    """Fixture providing sample configuration."""
    return CodegenConfig(
        documents=[DocumentConfig(source='endpoints.json', output='./generated')]
    )


class TestGenerateCommand:
    """Test the generate command."""

    @patch('callgen.cli.get_config')
    @patch('callgen.cli.Codegen')
    def test_generate_without_config_file(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command without specifying config file."""
        mock_get_config.return_value = sample_config
        mock_codegen_instance = MagicMock()
        mock_codegen_instance.generate.return_value = ['generated/chat.py']
        mock_codegen_class.return_value = mock_codegen_instance

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with(None)
        mock_codegen_class.assert_called_once_with(sample_config.documents[0])
        mock_codegen_instance.generate.assert_called_once()
        assert 'generated/chat.py' in result.stdout
        assert 'Successfully generated code' in result.stdout

    @patch('callgen.cli.get_config')
    @patch('callgen.cli.Codegen')
    def test_generate_with_short_config_option(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command with short config option."""
        mock_get_config.return_value = sample_config
        mock_codegen_class.return_value = MagicMock()

        result = runner.invoke(app, ['generate', '-c', 'config.json'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with('config.json')

    @patch('callgen.cli.get_config')
    def test_generate_configuration_error(self, mock_get_config, runner):
        """Test generate command when no configuration can be found."""
        mock_get_config.side_effect = ConfigurationError('Configuration not found')

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 1
        assert 'Configuration not found' in result.stdout

    @patch('callgen.cli.get_config')
    @patch('callgen.cli.Codegen')
    def test_generate_catalog_error(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command when the catalog cannot be loaded."""
        mock_get_config.return_value = sample_config
        mock_codegen_class.return_value.generate.side_effect = CatalogLoadError(
            'endpoints.json'
        )

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 1
        assert 'Failed to load catalog' in result.stdout

    def test_generate_end_to_end(self, runner, tmp_path, monkeypatch):
        """Test generate command against a real catalog and config file."""
        write_catalog(tmp_path, SLACK_CATALOG)
        (tmp_path / 'callgen.yaml').write_text(
            yaml.safe_dump(
                {'documents': [{'source': 'endpoints.json', 'output': 'slack'}]}
            )
        )
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        assert (tmp_path / 'slack' / 'services.py').exists()
        assert (tmp_path / 'slack' / 'users_profile.py').exists()


class TestValidateCommand:
    def test_valid_catalog(self, runner, tmp_path):
        path = write_catalog(tmp_path, SLACK_CATALOG)

        result = runner.invoke(app, ['validate', str(path)])

        assert result.exit_code == 0
        assert 'users_profile' in result.stdout
        assert f'{len(SLACK_CATALOG)} endpoints' in result.stdout

    def test_invalid_catalog(self, runner, tmp_path):
        path = write_catalog(tmp_path, [{'name': 'nodot'}])

        result = runner.invoke(app, ['validate', str(path)])

        assert result.exit_code == 1
        assert 'Invalid catalog' in result.stdout


class TestInitCommand:
    def test_writes_config(self, runner, tmp_path):
        path = tmp_path / 'callgen.yaml'

        result = runner.invoke(
            app,
            ['init', '--source', 'endpoints.json', '--output', 'slack', '-p', str(path)],
        )

        assert result.exit_code == 0
        assert yaml.safe_load(path.read_text()) == {
            'documents': [{'source': 'endpoints.json', 'output': 'slack'}]
        }

    def test_refuses_to_overwrite(self, runner, tmp_path):
        path = tmp_path / 'callgen.yaml'
        path.write_text('keep me')

        result = runner.invoke(
            app,
            ['init', '--source', 'endpoints.json', '--output', 'slack', '-p', str(path)],
        )

        assert result.exit_code == 1
        assert path.read_text() == 'keep me'


class TestVersionCommand:
    def test_version(self, runner):
        result = runner.invoke(app, ['version'])

        assert result.exit_code == 0
        assert __version__ in result.stdout
