"""Tests for configuration management."""

import pytest
import yaml
import tempfile
import os

from csv_serialization.core.config import Config
from csv_serialization.core.exceptions import ConfigurationError


class TestConfig:
    """Test configuration management functionality."""

    @pytest.fixture
    def sample_config(self):
        """Sample configuration data."""
        return {
            'csv': {
                'separator': ';',
                'use_line_numbers': False,
                'use_eof_literal': True,
                'row_number_column_title': '${TEST_ROW_TITLE}',
                'max_workers': 4
            },
            'logging': {
                'level': 'DEBUG',
                'format': '%(levelname)s - %(message)s'
            }
        }

    @pytest.fixture
    def write_config(self):
        """Write configuration data to a temporary YAML file."""
        paths = []

        def write(data):
            with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
                yaml.dump(data, f)
                paths.append(f.name)
            return f.name

        yield write

        # Cleanup
        for path in paths:
            os.unlink(path)

    @pytest.fixture
    def mock_env_vars(self):
        """Set up environment variables for testing."""
        os.environ['TEST_ROW_TITLE'] = 'Line'
        yield
        # Cleanup
        if 'TEST_ROW_TITLE' in os.environ:
            del os.environ['TEST_ROW_TITLE']

    def test_config_loading(self, sample_config, write_config, mock_env_vars):
        """Test basic configuration loading."""
        config = Config(write_config(sample_config))

        assert config.get('csv.separator') == ';'
        assert config.get('csv.row_number_column_title') == 'Line'
        assert config.get('logging.level') == 'DEBUG'
        assert config.get('csv.missing', 'fallback') == 'fallback'

    def test_build_options(self, sample_config, write_config, mock_env_vars):
        """Test building serializer options from the csv section."""
        options = Config(write_config(sample_config)).build_options()

        assert options.separator == ';'
        assert options.use_line_numbers is False
        assert options.use_eof_literal is True
        assert options.row_number_column_title == 'Line'
        assert options.max_workers == 4
        assert options.ignore_empty_lines is True

    def test_missing_env_variable(self, sample_config, write_config):
        """Test placeholder without a matching environment variable."""
        os.environ.pop('TEST_ROW_TITLE', None)
        with pytest.raises(ConfigurationError):
            Config(write_config(sample_config))

    def test_defaults_without_file(self):
        config = Config(None)

        assert config.get_all() == {}
        assert config.build_options().separator == ','
        assert config.validate() is True

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            Config('/nonexistent/config.yaml')

    def test_invalid_yaml(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write('csv: [unclosed\n')
            temp_path = f.name

        try:
            with pytest.raises(ConfigurationError):
                Config(temp_path)
        finally:
            os.unlink(temp_path)

    def test_unknown_keys(self, write_config):
        config = Config(write_config({'csv': {'delimiter': ';'}}))

        with pytest.raises(ConfigurationError) as exc_info:
            config.build_options()
        assert 'delimiter' in str(exc_info.value)

    def test_validate(self, sample_config, write_config, mock_env_vars):
        assert Config(write_config(sample_config)).validate() is True

    @pytest.mark.parametrize("csv_section, message", [
        ({'separator': ';;'}, 'single character'),
        ({'newline_replacement': ''}, 'non-empty'),
        ({'separator_replacement': 'a,b'}, 'must not contain the separator'),
        ({'newline_replacement': '~', 'separator_replacement': '~'}, 'must differ'),
        ({'max_workers': 0}, 'positive'),
    ])
    def test_validate_errors(self, write_config, csv_section, message):
        config = Config(write_config({'csv': csv_section}))

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert message in str(exc_info.value)

    def test_validate_logging_level(self, write_config):
        config = Config(write_config({'logging': {'level': 'LOUD'}}))

        with pytest.raises(ConfigurationError):
            config.validate()
