"""
Tests for config module.
"""
import unittest
import os
import json
import tempfile
from unittest.mock import patch

from telepage.config import (
    load_config, get_client_config,
    _load_config_file, _load_from_env, _merge_config
)
from telepage.exceptions import ValidationError


def _write_json(data, suffix='.json'):
    with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False) as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)
        return f.name


class TestLoadConfigFile(unittest.TestCase):
    """Tests for _load_config_file function."""

    def test_load_json_file(self):
        """Test loading JSON config file."""
        tmp_path = _write_json({'key': 'value', 'nested': {'a': 1}})
        try:
            config = _load_config_file(tmp_path)
            self.assertEqual(config['key'], 'value')
            self.assertEqual(config['nested']['a'], 1)
        finally:
            os.unlink(tmp_path)

    def test_load_empty_json_file(self):
        """Test loading empty JSON file."""
        tmp_path = _write_json('')
        try:
            self.assertEqual(_load_config_file(tmp_path), {})
        finally:
            os.unlink(tmp_path)

    def test_load_invalid_json_file(self):
        """Test that broken JSON raises ValidationError."""
        tmp_path = _write_json('{not json')
        try:
            with self.assertRaises(ValidationError):
                _load_config_file(tmp_path)
        finally:
            os.unlink(tmp_path)

    def test_load_non_mapping_json(self):
        """Test that a JSON list is rejected."""
        tmp_path = _write_json([1, 2, 3])
        try:
            with self.assertRaises(ValidationError):
                _load_config_file(tmp_path)
        finally:
            os.unlink(tmp_path)

    def test_load_nonexistent_file(self):
        """Test loading non-existent file returns empty dict."""
        self.assertEqual(_load_config_file('/nonexistent/path/config.json'), {})

    def test_load_yaml_file(self):
        """Test loading YAML config file (if PyYAML installed)."""
        try:
            import yaml  # noqa: F401
        except ImportError:
            self.skipTest("PyYAML not installed")

        tmp_path = _write_json('short_name: yaml_value', suffix='.yaml')
        try:
            config = _load_config_file(tmp_path)
            self.assertEqual(config['short_name'], 'yaml_value')
        finally:
            os.unlink(tmp_path)


class TestLoadFromEnv(unittest.TestCase):
    """Tests for _load_from_env function."""

    def test_load_simple_env_var(self):
        """Test loading a TELEPAGE_ environment variable."""
        with patch.dict(os.environ, {'TELEPAGE_ACCESS_TOKEN': 'test_token'}):
            config = _load_from_env()
            self.assertEqual(config['access_token'], 'test_token')

    def test_config_path_var_not_included(self):
        """Test that TELEPAGE_CONFIG is not treated as a setting."""
        with patch.dict(os.environ, {'TELEPAGE_CONFIG': '/tmp/x.json'}):
            config = _load_from_env()
            self.assertNotIn('config', config)

    def test_ignores_non_telepage_vars(self):
        """Test that non-TELEPAGE_ vars are ignored."""
        with patch.dict(os.environ, {'OTHER_VAR': 'value'}, clear=False):
            config = _load_from_env()
            self.assertNotIn('other_var', config)


class TestMergeConfig(unittest.TestCase):
    """Tests for _merge_config function."""

    def test_merge_simple(self):
        base = {'a': 1, 'b': 2}
        override = {'b': 3, 'c': 4}
        self.assertEqual(_merge_config(base, override), {'a': 1, 'b': 3, 'c': 4})

    def test_override_replaces_whole_value(self):
        base = {'timeout': 30, 'api_url': 'https://a'}
        override = {'timeout': '5'}
        self.assertEqual(_merge_config(base, override), {'timeout': '5', 'api_url': 'https://a'})

    def test_merge_does_not_modify_original(self):
        base = {'a': 1}
        override = {'b': 2}
        _merge_config(base, override)
        self.assertEqual(base, {'a': 1})
        self.assertEqual(override, {'b': 2})


class TestLoadConfig(unittest.TestCase):
    """Tests for load_config function."""

    def test_load_from_explicit_path(self):
        tmp_path = _write_json({'explicit': True})
        try:
            config = load_config(config_path=tmp_path)
            self.assertTrue(config['explicit'])
        finally:
            os.unlink(tmp_path)

    def test_load_from_env_var_path(self):
        """Test loading config from TELEPAGE_CONFIG env var."""
        tmp_path = _write_json({'from_env_path': True})
        try:
            with patch.dict(os.environ, {'TELEPAGE_CONFIG': tmp_path}):
                config = load_config()
                self.assertTrue(config['from_env_path'])
        finally:
            os.unlink(tmp_path)

    def test_env_vars_override_file(self):
        tmp_path = _write_json({'short_name': 'from_file'})
        try:
            with patch.dict(os.environ, {'TELEPAGE_SHORT_NAME': 'from_env'}):
                config = load_config(config_path=tmp_path)
                self.assertEqual(config['short_name'], 'from_env')
        finally:
            os.unlink(tmp_path)


class TestGetClientConfig(unittest.TestCase):
    """Tests for get_client_config function."""

    @patch('telepage.config.load_config')
    def test_keeps_client_keys_only(self, mock_load):
        mock_load.return_value = {
            'access_token': 'abc',
            'short_name': 'Sandbox',
            'unrelated': 'stuff',
        }
        config = get_client_config()
        self.assertEqual(config, {'access_token': 'abc', 'short_name': 'Sandbox'})

    @patch('telepage.config.load_config')
    def test_drops_empty_values(self, mock_load):
        mock_load.return_value = {'access_token': '', 'author_url': None}
        self.assertEqual(get_client_config(), {})

    @patch('telepage.config.load_config')
    def test_timeout_converted_to_float(self, mock_load):
        mock_load.return_value = {'timeout': '12.5'}
        self.assertEqual(get_client_config()['timeout'], 12.5)

    @patch('telepage.config.load_config')
    def test_invalid_timeout(self, mock_load):
        mock_load.return_value = {'timeout': 'soon'}
        with self.assertRaises(ValidationError):
            get_client_config()

    @patch('telepage.config.load_config')
    def test_passes_config_path(self, mock_load):
        mock_load.return_value = {}
        get_client_config('/some/path.json')
        mock_load.assert_called_once_with('/some/path.json')


if __name__ == '__main__':
    unittest.main()
