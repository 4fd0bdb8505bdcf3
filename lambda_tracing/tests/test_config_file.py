"""Tests for config file loading and priority."""

import os
import tempfile
from pathlib import Path
import unittest
from unittest.mock import patch

from lambda_tracing import config, init, stop_tracing
from lambda_tracing.errors import ConfigError


def _write_toml(content: str) -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.toml', delete=False) as f:
        f.write(content)
    return f.name


class TestConfigFileLoading(unittest.TestCase):
    """Test TOML config file loading."""

    def test_load_toml_config_basic(self):
        path = _write_toml("""
[tracing]
service_name = "orders"
sample_rate = 0.5

[exporters]
enable_console = true
otlp_endpoint = "http://localhost:4318/v1/traces"
""")
        try:
            loaded = config.load_toml_config(path)

            self.assertEqual(loaded["tracing"]["service_name"], "orders")
            self.assertEqual(loaded["tracing"]["sample_rate"], 0.5)
            self.assertTrue(loaded["exporters"]["enable_console"])
        finally:
            os.unlink(path)

    def test_flatten_maps_tables_to_fields(self):
        flat = config.flatten_toml_config({
            "tracing": {"service_name": "orders", "flush_on_end": False},
            "exporters": {"enable_console": True, "otlp_headers": {"x-api-key": "k"}},
        })

        self.assertEqual(flat, {
            "service_name": "orders",
            "flush_on_end": False,
            "enable_console_exporter": True,
            "otlp_headers": {"x-api-key": "k"},
        })

    def test_flatten_drops_unknown_keys(self):
        with self.assertLogs("lambda_tracing.config", level="WARNING"):
            flat = config.flatten_toml_config({"tracing": {"colour": "blue"}})
        self.assertEqual(flat, {})

    def test_load_toml_config_missing_file(self):
        """Test that loading missing file returns empty dict."""
        loaded = config.load_toml_config("/nonexistent/file.toml")
        self.assertEqual(loaded, {})

    def test_load_toml_config_invalid_toml(self):
        """Test that invalid TOML raises ConfigError."""
        path = _write_toml("invalid [toml content")
        try:
            with self.assertRaises(ConfigError):
                config.load_toml_config(path)
        finally:
            os.unlink(path)

    def test_find_config_file_current_directory(self):
        """Test finding config file in current directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "lambda_tracing.toml"
            config_path.write_text("[tracing]\nservice_name = \"test\"")

            original_cwd = os.getcwd()
            try:
                os.chdir(tmpdir)

                found = config.find_config_file()
                self.assertIsNotNone(found)
                self.assertEqual(Path(found).name, "lambda_tracing.toml")
            finally:
                os.chdir(original_cwd)


class TestConfigPriority(unittest.TestCase):
    """Test configuration loading priority."""

    def tearDown(self):
        stop_tracing()

    def test_explicit_params_override_env(self):
        environ = {"LAMBDA_TRACING_SERVICE_NAME": "env-name"}

        merged = config.load_config_with_priority(
            overrides={"service_name": "explicit-name"},
            environ=environ,
        )

        self.assertEqual(merged["service_name"], "explicit-name")

    def test_none_overrides_are_ignored(self):
        environ = {"LAMBDA_TRACING_SERVICE_NAME": "env-name"}

        merged = config.load_config_with_priority(overrides={"service_name": None}, environ=environ)

        self.assertEqual(merged["service_name"], "env-name")

    def test_env_override_config_file(self):
        path = _write_toml("""
[tracing]
service_name = "file-name"
sample_rate = 0.25
""")
        try:
            merged = config.load_config_with_priority(
                config_file=path,
                environ={"LAMBDA_TRACING_SERVICE_NAME": "env-name"},
            )

            self.assertEqual(merged["service_name"], "env-name")
            self.assertEqual(merged["sample_rate"], 0.25)
        finally:
            os.unlink(path)

    def test_defaults_fill_missing_values(self):
        loaded = config.load_config(environ={"AWS_LAMBDA_FUNCTION_NAME": "ignored"})

        self.assertEqual(loaded.sample_rate, 1.0)
        self.assertTrue(loaded.flush_on_end)
        self.assertFalse(loaded.enable_console_exporter)
        self.assertFalse(loaded.enable_otlp_exporter)

    def test_service_name_defaults_to_function_name(self):
        with patch.dict(os.environ, {"AWS_LAMBDA_FUNCTION_NAME": "checkout"}):
            loaded = config.load_config(environ={})

        self.assertEqual(loaded.service_name, "checkout")

    def test_invalid_values_raise_config_error(self):
        with self.assertRaises(ConfigError):
            config.load_config(overrides={"sample_rate": 2.0}, environ={})

    def test_unknown_override_raises_config_error(self):
        with self.assertRaises(ConfigError):
            config.load_config(overrides={"sampel_rate": 0.5}, environ={})

    def test_init_with_config_file(self):
        path = _write_toml("""
[tracing]
sample_rate = 0.3
flush_on_end = false
""")
        try:
            provider = init(config_file=path)

            self.assertIsNotNone(provider)
            self.assertEqual(provider.sampler.sample_rate, 0.3)
            self.assertFalse(provider.flush_on_end)
        finally:
            os.unlink(path)


class TestConfigFromEnv(unittest.TestCase):
    """Test loading configuration from environment variables."""

    def test_load_config_from_env_all_vars(self):
        env_config = config.load_config_from_env({
            "LAMBDA_TRACING_SERVICE_NAME": "orders",
            "LAMBDA_TRACING_SAMPLE_RATE": "0.9",
            "LAMBDA_TRACING_API_KEY": "secret",
            "LAMBDA_TRACING_ENABLE_CONSOLE_EXPORTER": "1",
            "LAMBDA_TRACING_ENABLE_OTLP_EXPORTER": "yes",
            "LAMBDA_TRACING_OTLP_ENDPOINT": "http://collector:4318/v1/traces",
            "LAMBDA_TRACING_OTLP_HEADERS": "x-team=payments, x-env=prod",
            "LAMBDA_TRACING_OTLP_TIMEOUT": "2.5",
            "LAMBDA_TRACING_FLUSH_ON_END": "off",
            "LAMBDA_TRACING_LOG_SPANS": "true",
        })

        self.assertEqual(env_config["service_name"], "orders")
        self.assertEqual(env_config["sample_rate"], 0.9)
        self.assertEqual(env_config["api_key"], "secret")
        self.assertTrue(env_config["enable_console_exporter"])
        self.assertTrue(env_config["enable_otlp_exporter"])
        self.assertEqual(env_config["otlp_endpoint"], "http://collector:4318/v1/traces")
        self.assertEqual(env_config["otlp_headers"], {"x-team": "payments", "x-env": "prod"})
        self.assertEqual(env_config["otlp_timeout"], 2.5)
        self.assertFalse(env_config["flush_on_end"])
        self.assertTrue(env_config["log_spans"])

    def test_load_config_from_env_missing_vars(self):
        """Test that missing env vars don't appear in result."""
        self.assertEqual(config.load_config_from_env({}), {})

    def test_invalid_boolean_raises(self):
        with self.assertRaises(ConfigError):
            config.load_config_from_env({"LAMBDA_TRACING_LOG_SPANS": "maybe"})

    def test_invalid_number_raises(self):
        with self.assertRaises(ConfigError):
            config.load_config_from_env({"LAMBDA_TRACING_SAMPLE_RATE": "half"})

    def test_invalid_headers_raise(self):
        with self.assertRaises(ConfigError):
            config.load_config_from_env({"LAMBDA_TRACING_OTLP_HEADERS": "no-equals-sign"})


if __name__ == "__main__":
    unittest.main()
