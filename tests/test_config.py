import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import config


class SettingsFromEnvTests(unittest.TestCase):
    def test_defaults(self):
        settings = config.settings_from_env({})
        self.assertEqual(settings.bus, "system")
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.status_timeout, 5.0)
        self.assertEqual(settings.input_timeout_ms, 200)
        self.assertEqual(settings.warnings, [])
        self.assertEqual(settings.level, logging.INFO)

    def test_overrides(self):
        settings = config.settings_from_env(
            {
                "SNM_BUS": "Session",
                "SNM_LOG_FILE": "~/snm.log",
                "SNM_LOG_LEVEL": "debug",
                "SNM_STATUS_TIMEOUT": "2.5",
                "SNM_INPUT_TIMEOUT_MS": "50",
            }
        )
        self.assertEqual(settings.bus, "session")
        self.assertEqual(settings.log_file, Path.home() / "snm.log")
        self.assertEqual(settings.level, logging.DEBUG)
        self.assertEqual(settings.status_timeout, 2.5)
        self.assertEqual(settings.input_timeout_ms, 50)

    def test_invalid_values_fall_back_with_warnings(self):
        settings = config.settings_from_env(
            {
                "SNM_BUS": "starter",
                "SNM_LOG_LEVEL": "loud",
                "SNM_STATUS_TIMEOUT": "soon",
                "SNM_INPUT_TIMEOUT_MS": "1",
            }
        )
        self.assertEqual(settings.bus, "system")
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.status_timeout, 5.0)
        self.assertEqual(settings.input_timeout_ms, 200)
        self.assertEqual(len(settings.warnings), 4)


class EnvFileTests(unittest.TestCase):
    def test_env_file_does_not_override_environment(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text("SNM_BUS=session\nSNM_LOG_LEVEL=DEBUG\n")
            with patch.object(config, "ENV_FILES", (env_file, Path(tmp) / "missing")):
                with patch.dict(config.os.environ, {"SNM_LOG_LEVEL": "ERROR"}, clear=True):
                    settings = config.load_settings()
        self.assertEqual(settings.bus, "session")
        self.assertEqual(settings.log_level, "ERROR")


class ConfigureLoggingTests(unittest.TestCase):
    def test_creates_log_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "nested" / "snm.log"
            settings = config.Settings(log_file=log_file, warnings=["bad value"])
            with patch("config.logging.basicConfig") as basic:
                config.configure_logging(settings)
            self.assertTrue(log_file.parent.is_dir())
        basic.assert_called_once()
        self.assertEqual(basic.call_args.kwargs["filename"], log_file)


if __name__ == "__main__":
    unittest.main()
