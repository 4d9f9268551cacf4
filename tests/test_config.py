import logging
import os
import unittest

from pydantic import ValidationError

from uptime_probe.config import logging_config
from uptime_probe.config.config import Config, ProbeConfig


class TestConfig(unittest.TestCase):
    def test_config_defaults(self):
        self.assertEqual(Config.DEFAULT_METHOD, "GET")
        self.assertEqual(Config.DEFAULT_INTERVAL, 10)
        self.assertEqual(Config.DEFAULT_TIME, 5)
        self.assertIsInstance(Config.REQUEST_TIMEOUT, float)
        self.assertEqual(Config.QUEUE_SIZE, 10)

    def test_config_env_override(self):
        os.environ["UPTIME_PROBE_INTERVAL"] = "3"
        import importlib

        import uptime_probe.config.config as config_mod

        try:
            importlib.reload(config_mod)
            self.assertEqual(config_mod.Config.DEFAULT_INTERVAL, 3)
        finally:
            del os.environ["UPTIME_PROBE_INTERVAL"]
            importlib.reload(config_mod)


class TestProbeConfig(unittest.TestCase):
    def test_probe_config_defaults(self):
        config = ProbeConfig(url="http://example.com")
        self.assertEqual(config.method, "GET")
        self.assertIsNone(config.body)
        self.assertEqual(config.interval_seconds, 10)
        self.assertEqual(config.total_minutes, 5)
        self.assertFalse(config.follow_redirects)
        self.assertFalse(config.verbose)
        self.assertEqual(config.total_seconds, 300.0)

    def test_probe_config_is_immutable(self):
        config = ProbeConfig(url="http://example.com")
        with self.assertRaises(ValidationError):
            config.url = "http://other.example.com"

    def test_probe_config_rejects_non_positive_values(self):
        with self.assertRaises(ValidationError):
            ProbeConfig(url="http://example.com", interval_seconds=0)
        with self.assertRaises(ValidationError):
            ProbeConfig(url="http://example.com", total_minutes=-1)
        with self.assertRaises(ValidationError):
            ProbeConfig(url="http://example.com", timeout_seconds=0)


class TestLoggingConfig(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level

    def tearDown(self):
        root = logging.getLogger()
        root.handlers.clear()
        for handler in self._handlers:
            root.addHandler(handler)
        root.setLevel(self._level)

    def test_logging_setup(self):
        try:
            logging_config.setup_logging()
        except Exception as e:
            self.fail(f"setup_logging() raised {e}")
        logger = logging.getLogger()
        self.assertTrue(logger.hasHandlers())

    def test_verbose_enables_debug(self):
        logging_config.setup_logging(verbose=True)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_file_handler_only_when_log_file_set(self):
        config = logging_config.build_logging_config(log_file=None)
        self.assertEqual(list(config["handlers"]), ["console"])
        config = logging_config.build_logging_config(log_file="probe.log")
        self.assertIn("file", config["handlers"])
        self.assertEqual(config["root"]["handlers"], ["console", "file"])


if __name__ == "__main__":
    unittest.main()
