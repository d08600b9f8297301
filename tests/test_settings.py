import os
import unittest
from unittest.mock import patch

from config.settings import DEFAULT_MODEL, AppSettings


class TestAppSettings(unittest.TestCase):
    def test_missing_credential_is_fatal(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                AppSettings.from_env()
        self.assertIn("GITHUB_AI_TOKEN", str(ctx.exception))

    def test_blank_credential_is_fatal(self):
        with self.assertRaises(RuntimeError):
            AppSettings(api_key="")

    def test_azure_key_alias_and_defaults(self):
        with patch.dict(os.environ, {"AZURE_AI_KEY": "k"}, clear=True):
            settings = AppSettings.from_env()
        self.assertEqual(settings.api_key, "k")
        self.assertEqual(settings.model, DEFAULT_MODEL)
        self.assertEqual(settings.port, 3001)
        self.assertEqual(settings.variant, "insights")
        self.assertFalse(settings.validate_schema)
        self.assertIn("https://aicryptoanalyzer.netlify.app", settings.allowed_origins)

    def test_env_overrides(self):
        env = {
            "GITHUB_AI_TOKEN": "t",
            "APP_VARIANT": "Report",
            "PORT": "8080",
            "INFERENCE_TIMEOUT_S": "30",
            "CORS_ALLOWED_ORIGINS": " http://a.test , ,http://b.test",
            "ANALYSIS_VALIDATE_SCHEMA": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = AppSettings.from_env()
        self.assertEqual(settings.variant, "report")
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.timeout_s, 30.0)
        self.assertEqual(settings.allowed_origins, ["http://a.test", "http://b.test"])
        self.assertTrue(settings.validate_schema)

    def test_unknown_variant_is_fatal(self):
        with self.assertRaises(RuntimeError):
            AppSettings(api_key="t", variant="both")


if __name__ == "__main__":
    unittest.main()
