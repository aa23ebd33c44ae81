from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from virality_report.config import config_sha256, load_config, resolve_runtime_secrets
from virality_report.config_schema import AppConfig
from virality_report.errors import ConfigError


_VALID_YAML = """\
scraper:
  token_env: APIFY_TOKEN
  api_url: https://api.apify.com/
  actors:
    tiktok: example/tiktok-profile
  posts_limit: 12
  timeout_secs: 15

scoring:
  window_posts: 30
  engagement_low: 0.002
  engagement_high: 0.06
  comment_ratio_low: 0.02
  comment_ratio_high: 0.25
  cadence_weeks: 12
  cadence_peak_per_week: 3
  cadence_zero_per_week: 7
  weight_engagement: 0.5
  weight_frequency: 0.3
  weight_comments: 0.2

report:
  top_n: 3
"""


class TestConfig(unittest.TestCase):
    def _write(self, td: str, text: str) -> Path:
        path = Path(td) / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_config_ok(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = load_config(self._write(td, _VALID_YAML))

            self.assertEqual(cfg.scraper.posts_limit, 12)
            self.assertEqual(cfg.scraper.timeout_secs, 15)
            self.assertEqual(cfg.scraper.api_url, "https://api.apify.com")
            self.assertEqual(cfg.report.top_n, 3)
            self.assertEqual(cfg.scoring.cadence_weeks, 12)
            self.assertEqual(cfg.scraper.actor_for("tiktok"), "example/tiktok-profile")
            self.assertEqual(cfg.scraper.actor_for("instagram"), "apify/instagram-scraper")
            self.assertEqual(cfg.scraper.actor_for("youtube"), "streamers/youtube-scraper")
            self.assertEqual(cfg.scraper.actor_for(None), "apify/instagram-scraper")

    def test_empty_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = load_config(self._write(td, ""))
            self.assertEqual(cfg, AppConfig())
            self.assertEqual(cfg.scraper.timeout_secs, 20)
            self.assertEqual(cfg.report.top_n, 5)

    def test_rejects_invalid_values(self) -> None:
        bad_docs = [
            _VALID_YAML.replace("weight_comments: 0.2", "weight_comments: 0.4"),
            _VALID_YAML.replace("engagement_high: 0.06", "engagement_high: 0.001"),
            _VALID_YAML.replace("top_n: 3", "top_n: 0"),
            _VALID_YAML.replace("token_env: APIFY_TOKEN", "token_env: 'not valid'"),
            _VALID_YAML.replace("tiktok: example/tiktok-profile", "tiktok: '  '"),
            _VALID_YAML.replace("tiktok: example/tiktok-profile", "vimeo: example/vimeo"),
            _VALID_YAML + "unknown_section: {}\n",
            "- just\n- a list\n",
            "scraper: [unclosed\n",
        ]
        with tempfile.TemporaryDirectory() as td:
            for text in bad_docs:
                with self.subTest(text=text[-40:]):
                    with self.assertRaises(ConfigError):
                        load_config(self._write(td, text))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(Path(td) / "missing.yaml")

    def test_resolve_runtime_secrets_requires_env(self) -> None:
        cfg = AppConfig()

        with self.assertRaises(ConfigError):
            resolve_runtime_secrets(cfg, environ={})
        with self.assertRaises(ConfigError):
            resolve_runtime_secrets(cfg, environ={"APIFY_TOKEN": "   "})

        secrets = resolve_runtime_secrets(cfg, environ={"APIFY_TOKEN": " a "})
        self.assertEqual(secrets.apify_token, "a")

    def test_config_hash_is_stable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = load_config(self._write(td, _VALID_YAML))
        self.assertEqual(config_sha256(cfg), config_sha256(cfg.model_copy()))
        self.assertNotEqual(config_sha256(cfg), config_sha256(AppConfig()))


if __name__ == "__main__":
    unittest.main()
