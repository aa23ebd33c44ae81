from __future__ import annotations

import unittest

from virality_report.errors import ReportInputError
from virality_report.platforms import (
    detect_platform,
    platform_label,
    profile_handle,
    validate_profile_url,
)


class TestPlatforms(unittest.TestCase):
    def test_validate_accepts_supported_profiles(self) -> None:
        for url in (
            "https://www.instagram.com/jane/",
            "http://tiktok.com/@jane",
            "https://youtube.com/@jane",
        ):
            with self.subTest(url=url):
                self.assertEqual(validate_profile_url(f"  {url} "), url)

    def test_validate_rejects_other_urls(self) -> None:
        for url in (None, "", "   ", 42, "instagram.com/jane", "https://twitter.com/jane", "ftp://instagram.com/x"):
            with self.subTest(url=url):
                with self.assertRaises(ReportInputError):
                    validate_profile_url(url)

    def test_detect_platform(self) -> None:
        self.assertEqual(detect_platform("https://www.instagram.com/jane"), "instagram")
        self.assertEqual(detect_platform("https://m.tiktok.com/@jane"), "tiktok")
        self.assertEqual(detect_platform("youtube.com/@jane"), "youtube")
        self.assertIsNone(detect_platform("https://example.com/jane"))
        self.assertIsNone(detect_platform(None))

    def test_labels(self) -> None:
        self.assertEqual(platform_label("tiktok"), "TikTok")
        self.assertEqual(platform_label(None), "Unknown")

    def test_profile_handle(self) -> None:
        self.assertEqual(profile_handle("https://www.instagram.com/jane/"), "jane")
        self.assertEqual(profile_handle("https://tiktok.com/@jane?lang=en"), "jane")
        self.assertIsNone(profile_handle("https://youtube.com/"))

    def test_profile_handle_skips_youtube_path_prefixes(self) -> None:
        self.assertEqual(profile_handle("https://www.youtube.com/channel/UC123abc"), "UC123abc")
        self.assertEqual(profile_handle("https://youtube.com/c/JaneTrains/videos"), "JaneTrains")
        self.assertEqual(profile_handle("https://www.youtube.com/user/janetrains"), "janetrains")
        self.assertIsNone(profile_handle("https://www.youtube.com/channel/"))
        self.assertEqual(profile_handle("https://www.instagram.com/c/"), "c")


if __name__ == "__main__":
    unittest.main()
