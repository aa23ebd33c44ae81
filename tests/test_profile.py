from __future__ import annotations

import unittest

from virality_report.profile import ProfileOverview, profile_overview, resolve_followers


class TestResolveFollowers(unittest.TestCase):
    def test_field_priority(self) -> None:
        profile = {"follower_count": 0, "followers_count": 250, "followers": 999}
        self.assertEqual(resolve_followers(profile), 250)

    def test_platform_specific_fields(self) -> None:
        cases = [
            ({"edge_followed_by": {"count": 10}}, 10),
            ({"stats": {"followerCount": 20}}, 20),
            ({"authorMeta": {"fans": 30}}, 30),
            ({"subscriberCount": "40"}, 40),
            ({"numberOfSubscribers": 50}, 50),
        ]
        for profile, expected in cases:
            with self.subTest(profile=profile):
                self.assertEqual(resolve_followers(profile), expected)

    def test_unknown_followers(self) -> None:
        for profile in (None, {}, {"followers": -5}, {"followers": "many"}, "profile"):
            with self.subTest(profile=profile):
                self.assertIsNone(resolve_followers(profile))


class TestProfileOverview(unittest.TestCase):
    def test_graphql_user_shape(self) -> None:
        profile = {
            "data": {
                "user": {
                    "username": "jane",
                    "full_name": "Jane Doe",
                    "biography": "Coach",
                    "is_verified": True,
                    "hd_profile_pic_url_info": {"url": "https://cdn/a.jpg"},
                }
            }
        }
        self.assertEqual(
            profile_overview(profile),
            ProfileOverview(
                avatar_url="https://cdn/a.jpg",
                name="Jane Doe",
                username="jane",
                bio="Coach",
                is_verified=True,
            ),
        )

    def test_name_falls_back_to_username(self) -> None:
        overview = profile_overview({"user": {"username": "jane", "full_name": "  "}})
        self.assertEqual(overview.name, "jane")
        self.assertFalse(overview.is_verified)

    def test_tiktok_author_meta(self) -> None:
        author = {
            "name": "jane",
            "nickName": "Jane Trains",
            "signature": "Daily handstands",
            "avatar": "https://cdn/t.jpg",
            "verified": True,
            "fans": 5400,
        }
        overview = profile_overview(author)
        self.assertEqual(overview.name, "Jane Trains")
        self.assertEqual(overview.bio, "Daily handstands")
        self.assertEqual(overview.avatar_url, "https://cdn/t.jpg")
        self.assertTrue(overview.is_verified)
        self.assertEqual(resolve_followers(author), 5400)

    def test_youtube_video_item(self) -> None:
        item = {
            "title": "Planche basics",
            "channelName": "Jane Trains",
            "channelDescription": "Calisthenics channel",
            "numberOfSubscribers": 12000,
            "isChannelVerified": True,
        }
        overview = profile_overview(item)
        self.assertEqual(overview.name, "Jane Trains")
        self.assertEqual(overview.bio, "Calisthenics channel")
        self.assertTrue(overview.is_verified)

    def test_empty_profile(self) -> None:
        self.assertEqual(profile_overview(None), ProfileOverview())


if __name__ == "__main__":
    unittest.main()
