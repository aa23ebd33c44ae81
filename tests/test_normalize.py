from __future__ import annotations

import unittest
from datetime import datetime, timezone

from virality_report.normalize import coerce_number, extract_fields, extract_timestamp
from virality_report.post import NormalizedPost, RankedPost


class TestExtractFields(unittest.TestCase):
    def test_graphql_style_post(self) -> None:
        post = {
            "video_view_count": 1000,
            "edge_liked_by": {"count": 120},
            "edge_media_to_comment": {"count": 14},
            "edge_media_to_caption": {"edges": [{"node": {"text": "  Leg day  "}}]},
            "display_url": "https://cdn.example/1.jpg",
        }

        out = extract_fields(post)
        self.assertEqual(out.views, 1000)
        self.assertEqual(out.likes, 120)
        self.assertEqual(out.comments, 14)
        self.assertEqual(out.shares, 0)
        self.assertEqual(out.bookmarks, 0)
        self.assertEqual(out.caption, "Leg day")
        self.assertEqual(out.thumbnail_url, "https://cdn.example/1.jpg")

    def test_key_priority_order(self) -> None:
        post = {
            "view_count": 10,
            "play_count": 20,
            "like_count": 1,
            "likes": 99,
            "comment_count": 2,
            "comments": 50,
            "saved_count": 3,
            "bookmarks": 70,
            "share_count": 4,
            "shareCount": 80,
        }
        out = extract_fields(post)
        self.assertEqual(
            (out.views, out.likes, out.comments, out.bookmarks, out.shares),
            (10, 1, 2, 3, 4),
        )

    def test_zero_and_invalid_values_fall_through(self) -> None:
        post = {
            "view_count": 0,
            "play_count": "not a number",
            "video_view_count": None,
            "views": "250",
            "like_count": True,
            "likes": 8,
        }
        out = extract_fields(post)
        self.assertEqual(out.views, 250)
        self.assertEqual(out.likes, 8)

    def test_nested_share_count(self) -> None:
        self.assertEqual(extract_fields({"stats": {"shareCount": 12}}).shares, 12)
        self.assertEqual(extract_fields({"repost_count": 5, "stats": {"shareCount": 12}}).shares, 5)

    def test_apify_camel_case_counters(self) -> None:
        out = extract_fields(
            {"videoViewCount": 900, "likesCount": 45, "commentsCount": 6, "displayUrl": "u"}
        )
        self.assertEqual((out.views, out.likes, out.comments), (900, 45, 6))
        self.assertEqual(out.thumbnail_url, "u")

    def test_missing_fields_default(self) -> None:
        self.assertEqual(extract_fields({}), NormalizedPost())
        self.assertEqual(extract_fields(None), NormalizedPost())
        self.assertEqual(extract_fields("post"), NormalizedPost())

    def test_caption_order_and_arrays(self) -> None:
        self.assertEqual(extract_fields({"caption": "a", "title": "b"}).caption, "a")
        self.assertEqual(extract_fields({"caption": "   ", "title": "b"}).caption, "b")
        self.assertEqual(extract_fields({"caption": {"text": "obj"}}).caption, "obj")
        self.assertEqual(
            extract_fields({"text": ["one", {"text": "two"}, "", {"x": 1}, 3]}).caption,
            "one two",
        )
        self.assertIsNone(extract_fields({"caption": ["", "  "]}).caption)
        self.assertEqual(
            extract_fields(
                {"node": {"edge_media_to_caption": {"edges": [{"node": {"text": "nested"}}]}}}
            ).caption,
            "nested",
        )
        self.assertEqual(extract_fields({"caption_text": "ct"}).caption, "ct")

    def test_thumbnail_fallbacks(self) -> None:
        cases = [
            ({"thumbnail_src": "a", "display_url": "b"}, "a"),
            ({"image_versions2": {"candidates": [{"url": "c"}, {"url": "d"}]}}, "c"),
            ({"node": {"display_url": "e"}}, "e"),
            ({"thumbnail_resources": [{"src": "f"}]}, "f"),
            ({"cover_url": "g"}, "g"),
            ({"display_url": "", "thumbnail": "h"}, "h"),
            ({"image_versions2": {"candidates": []}}, None),
        ]
        for post, expected in cases:
            with self.subTest(post=post):
                self.assertEqual(extract_fields(post).thumbnail_url, expected)

    def test_extract_is_idempotent(self) -> None:
        once = extract_fields(
            {
                "play_count": 300,
                "likes": 10,
                "comment_count": 3,
                "shares": 1,
                "bookmark_count": 2,
                "title": "Hello",
                "cover_url": "https://x/y.jpg",
            }
        )
        self.assertEqual(extract_fields(once), once)
        self.assertEqual(extract_fields(once.as_dict()), once)

    def test_ranked_post_reduces_to_normalized_post(self) -> None:
        ranked = RankedPost(views=10, likes=2, rank=1, engagement_pct=20.0)
        self.assertEqual(extract_fields(ranked), NormalizedPost(views=10, likes=2))


class TestCoerceNumber(unittest.TestCase):
    def test_parses_numbers_and_numeric_strings(self) -> None:
        self.assertEqual(coerce_number(5), 5)
        self.assertEqual(coerce_number(2.5), 2.5)
        self.assertEqual(coerce_number(" 12 "), 12)
        self.assertEqual(coerce_number("1.5"), 1.5)

    def test_rejects_non_numbers(self) -> None:
        for value in (None, True, False, "", "abc", float("nan"), float("inf"), "inf", [], {}):
            with self.subTest(value=value):
                self.assertIsNone(coerce_number(value))

    def test_integers_beyond_float_range_are_rejected(self) -> None:
        self.assertIsNone(coerce_number(10**400))
        self.assertIsNone(coerce_number(-(10**400)))
        self.assertEqual(coerce_number(10**300), 10**300)

        out = extract_fields({"like_count": 10**400, "likes": 7})
        self.assertEqual(out.likes, 7)


class TestExtractTimestamp(unittest.TestCase):
    def test_epoch_seconds_and_millis(self) -> None:
        expected = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(extract_timestamp({"taken_at_timestamp": 1735689600}), expected)
        self.assertEqual(extract_timestamp({"createTime": 1735689600000}), expected)
        self.assertEqual(extract_timestamp({"taken_at": "1735689600"}), expected)

    def test_iso_strings(self) -> None:
        self.assertEqual(
            extract_timestamp({"timestamp": "2025-01-01T00:00:00Z"}),
            datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        self.assertEqual(
            extract_timestamp({"publishedAt": "2025-01-01T00:00:00"}),
            datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

    def test_invalid_values_fall_through(self) -> None:
        post = {"taken_at_timestamp": "yesterday", "date": "2025-02-03"}
        self.assertEqual(
            extract_timestamp(post), datetime(2025, 2, 3, tzinfo=timezone.utc)
        )
        self.assertIsNone(extract_timestamp({"timestamp": None}))
        self.assertIsNone(extract_timestamp("2025-01-01"))


if __name__ == "__main__":
    unittest.main()
