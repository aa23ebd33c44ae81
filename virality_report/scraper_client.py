from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol

from apify_client import ApifyClient
from apify_client.errors import ApifyApiError

from .config_schema import ScraperConfig
from .errors import ScrapeError
from .platforms import detect_platform, profile_handle

ResultsType = Literal["details", "posts"]


@dataclass(frozen=True)
class ActorRunRef:
    actor_id: str
    run_id: str
    default_dataset_id: str


class ScraperLike(Protocol):
    def fetch_profile(self, url: str) -> Any: ...

    def fetch_posts(self, url: str) -> Any: ...


def _first_mapping(items: list[Any]) -> dict[str, Any] | None:
    for item in items:
        if isinstance(item, dict):
            return item
    return None


def build_run_input(
    platform: str | None,
    url: str,
    *,
    results_type: ResultsType,
    results_limit: int,
) -> dict[str, Any]:
    """
    Actor input for one profile URL.

    The TikTok and YouTube Actors only return videos; profile details are read from
    the first video, so `results_type` only matters for Instagram.
    """
    limit = int(results_limit)

    if platform == "tiktok":
        handle = profile_handle(url)
        if not handle:
            raise ScrapeError(f"TikTok profile url has no handle: {url}")
        return {
            "profiles": [handle],
            "resultsPerPage": limit,
            "shouldDownloadVideos": False,
            "shouldDownloadCovers": False,
        }

    if platform == "youtube":
        return {"startUrls": [{"url": url}], "maxResults": limit}

    return {"directUrls": [url], "resultsType": results_type, "resultsLimit": limit}


def _profile_from_item(platform: str | None, item: dict[str, Any]) -> dict[str, Any]:
    if platform == "tiktok":
        author = item.get("authorMeta")
        if isinstance(author, dict) and author:
            return author
    return item


class ProfileScraper:
    """
    Thin wrapper around the Apify scraper Actors for a single profile URL.

    The Actor is chosen by the URL's platform. Each fetch is one Actor run with a
    fixed timeout. Client-level retries are disabled.
    """

    def __init__(
        self,
        token: str,
        *,
        scraper: ScraperConfig,
        client: ApifyClient | None = None,
    ) -> None:
        self._cfg = scraper

        if client is not None:
            self._client = client
        else:
            self._client = ApifyClient(
                token=token,
                api_url=scraper.api_url,
                max_retries=0,
                timeout_secs=scraper.timeout_secs,
            )

    def run_once(self, url: str, *, results_type: ResultsType, results_limit: int) -> ActorRunRef:
        u = (url or "").strip()
        if not u:
            raise ScrapeError("profile url must be non-empty")

        platform = detect_platform(u)
        actor_id = self._cfg.actor_for(platform)
        run_input = build_run_input(
            platform, u, results_type=results_type, results_limit=results_limit
        )

        try:
            result = self._client.actor(actor_id).call(
                run_input=run_input,
                timeout_secs=self._cfg.timeout_secs,
            )
        except ApifyApiError as e:
            raise ScrapeError(f"Apify Actor call failed ({actor_id}): {e}") from e
        except Exception as e:
            raise ScrapeError(f"Unexpected error while calling Apify Actor ({actor_id}): {e}") from e

        if result is None:
            raise ScrapeError(f"Apify Actor run failed ({actor_id})")

        run_id = (result.get("id") or "").strip()
        dataset_id = (result.get("defaultDatasetId") or "").strip()
        if not run_id or not dataset_id:
            raise ScrapeError(
                f"Apify Actor run response missing run id or default dataset id: {result}"
            )

        return ActorRunRef(actor_id=actor_id, run_id=run_id, default_dataset_id=dataset_id)

    def fetch_dataset_items(self, dataset_id: str, *, limit: int | None = None) -> list[Any]:
        ds = (dataset_id or "").strip()
        if not ds:
            raise ScrapeError("dataset_id must be a non-empty string")

        try:
            return list(self._client.dataset(ds).iterate_items(limit=limit, clean=True))
        except ApifyApiError as e:
            raise ScrapeError(f"Failed to read dataset items ({ds}): {e}") from e
        except Exception as e:
            raise ScrapeError(f"Unexpected error while reading dataset ({ds}): {e}") from e

    def fetch_profile(self, url: str) -> dict[str, Any]:
        """Return the profile details object; an empty dataset is an error."""
        run = self.run_once(url, results_type="details", results_limit=1)
        items = self.fetch_dataset_items(run.default_dataset_id, limit=1)
        item = _first_mapping(items)
        if item is None:
            raise ScrapeError(f"Apify Actor returned no profile details for {url}")
        return _profile_from_item(detect_platform(url), item)

    def fetch_posts(self, url: str) -> list[Any]:
        """Return the raw posts payload: a bare list of dataset items."""
        limit = self._cfg.posts_limit
        run = self.run_once(url, results_type="posts", results_limit=limit)
        return self.fetch_dataset_items(run.default_dataset_id, limit=limit)
