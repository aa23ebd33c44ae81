from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from .config import config_sha256
from .config_schema import AppConfig
from .errors import ScrapeError, StorageError
from .event_log import EventLogger, NullEventLogger
from .metrics import aggregate
from .platforms import detect_platform, platform_label, profile_handle, validate_profile_url
from .post import AggregateMetrics, RankedPost
from .profile import ProfileOverview, profile_overview, resolve_followers
from .quality import profile_quality_score
from .ranking import top_posts
from .recommendations import static_recommendations
from .scraper_client import ScraperLike
from .shapes import detect_posts_shape, normalize_posts
from .storage import CreatorRecord, SQLiteCreatorStore

ReportStatus = Literal["completed", "partial", "pending"]


@dataclass(frozen=True)
class ViralityReport:
    report_id: int | None
    profile_url: str
    platform: str | None
    status: ReportStatus

    overview: ProfileOverview
    followers: int | float | None
    metrics: AggregateMetrics
    top_posts: tuple[RankedPost, ...]
    profile_score: int | None
    recommendations: tuple[str, ...]

    # Collaborator failures keyed by stage: store, profile, posts, persist.
    errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def platform_label(self) -> str:
        return platform_label(self.platform)

    def as_dict(self) -> dict[str, Any]:
        return {
            "report_id": self.report_id,
            "profile_url": self.profile_url,
            "platform": self.platform_label,
            "status": self.status,
            "overview": self.overview.as_dict(),
            "followers": self.followers,
            "metrics": self.metrics.as_dict(),
            "top_posts": [p.as_dict() for p in self.top_posts],
            "profile_score": self.profile_score,
            "recommendations": list(self.recommendations),
            "errors": dict(self.errors),
        }


def build_report(
    *,
    report_id: int | None,
    profile_url: str,
    platform: str | None,
    profile_data: Any,
    posts_data: Any,
    profile_score: int | None,
    config: AppConfig,
    status: ReportStatus,
    errors: Mapping[str, str] | None = None,
) -> ViralityReport:
    """Compose the report from already-fetched payloads. Pure; no I/O."""
    posts = normalize_posts(posts_data)

    overview = profile_overview(profile_data)
    if overview.username is None and profile_url:
        handle = profile_handle(profile_url)
        if handle:
            overview = ProfileOverview(
                avatar_url=overview.avatar_url,
                name=overview.name or handle,
                username=handle,
                bio=overview.bio,
                is_verified=overview.is_verified,
            )

    return ViralityReport(
        report_id=report_id,
        profile_url=profile_url,
        platform=platform,
        status=status,
        overview=overview,
        followers=resolve_followers(profile_data),
        metrics=aggregate(posts),
        top_posts=tuple(top_posts(posts, config.report.top_n)),
        profile_score=profile_score,
        recommendations=tuple(static_recommendations()),
        errors=dict(errors or {}),
    )


def generate_report(
    url: Any,
    *,
    config: AppConfig,
    store: SQLiteCreatorStore,
    scraper: ScraperLike,
    logger: EventLogger | None = None,
) -> ViralityReport:
    """
    Run one submission end to end: record, scrape, score, persist.

    Raises ReportInputError for unsupported URLs. Store and scraper failures are
    reported in `errors` and the report is built from whatever was fetched.
    """
    log = logger or NullEventLogger()

    profile_url = validate_profile_url(url)
    platform = detect_platform(profile_url)
    errors: dict[str, str] = {}

    log.bind_report(None)
    log.info("report_started", url=profile_url, platform=platform)

    report_id: int | None = None
    try:
        record = store.create_creator(profile_url, platform=platform)
        report_id = record.id
        log.bind_report(report_id)
        log.info("creator_created", url=profile_url)
    except StorageError as e:
        errors["store"] = str(e)
        log.exception("creator_create_failed", exc=e, url=profile_url)

    profile_data: Any = None
    try:
        profile_data = scraper.fetch_profile(profile_url)
        log.info("profile_fetched", url=profile_url)
    except ScrapeError as e:
        errors["profile"] = str(e)
        log.exception("profile_fetch_failed", exc=e, url=profile_url)

    posts_data: Any = None
    try:
        posts_data = scraper.fetch_posts(profile_url)
        log.info("posts_fetched", url=profile_url, shape=detect_posts_shape(posts_data))
    except ScrapeError as e:
        errors["posts"] = str(e)
        log.exception("posts_fetch_failed", exc=e, url=profile_url)

    posts = normalize_posts(posts_data)
    score = profile_quality_score(profile_data, posts, config.scoring)
    if score is None:
        log.warning("profile_score_unavailable", url=profile_url, posts=len(posts))
    else:
        log.info("profile_scored", url=profile_url, posts=len(posts), profile_score=score)

    if report_id is not None:
        try:
            store.save_scrape_results(
                report_id,
                profile_data=profile_data,
                posts_data=posts_data,
                profile_score=score,
                config_hash=config_sha256(config),
                scrape_errors=errors,
            )
            log.info("scrape_results_saved", url=profile_url)
        except StorageError as e:
            errors["persist"] = str(e)
            log.exception("scrape_results_save_failed", exc=e, url=profile_url)

    report = build_report(
        report_id=report_id,
        profile_url=profile_url,
        platform=platform,
        profile_data=profile_data,
        posts_data=posts_data,
        profile_score=score,
        config=config,
        status="partial" if errors else "completed",
        errors=errors,
    )
    log.info("report_completed", url=profile_url, status=report.status, errors=sorted(errors))
    return report


def report_from_record(record: CreatorRecord, *, config: AppConfig) -> ViralityReport:
    """
    Rebuild a report from a stored creator without scraping.

    The stored profile score is used as-is; it is never recomputed. Stage errors saved
    with the scrape make the report partial.
    """
    platform = record.platform or detect_platform(record.url)
    status: ReportStatus
    if not record.scraped_at:
        status = "pending"
    elif record.scrape_errors:
        status = "partial"
    else:
        status = "completed"

    return build_report(
        report_id=record.id,
        profile_url=record.url,
        platform=platform,
        profile_data=record.profile_data,
        posts_data=record.posts_data,
        profile_score=record.profile_score,
        config=config,
        status=status,
        errors=record.scrape_errors,
    )
