from __future__ import annotations

import math
import re
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


PositiveInt = Annotated[int, Field(ge=1)]
PositiveFloat = Annotated[float, Field(gt=0.0)]
UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


class ActorsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    instagram: str = "apify/instagram-scraper"
    tiktok: str = "clockworks/tiktok-scraper"
    youtube: str = "streamers/youtube-scraper"

    @field_validator("instagram", "tiktok", "youtube")
    @classmethod
    def _actor_id_must_be_non_empty(cls, v: str) -> str:
        actor_id = (v or "").strip()
        if not actor_id:
            raise ValueError("must be a non-empty Apify Actor id")
        return actor_id


class ScraperConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    token_env: str = "APIFY_TOKEN"
    api_url: str | None = None
    actors: ActorsConfig = Field(default_factory=ActorsConfig)
    posts_limit: PositiveInt = 30
    timeout_secs: PositiveInt = 20

    @field_validator("token_env")
    @classmethod
    def _token_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)

    @field_validator("api_url")
    @classmethod
    def _api_url_must_be_http(cls, v: str | None) -> str | None:
        if v is None:
            return None
        url = v.strip().rstrip("/")
        if not url:
            return None
        if not url.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return url

    def actor_for(self, platform: str | None) -> str:
        """Actor id for a platform; unknown platforms use the Instagram actor."""
        if platform == "tiktok":
            return self.actors.tiktok
        if platform == "youtube":
            return self.actors.youtube
        return self.actors.instagram


class ScoringConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    window_posts: PositiveInt = 30

    engagement_low: float = Field(0.002, ge=0.0)
    engagement_high: PositiveFloat = 0.06
    comment_ratio_low: float = Field(0.02, ge=0.0)
    comment_ratio_high: PositiveFloat = 0.25

    cadence_weeks: PositiveInt = 12
    cadence_peak_per_week: PositiveFloat = 3.0
    cadence_zero_per_week: PositiveFloat = 7.0

    weight_engagement: UnitFloat = 0.5
    weight_frequency: UnitFloat = 0.3
    weight_comments: UnitFloat = 0.2

    @model_validator(mode="after")
    def _ranges_must_be_ordered(self) -> "ScoringConfig":
        if self.engagement_high <= self.engagement_low:
            raise ValueError("engagement_high must be > engagement_low")
        if self.comment_ratio_high <= self.comment_ratio_low:
            raise ValueError("comment_ratio_high must be > comment_ratio_low")
        if self.cadence_zero_per_week <= self.cadence_peak_per_week:
            raise ValueError("cadence_zero_per_week must be > cadence_peak_per_week")

        total = self.weight_engagement + self.weight_frequency + self.weight_comments
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError("scoring weights must sum to 1.0")
        return self


class ReportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    top_n: PositiveInt = 5


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
