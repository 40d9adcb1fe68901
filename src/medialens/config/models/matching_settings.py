"""Candidate matching configuration models.

Thresholds used by the spacing-free fallbacks and the probable-match
filter, plus the start-offset limit of the series-name sequence matcher.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class MatchingSettings(BaseModel):
    """Configuration for catalog candidate matching.

    Attributes:
        min_query_length: Minimum significant characters of a query
        movie_without_spacing_threshold: Similarity needed by the
            spacing-free movie matcher in strict mode
        movie_without_spacing_threshold_lenient: Same, non-strict mode
        series_without_spacing_threshold: Similarity needed by the
            spacing-free series matcher in strict mode
        series_without_spacing_threshold_lenient: Same, non-strict mode
        probable_match_threshold: Similarity needed by get_probable_matches
            when strict and more than one option exists
        probable_match_threshold_lenient: Same, otherwise
        probable_match_sanity: Sanity floor when strict
        probable_match_sanity_lenient: Sanity floor otherwise
        series_sequence_max_start: Start-offset limit for common series names

    Example:
        >>> settings = MatchingSettings(min_query_length=4)
        >>> settings.movie_without_spacing_threshold
        0.9
    """

    min_query_length: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Minimum significant characters of a query after normalization",
    )

    movie_without_spacing_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    movie_without_spacing_threshold_lenient: float = Field(default=0.5, ge=0.0, le=1.0)
    series_without_spacing_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    series_without_spacing_threshold_lenient: float = Field(default=0.5, ge=0.0, le=1.0)

    probable_match_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    probable_match_threshold_lenient: float = Field(default=0.6, ge=0.0, le=1.0)
    probable_match_sanity: float = Field(default=0.5, ge=0.0, le=1.0)
    probable_match_sanity_lenient: float = Field(default=0.2, ge=0.0, le=1.0)

    series_sequence_max_start: int = Field(
        default=3,
        ge=-1,
        le=100,
        description="Start-offset limit of the common series-name sequence (-1 = unbounded)",
    )

    @model_validator(mode="after")
    def validate_threshold_order(self) -> MatchingSettings:
        """Strict thresholds must not be looser than their lenient counterparts."""
        pairs = (
            ("movie_without_spacing_threshold", "movie_without_spacing_threshold_lenient"),
            ("series_without_spacing_threshold", "series_without_spacing_threshold_lenient"),
            ("probable_match_threshold", "probable_match_threshold_lenient"),
            ("probable_match_sanity", "probable_match_sanity_lenient"),
        )
        for strict_name, lenient_name in pairs:
            if getattr(self, strict_name) < getattr(self, lenient_name):
                msg = f"{strict_name} must be >= {lenient_name}"
                raise ValueError(msg)
        return self

    def without_spacing_threshold(self, movie: bool, strict: bool) -> float:
        if movie:
            return self.movie_without_spacing_threshold if strict else self.movie_without_spacing_threshold_lenient
        return self.series_without_spacing_threshold if strict else self.series_without_spacing_threshold_lenient


__all__ = ["MatchingSettings"]
