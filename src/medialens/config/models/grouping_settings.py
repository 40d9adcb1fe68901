"""File grouping configuration models.

This module contains configuration models for batch grouping, including
the evidence limits of the anime heuristic and the rule engine.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

ONE_MEGABYTE = 1024 * 1024


class GroupingSettings(BaseModel):
    """Configuration for file grouping operations.

    Attributes:
        min_video_size_bytes: Videos must be larger than this before the
                              media probe is consulted. Default: 1 MiB
        anime_max_duration_minutes: Probed videos shorter than this count as
                                    anime episodes. Default: 60
        sibling_fallback_min_files: Minimum video siblings in a folder before
                                    series names are detected from the whole
                                    folder. Default: 5
        common_number_min_sets: Distinct number sets among siblings needed by
                                the common-number rule. Default: 10
        max_input_files: Maximum number of input files to process in a single
                        grouping operation. Exceeding this will raise an error.
                        Default: 10000 (DoS protection)

    Example:
        >>> settings = GroupingSettings(anime_max_duration_minutes=45)
        >>> settings.common_number_min_sets
        10
    """

    min_video_size_bytes: int = Field(
        default=ONE_MEGABYTE,
        ge=0,
        description="Videos must be larger than this before the media probe is consulted",
    )

    anime_max_duration_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Probed videos shorter than this count as anime episodes",
    )

    sibling_fallback_min_files: int = Field(
        default=5,
        ge=1,
        le=10000,
        description="Minimum video siblings before series names are detected from the folder",
    )

    common_number_min_sets: int = Field(
        default=10,
        ge=1,
        le=10000,
        description="Distinct sibling number sets needed by the common-number rule",
    )

    max_input_files: int = Field(
        default=10000,
        ge=1,
        le=1000000,
        description=(
            "Maximum number of input files to process in a single grouping operation. "
            "Exceeding this will raise an error (DoS protection)"
        ),
    )

    @field_validator("max_input_files")
    @classmethod
    def validate_max_input_files(cls, v: int) -> int:
        """Validate max_input_files is reasonable."""
        if v < 1:
            msg = "max_input_files must be at least 1"
            raise ValueError(msg)
        if v > 1000000:
            msg = "max_input_files cannot exceed 1000000 (DoS protection)"
            raise ValueError(msg)
        return v


__all__ = ["GroupingSettings"]
