"""Pydantic schemas for records of the external launch schedule feed."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ExternalLaunchRecord(BaseModel):
    """A single scheduled or past launch as published by the feed.

    Only the fields used for conflict detection are kept; everything else in
    the feed payload is ignored. The timestamp stays a raw string because a
    malformed value must only disqualify its own record, not the whole feed.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    site_id: str | None = Field(
        default=None,
        validation_alias="launchpad",
        description="Launchpad identifier the launch is scheduled on.",
    )
    name: str | None = Field(default=None, description="Mission display name.")
    timestamp_local: str | None = Field(
        default=None,
        validation_alias="date_local",
        description="Launch time in the launch site's local offset (RFC 3339).",
    )
    record_id: str | None = Field(
        default=None,
        validation_alias="id",
        description="Feed-assigned launch identifier.",
    )


LaunchFeedPayload = TypeAdapter(list[ExternalLaunchRecord])
