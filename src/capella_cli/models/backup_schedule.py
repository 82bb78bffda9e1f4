"""Bucket backup schedule wire payloads and state model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WeeklySchedule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_of_week: str = Field(alias="dayOfWeek")
    start_at: int = Field(alias="startAt", ge=0, le=23)
    incremental_every: int = Field(alias="incrementalEvery")
    retention_time: str = Field(alias="retentionTime")
    cost_optimized_retention: bool = Field(default=False, alias="costOptimizedRetention")


class BackupScheduleRequest(BaseModel):
    """Body of both the create (POST) and update (PUT) calls."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "weekly"
    weekly_schedule: WeeklySchedule = Field(alias="weeklySchedule")


class GetBackupScheduleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    weekly_schedule: WeeklySchedule = Field(alias="weeklySchedule")


class BackupScheduleState(BaseModel):
    organization_id: str | None = None
    project_id: str | None = None
    cluster_id: str | None = None
    bucket_id: str | None = None
    type: str = "weekly"
    weekly_schedule: WeeklySchedule | None = None

    @classmethod
    def from_response(
        cls,
        resp: GetBackupScheduleResponse,
        organization_id: str,
        project_id: str,
        cluster_id: str,
        bucket_id: str,
    ) -> BackupScheduleState:
        return cls(
            organization_id=organization_id,
            project_id=project_id,
            cluster_id=cluster_id,
            bucket_id=bucket_id,
            type=resp.type,
            weekly_schedule=resp.weekly_schedule,
        )
