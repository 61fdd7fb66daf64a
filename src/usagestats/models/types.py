"""Pydantic models for usagestats.

LaunchStats validates what the host application records per launch.
DailyReport is the immutable snapshot submitted to the collection endpoint;
its wire keys are fixed by the endpoint and produced by to_payload().
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ReportStatus = Literal["disabled", "not_due", "submitted", "failed"]


class LaunchStats(BaseModel):
    """Timings for a single launch, in milliseconds."""

    model_config = ConfigDict(populate_by_name=True)

    main_ready_time: float = Field(ge=0, allow_inf_nan=False, alias="mainReadyTime")
    load_time: float = Field(ge=0, allow_inf_nan=False, alias="loadTime")
    renderer_ready_time: float = Field(ge=0, allow_inf_nan=False, alias="rendererReadyTime")


class DailyReport(BaseModel):
    """Aggregated daily report. Built per submission attempt, never persisted."""

    model_config = ConfigDict(frozen=True)

    app_version: str
    os_version: str
    main_ready_time: float
    load_time: float
    renderer_ready_time: float
    commits: int = Field(ge=0)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON object expected by the collection endpoint."""
        return {
            "version": self.app_version,
            "osVersion": self.os_version,
            "mainReadyTime": self.main_ready_time,
            "loadTime": self.load_time,
            "rendererReadyTime": self.renderer_ready_time,
            "commits": self.commits,
        }


class HttpRequest(BaseModel):
    """Request handed to a transport."""

    url: str
    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any]
