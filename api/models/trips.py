"""Trip planner models."""

from pydantic import BaseModel, ConfigDict, Field


class TripPlanRequest(BaseModel):
    """Destination and date range for an itinerary."""

    destination: str | None = None
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_complete(self) -> bool:
        return bool(self.destination and self.start_date and self.end_date)


class NightPlanResult(BaseModel):
    """Night plan content and where it came from."""

    content: str
    source: str = Field(description="'cache' or 'generated'")


class BatchRunSummary(BaseModel):
    """Outcome of a batch generation run."""

    processed: int = 0
    generated: int = 0
    failed: int = 0
    message: str = ""
