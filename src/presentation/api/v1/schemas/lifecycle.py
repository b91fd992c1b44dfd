from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class StepResultResponse(BaseModel):
    action: str
    entity: str
    target_id: int
    outcome: str
    affected: int
    reason: str | None = None


class CascadeReportResponse(BaseModel):
    """Per-step outcome of a completed lifecycle operation"""

    root_type: str
    root_id: int
    operation: str
    steps: list[StepResultResponse]
    skipped: int

    @classmethod
    def from_report(cls, report) -> "CascadeReportResponse":
        plan = report.plan
        return cls(
            root_type=plan.root_type.value,
            root_id=plan.root_id,
            operation=plan.operation.value,
            steps=[
                StepResultResponse(
                    action=r.step.action.value,
                    entity=r.step.entity.value,
                    target_id=r.step.target_id,
                    outcome=r.outcome.value,
                    affected=r.affected,
                    reason=r.reason,
                )
                for r in report.results
            ],
            skipped=len(report.skipped),
        )


class BatchResultResponse(BaseModel):
    successful: int
    failed: int
    failures: list[tuple[int, str]] = Field(default_factory=list)


class NextIdResponse(BaseModel):
    table: str
    next_id: int


class CampaignValidationResponse(BaseModel):
    accepted: bool
    reason: str | None = None


class CampaignPeriodQuery(BaseModel):
    start_date: date
    end_date: date


class HistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    operation: str
    entity_type: str
    entity_id: int
    details: str
    user_id: int | None
    created_at: datetime
