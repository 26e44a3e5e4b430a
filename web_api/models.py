from pydantic import BaseModel, Field


class SuiteInfo(BaseModel):
    id: str
    name: str
    description: str


class TapRequest(BaseModel):
    timestamp: float | None = Field(
        default=None, description="Tap time in seconds; server clock if omitted"
    )


class TempoUpdate(BaseModel):
    bpm: float = Field(allow_inf_nan=False)


class NudgeRequest(BaseModel):
    delta: float = Field(allow_inf_nan=False)


class KeyInfo(BaseModel):
    key: str
    label: str
    related_keys: list[str]


class KeyCell(BaseModel):
    note: str
    is_selected: bool
    is_related: bool


class KeyGridResponse(BaseModel):
    note: str
    minor: bool
    grid: list[KeyCell]


class EvaluationRequest(BaseModel):
    n_taps: int = Field(default=16, ge=2, le=256)


class EvaluationResult(BaseModel):
    sequence_name: str
    status: str
    metrics: dict | None = None
    error: str | None = None
