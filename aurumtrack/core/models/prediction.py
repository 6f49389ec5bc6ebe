"""Gap prediction models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PredictionModel(BaseModel):
    """Fixed projection coefficient for one international/local pair."""

    model_config = ConfigDict(frozen=True)

    international_key: str
    local_key: str
    coefficient: float = Field(gt=0.0, le=1.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)  # informational

    @model_validator(mode="after")
    def _distinct_keys(self) -> "PredictionModel":
        if self.international_key == self.local_key:
            raise ValueError("international_key and local_key must differ")
        return self

    @property
    def pair(self) -> tuple[str, str]:
        return (self.international_key, self.local_key)


class Prediction(BaseModel):
    """Result of projecting an overnight move onto a local instrument."""

    model_config = ConfigDict(frozen=True)

    model: PredictionModel
    anchor_price: float | None = None
    international_price: float | None = None
    local_price: float | None = None
    overnight_move: float | None = None
    expected_open: float | None = None

    @property
    def available(self) -> bool:
        return self.expected_open is not None

    @property
    def overnight_percent(self) -> float | None:
        if self.overnight_move is None:
            return None
        return self.overnight_move * 100.0
