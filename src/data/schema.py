"""
Canonical schema definitions for the Crop Yield Prediction service.

Holds the closed enumerations offered by the form, the immutable request
value object, and the pydantic models the AI response is loaded into.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------- Enumerations ----------

class CropType(str, Enum):
    MAIZE = "Maize"
    RICE = "Rice"
    WHEAT = "Wheat"
    BARLEY = "Barley"
    SOYBEANS = "Soybeans"


class SoilType(str, Enum):
    LOAMY = "Loamy"
    CLAY = "Clay"
    SANDY = "Sandy"
    SILTY = "Silty"
    PEATY = "Peaty"


class Suitability(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AnalysisFactor(str, Enum):
    """Input factors the sensitivity analysis is computed for."""
    RAINFALL = "rainfall"
    TEMPERATURE = "temperature"
    FERTILIZER = "fertilizer"

    @property
    def label(self) -> str:
        return FACTOR_DISPLAY[self]["label"]

    @property
    def x_label(self) -> str:
        return FACTOR_DISPLAY[self]["x_label"]

    @property
    def color(self) -> str:
        return FACTOR_DISPLAY[self]["color"]


FACTOR_DISPLAY = {
    AnalysisFactor.RAINFALL:    {"label": "Rainfall", "x_label": "Rainfall (mm)", "color": "#3b82f6"},
    AnalysisFactor.TEMPERATURE: {"label": "Temperature", "x_label": "Temperature (°C)", "color": "#ef4444"},
    AnalysisFactor.FERTILIZER:  {"label": "Fertilizer", "x_label": "Fertilizer (kg/ha)", "color": "#f97316"},
}

# Offsets of the five sensitivity points relative to the entered value
SENSITIVITY_OFFSETS = (-0.20, -0.10, 0.0, 0.10, 0.20)
EXPECTED_POINTS_PER_FACTOR = len(SENSITIVITY_OFFSETS)
EXPECTED_MODEL_COUNT = 3

NUMERIC_INPUT_FIELDS = ("rainfall", "temperature", "fertilizer", "pesticide")


# ---------- Input coercion ----------

def coerce_number(value, default: float = 0.0) -> float:
    """
    Coerce a raw form entry to a finite float.

    Empty strings, non-numeric text, None, NaN and infinities all become
    `default`. Numbers (and numeric strings) pass through as floats.
    """
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_int(value, default: int = 0) -> int:
    """Coerce a raw form entry to an integer, truncating fractional input."""
    return int(coerce_number(value, float(default)))


# ---------- Request value object ----------

@dataclass(frozen=True)
class PredictionInput:
    """Agronomic parameters for a single prediction request."""
    crop_type: CropType
    soil_type: SoilType
    rainfall: float
    temperature: float
    fertilizer: float
    pesticide: float
    year: int

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "crop_type", CropType(self.crop_type))
        object.__setattr__(self, "soil_type", SoilType(self.soil_type))
        for name in NUMERIC_INPUT_FIELDS:
            object.__setattr__(self, name, coerce_number(getattr(self, name)))
        object.__setattr__(self, "year", coerce_int(self.year))

    @classmethod
    def from_form(cls, form: Dict) -> "PredictionInput":
        """
        Build an input from raw form values (camelCase or snake_case keys).

        Missing numeric fields and unparseable entries default to 0.
        """
        def pick(snake: str, camel: str, default=None):
            if snake in form:
                return form[snake]
            return form.get(camel, default)

        return cls(
            crop_type=pick("crop_type", "cropType"),
            soil_type=pick("soil_type", "soilType"),
            rainfall=pick("rainfall", "rainfall"),
            temperature=pick("temperature", "temperature"),
            fertilizer=pick("fertilizer", "fertilizer"),
            pesticide=pick("pesticide", "pesticide"),
            year=pick("year", "year"),
        )


def default_form_values() -> Dict:
    """Initial values shown in the prediction form."""
    return {
        "cropType": CropType.MAIZE.value,
        "rainfall": 1200,
        "temperature": 25,
        "fertilizer": 150,
        "soilType": SoilType.LOAMY.value,
        "pesticide": 30,
        "year": datetime.now().year,
    }


# ---------- Response models ----------

class AnalysisDataPoint(BaseModel):
    """One (input value, predicted yield) pair of a sensitivity series."""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    value: float
    yield_: float = Field(..., alias="yield")


class SensitivityAnalysis(BaseModel):
    rainfall: List[AnalysisDataPoint] = []
    temperature: List[AnalysisDataPoint] = []
    fertilizer: List[AnalysisDataPoint] = []

    @field_validator("rainfall", "temperature", "fertilizer", mode="before")
    @classmethod
    def _null_series_is_empty(cls, value):
        return [] if value is None else value

    def series(self, factor: AnalysisFactor) -> List[AnalysisDataPoint]:
        return getattr(self, AnalysisFactor(factor).value)


class ModelMetrics(BaseModel):
    """Free-text metric ranges, for display only."""
    model_config = ConfigDict(populate_by_name=True)

    r_squared: str = Field("", alias="rSquared")
    mae: str = ""
    explanation: str = ""

    @field_validator("r_squared", "mae", "explanation", mode="before")
    @classmethod
    def _null_text_is_blank(cls, value):
        return "" if value is None else value


class ModelComparison(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_name: str = Field("", alias="modelName")
    pros: List[str] = []
    cons: List[str] = []
    suitability: Optional[Suitability] = None
    metrics: ModelMetrics = Field(default_factory=ModelMetrics)

    @field_validator("model_name", mode="before")
    @classmethod
    def _null_name_is_blank(cls, value):
        return "" if value is None else value

    @field_validator("pros", "cons", mode="before")
    @classmethod
    def _null_list_is_empty(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value

    @field_validator("metrics", mode="before")
    @classmethod
    def _null_metrics_are_blank(cls, value):
        return {} if value is None else value


class PredictionOutput(BaseModel):
    """Structured prediction returned by the external AI service."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    predicted_yield: float = Field(..., ge=0, alias="predictedYield")
    justification: str
    analysis: SensitivityAnalysis
    model_comparison: List[ModelComparison] = Field(..., alias="modelComparison")
