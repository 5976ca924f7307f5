"""
Pydantic request/response schemas for the FastAPI yield prediction service.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.charts.sensitivity import Padding, Viewport
from src.data.schema import (
    AnalysisDataPoint, AnalysisFactor, CropType, PredictionInput, SoilType,
    coerce_int, coerce_number,
)


class PredictionRequest(BaseModel):
    """Input schema for /predict endpoint. Non-numeric entries become 0."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [{
                "cropType": "Maize", "soilType": "Loamy", "rainfall": 1200,
                "temperature": 25, "fertilizer": 150, "pesticide": 30, "year": 2024,
            }]
        },
    )

    crop_type: CropType = Field(..., alias="cropType", description="Crop to predict for")
    soil_type: SoilType = Field(..., alias="soilType", description="Soil type of the field")
    rainfall: float = Field(0, ge=0, description="Average annual rainfall (mm)")
    temperature: float = Field(0, ge=0, description="Average temperature (°C)")
    fertilizer: float = Field(0, ge=0, description="Fertilizer applied (kg/ha)")
    pesticide: float = Field(0, ge=0, description="Pesticide applied (kg/ha)")
    year: int = Field(0, description="Harvest year")

    @field_validator("rainfall", "temperature", "fertilizer", "pesticide", mode="before")
    @classmethod
    def _coerce_number(cls, value):
        return coerce_number(value)

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value):
        return coerce_int(value)

    def to_input(self) -> PredictionInput:
        return PredictionInput.from_form(self.model_dump())


class PaddingModel(BaseModel):
    top: float = Field(20, ge=0)
    right: float = Field(20, ge=0)
    bottom: float = Field(50, ge=0)
    left: float = Field(60, ge=0)


class ViewportModel(BaseModel):
    width: float = Field(350, gt=0)
    height: float = Field(250, gt=0)
    padding: PaddingModel = Field(default_factory=PaddingModel)

    def to_viewport(self) -> Viewport:
        return Viewport(
            width=self.width,
            height=self.height,
            padding=Padding(**self.padding.model_dump()),
        )


class ChartRequest(BaseModel):
    """Input schema for /chart/layout."""
    series: List[AnalysisDataPoint]
    viewport: ViewportModel = Field(default_factory=ViewportModel)


class SvgChartRequest(ChartRequest):
    """Input schema for /chart/svg."""
    factor: AnalysisFactor = AnalysisFactor.RAINFALL
    y_label: str = "Predicted Yield (kg/ha)"


class TickModel(BaseModel):
    position: float
    label: str


class ChartLayoutResponse(BaseModel):
    """Output schema for /chart/layout."""
    x_domain: Tuple[float, float]
    y_domain: Tuple[float, float]
    line_path: str
    points: List[Tuple[float, float]]
    x_ticks: List[TickModel]
    y_ticks: List[TickModel]


class FactorOption(BaseModel):
    key: str
    label: str
    x_label: str
    color: str


class OptionsResponse(BaseModel):
    """Selection lists for the prediction form."""
    crop_types: List[str]
    soil_types: List[str]
    factors: List[FactorOption]
    defaults: dict


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    predictor_ready: bool
    version: str
    model_name: Optional[str] = None

    model_config = ConfigDict(protected_namespaces=())
