"""
FastAPI application for AI-assisted crop yield prediction.

Endpoints:
    POST /predict       — Yield prediction, justification, sensitivity series and model comparison
    POST /chart/layout  — Chart geometry for one sensitivity series
    POST /chart/svg     — Rendered SVG chart for one sensitivity series
    GET  /options       — Crop/soil/factor choices and form defaults
    GET  /health        — Health check
    GET  /metrics       — Prometheus metrics
    GET  /              — Serves the prediction UI
"""

import logging
import sys
import time
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.api.schemas import (
    PredictionRequest, ChartRequest, SvgChartRequest, ChartLayoutResponse,
    FactorOption, OptionsResponse, HealthResponse,
)
from src.charts.sensitivity import layout, render_svg
from src.config import load_settings, configure_logging
from src.data.schema import (
    AnalysisFactor, CropType, SoilType, PredictionOutput, default_form_values,
)
from src.predictor.client import PredictionClient
from src.predictor.errors import PredictionError
from src.predictor.gemini import GeminiBackend

logger = logging.getLogger(__name__)

# ---- App setup ----
app = FastAPI(
    title="Crop Yield Prediction API",
    description="Crop yield forecasts, sensitivity analysis and model comparison powered by Gemini",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Prometheus metrics ----
REQUEST_COUNT = Counter("predict_requests_total", "Total prediction requests")
FAILURE_COUNT = Counter(
    "predict_failures_total", "Failed prediction requests",
    ["kind"],
)
REQUEST_LATENCY = Histogram(
    "predict_latency_seconds", "Prediction latency",
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 40.0],
)
PREDICTIONS_BY_CROP = Counter(
    "predictions_by_crop_total", "Successful predictions by crop",
    ["crop"],
)

# ---- Global predictor reference ----
prediction_client: PredictionClient = None
model_name: str = None
app_version: str = "1.0.0"


def init_predictor():
    """Load and validate settings, then build the prediction client once."""
    global prediction_client, model_name

    settings = load_settings().validate()
    configure_logging(settings.log_level)

    backend = GeminiBackend(settings.api_key, settings.model_name)
    prediction_client = PredictionClient(backend, temperature=settings.temperature)
    model_name = settings.model_name
    logger.info("Prediction client ready (model=%s, temperature=%.2f)",
                settings.model_name, settings.temperature)


@app.on_event("startup")
async def startup_event():
    init_predictor()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if prediction_client is not None else "degraded",
        predictor_ready=prediction_client is not None,
        version=app_version,
        model_name=model_name,
    )


@app.get("/options", response_model=OptionsResponse)
async def options():
    """Selection lists for the form, taken from the enumerations."""
    return OptionsResponse(
        crop_types=[c.value for c in CropType],
        soil_types=[s.value for s in SoilType],
        factors=[
            FactorOption(key=f.value, label=f.label, x_label=f.x_label, color=f.color)
            for f in AnalysisFactor
        ],
        defaults=default_form_values(),
    )


@app.post("/predict", response_model=PredictionOutput)
def predict(request: PredictionRequest):
    """
    Predict yield for the submitted parameters.

    All prediction failures surface as one 502 with a user-displayable message.
    """
    if prediction_client is None:
        raise HTTPException(status_code=503, detail="Predictor not configured")

    REQUEST_COUNT.inc()
    start_time = time.time()
    data = request.to_input()

    try:
        output = prediction_client.predict(data)
    except PredictionError as e:
        FAILURE_COUNT.labels(kind=e.kind).inc()
        raise HTTPException(status_code=502, detail=e.message)
    finally:
        REQUEST_LATENCY.observe(time.time() - start_time)

    PREDICTIONS_BY_CROP.labels(crop=data.crop_type.value).inc()
    return output


@app.post("/chart/layout", response_model=ChartLayoutResponse)
async def chart_layout(request: ChartRequest):
    """Chart geometry (domains, path, points, ticks) for one series."""
    chart = layout(request.series, request.viewport.to_viewport())
    return chart.to_dict()


@app.post("/chart/svg")
async def chart_svg(request: SvgChartRequest):
    """Rendered SVG chart for one factor's series."""
    viewport = request.viewport.to_viewport()
    chart = layout(request.series, viewport)
    svg = render_svg(
        chart, viewport,
        x_label=request.factor.x_label,
        y_label=request.y_label,
        color=request.factor.color,
    )
    return Response(content=svg, media_type="image/svg+xml")


# ---- Prometheus metrics endpoint ----
@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# ---- Serve UI ----
UI_DIR = PROJECT_ROOT / "ui"


@app.get("/", response_class=HTMLResponse)
async def serve_ui():
    """Serve the prediction web UI."""
    ui_path = UI_DIR / "index.html"
    if ui_path.exists():
        return HTMLResponse(content=ui_path.read_text(encoding="utf-8"))
    return HTMLResponse(content="<h1>Crop Yield Prediction API</h1><p>Visit /docs for API documentation.</p>")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
