"""Shared fixtures: a well-formed predictor response and a stub backend."""

import copy
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


SAMPLE_RESPONSE = {
    "predictedYield": 4500.5,
    "justification": "Rainfall and fertilizer are near optimal for maize on loamy soil.",
    "analysis": {
        "rainfall": [
            {"value": 960, "yield": 3900},
            {"value": 1080, "yield": 4250},
            {"value": 1200, "yield": 4500.5},
            {"value": 1320, "yield": 4600},
            {"value": 1440, "yield": 4550},
        ],
        "temperature": [
            {"value": 20, "yield": 4100},
            {"value": 22.5, "yield": 4350},
            {"value": 25, "yield": 4500.5},
            {"value": 27.5, "yield": 4300},
            {"value": 30, "yield": 3950},
        ],
        "fertilizer": [
            {"value": 120, "yield": 4200},
            {"value": 135, "yield": 4380},
            {"value": 150, "yield": 4500.5},
            {"value": 165, "yield": 4560},
            {"value": 180, "yield": 4580},
        ],
    },
    "modelComparison": [
        {
            "modelName": "Linear Regression",
            "pros": ["Simple and interpretable", "Fast to train"],
            "cons": ["Misses non-linear effects", "Sensitive to outliers"],
            "suitability": "Medium",
            "metrics": {
                "rSquared": "0.60 - 0.70",
                "mae": "400 - 600 kg/ha",
                "explanation": "Explains a moderate share of yield variance.",
            },
        },
        {
            "modelName": "Random Forest",
            "pros": ["Captures interactions", "Robust to noise"],
            "cons": ["Less interpretable", "Larger memory footprint"],
            "suitability": "High",
            "metrics": {
                "rSquared": "0.85 - 0.92",
                "mae": "150 - 250 kg/ha",
                "explanation": "High explained variance with low average error.",
            },
        },
        {
            "modelName": "Neural Network",
            "pros": ["Flexible function approximator", "Scales with data"],
            "cons": ["Needs much data", "Hard to explain", "Tuning heavy"],
            "suitability": "Low",
            "metrics": {
                "rSquared": "0.70 - 0.90",
                "mae": "200 - 400 kg/ha",
                "explanation": "Performance depends on the size of the dataset.",
            },
        },
    ],
}


class StubBackend:
    """Deterministic stand-in for the Gemini backend."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate(self, prompt, schema, temperature):
        self.calls.append({"prompt": prompt, "schema": schema, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def sample_response():
    return copy.deepcopy(SAMPLE_RESPONSE)


@pytest.fixture
def stub_backend(sample_response):
    return StubBackend(text=json.dumps(sample_response))


@pytest.fixture
def sample_input():
    from src.data.schema import PredictionInput, CropType, SoilType
    return PredictionInput(
        crop_type=CropType.MAIZE,
        soil_type=SoilType.LOAMY,
        rainfall=1200,
        temperature=25,
        fertilizer=150,
        pesticide=30,
        year=2024,
    )
