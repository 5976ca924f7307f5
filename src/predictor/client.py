"""
Prediction client: builds the request, calls the backend, and validates
the structured response before handing it to the caller.
"""

import json
import logging
import math
from typing import Dict

from pydantic import ValidationError

from src.config import DEFAULT_TEMPERATURE
from src.data.schema import (
    AnalysisFactor, PredictionInput, PredictionOutput,
    EXPECTED_MODEL_COUNT, EXPECTED_POINTS_PER_FACTOR,
)
from src.predictor.errors import InvalidSchema, MalformedResponse, TransportFailure
from src.predictor.gemini import PredictorBackend
from src.predictor.prompt import RESPONSE_SCHEMA, build_prompt

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_shape(payload) -> None:
    """
    Shallow shape check of a parsed response.

    Raises:
        InvalidSchema: If a required top-level field is missing or mistyped.
    """
    if not isinstance(payload, dict):
        raise InvalidSchema(f"response is {type(payload).__name__}, expected an object")

    predicted = payload.get("predictedYield")
    if not _is_number(predicted):
        raise InvalidSchema("predictedYield is missing or not a number")
    try:
        finite = math.isfinite(predicted)
    except OverflowError:
        finite = False
    if not finite or predicted < 0:
        raise InvalidSchema(f"predictedYield {predicted} is not a non-negative finite number")
    if not isinstance(payload.get("justification"), str):
        raise InvalidSchema("justification is missing or not a string")
    if not isinstance(payload.get("analysis"), dict):
        raise InvalidSchema("analysis is missing or not an object")
    if not isinstance(payload.get("modelComparison"), list):
        raise InvalidSchema("modelComparison is missing or not a list")


def _warn_on_lengths(output: PredictionOutput):
    for factor in AnalysisFactor:
        count = len(output.analysis.series(factor))
        if count != EXPECTED_POINTS_PER_FACTOR:
            logger.warning(
                "Sensitivity series '%s' has %d points (expected %d)",
                factor.value, count, EXPECTED_POINTS_PER_FACTOR,
            )
    if len(output.model_comparison) != EXPECTED_MODEL_COUNT:
        logger.warning(
            "Model comparison has %d entries (expected %d)",
            len(output.model_comparison), EXPECTED_MODEL_COUNT,
        )


class PredictionClient:
    """
    Stateless client for the external yield predictor.

    Usage:
        client = PredictionClient(GeminiBackend(api_key))
        output = client.predict(prediction_input)
    """

    def __init__(self, backend: PredictorBackend, temperature: float = DEFAULT_TEMPERATURE):
        self.backend = backend
        self.temperature = temperature

    def predict(self, data: PredictionInput) -> PredictionOutput:
        """
        Request a prediction for one set of inputs.

        Raises:
            TransportFailure: The backend call failed.
            MalformedResponse: The response text is not valid JSON.
            InvalidSchema: The parsed response does not have the expected shape.
        """
        prompt = build_prompt(data)

        try:
            raw = self.backend.generate(prompt, RESPONSE_SCHEMA, self.temperature)
        except Exception as e:
            logger.error("Error calling prediction service: %s", e)
            raise TransportFailure(str(e)) from e

        payload = self.parse(raw)

        try:
            check_shape(payload)
            output = PredictionOutput.model_validate(payload)
        except InvalidSchema as e:
            logger.error("Invalid response format from prediction service: %s", e.detail)
            raise
        except ValidationError as e:
            logger.error("Invalid response format from prediction service: %s", e)
            raise InvalidSchema(str(e)) from e

        _warn_on_lengths(output)
        logger.info(
            "Predicted %.1f kg/ha for %s on %s soil",
            output.predicted_yield, data.crop_type.value, data.soil_type.value,
        )
        return output

    @staticmethod
    def parse(raw) -> Dict:
        """Parse raw response text as JSON, raising MalformedResponse on failure."""
        if not isinstance(raw, str):
            logger.error("Prediction service returned no text (got %s)", type(raw).__name__)
            raise MalformedResponse("response text is empty")
        try:
            return json.loads(raw.strip())
        except (ValueError, RecursionError) as e:
            logger.error("Could not parse prediction response as JSON: %s", e)
            raise MalformedResponse(str(e)) from e
