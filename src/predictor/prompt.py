"""
Request construction for the external yield predictor: the task instruction
and the response schema the service must conform to.
"""

from src.data.schema import PredictionInput, SENSITIVITY_OFFSETS


def _series_schema() -> dict:
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "value": {"type": "NUMBER"},
                "yield": {"type": "NUMBER"},
            },
            "required": ["value", "yield"],
        },
    }


RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "predictedYield": {
            "type": "NUMBER",
            "description": "The predicted crop yield in kilograms per hectare (kg/ha). Example: 4500.5",
        },
        "justification": {
            "type": "STRING",
            "description": (
                "A brief, easy-to-understand explanation for the prediction, "
                "highlighting key factors and comparing to typical yields."
            ),
        },
        "analysis": {
            "type": "OBJECT",
            "description": "Data for sensitivity analysis charts.",
            "properties": {
                "rainfall": _series_schema(),
                "temperature": _series_schema(),
                "fertilizer": _series_schema(),
            },
            "required": ["rainfall", "temperature", "fertilizer"],
        },
        "modelComparison": {
            "type": "ARRAY",
            "description": "An array comparing different machine learning models for this task.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "modelName": {"type": "STRING", "description": "e.g., 'Linear Regression'"},
                    "pros": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"},
                        "description": "List of advantages.",
                    },
                    "cons": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"},
                        "description": "List of disadvantages.",
                    },
                    "suitability": {
                        "type": "STRING",
                        "description": "Suitability rating: 'High', 'Medium', or 'Low'.",
                    },
                    "metrics": {
                        "type": "OBJECT",
                        "properties": {
                            "rSquared": {"type": "STRING", "description": "Expected R-squared value range."},
                            "mae": {"type": "STRING", "description": "Expected Mean Absolute Error range in kg/ha."},
                            "explanation": {"type": "STRING", "description": "Explanation of the metrics."},
                        },
                        "required": ["rSquared", "mae", "explanation"],
                    },
                },
                "required": ["modelName", "pros", "cons", "suitability", "metrics"],
            },
        },
    },
    "required": ["predictedYield", "justification", "analysis", "modelComparison"],
}

COMPARED_MODELS = ("Linear Regression", "Random Forest", "a simple Neural Network")


def _format_number(value: float) -> str:
    # 1200.0 -> "1200", 25.5 -> "25.5"
    return f"{value:g}"


def _offsets_text() -> str:
    below = [f"{o:+.0%}" for o in SENSITIVITY_OFFSETS if o < 0]
    above = [f"{o:+.0%}" for o in SENSITIVITY_OFFSETS if o > 0]
    return (
        f"the original value, two steps below ({', '.join(below)}), "
        f"and two steps above ({', '.join(above)})"
    )


def build_prompt(data: PredictionInput) -> str:
    """Serialize all seven inputs into the natural-language task instruction."""
    models = ", ".join(COMPARED_MODELS[:-1]) + f", and {COMPARED_MODELS[-1]}"
    return f"""
You are an expert agricultural AI model specialized in crop yield prediction. Based on the following data, perform four tasks:
1. Predict the primary crop yield in kilograms per hectare (kg/ha).
2. Provide a brief justification for your prediction. Consider the interplay of the input factors and compare the prediction to typical yield ranges for this crop under similar conditions.
3. Generate data for a sensitivity analysis. For each of 'Average Annual Rainfall', 'Average Temperature', and 'Fertilizer Applied', calculate the predicted yield for {len(SENSITIVITY_OFFSETS)} data points: {_offsets_text()}. Keep all other input factors constant for each analysis. The five points should be ordered by increasing value.
4. Provide a detailed comparison of exactly {len(COMPARED_MODELS)} different machine learning models ({models}) for this prediction task. For each model, provide:
   - modelName: The name of the model.
   - pros: An array of 2-3 key advantages.
   - cons: An array of 2-3 key disadvantages.
   - suitability: A suitability rating ('High', 'Medium', or 'Low').
   - metrics: An object containing:
       - rSquared: A typical R-squared value range (e.g., "0.85 - 0.92").
       - mae: A typical Mean Absolute Error range in kg/ha (e.g., "150 - 250 kg/ha").
       - explanation: A brief explanation of what these metrics mean in the context of crop yield prediction.

Input Data:
- Crop: {data.crop_type.value}
- Average Annual Rainfall: {_format_number(data.rainfall)} mm
- Average Temperature: {_format_number(data.temperature)} °C
- Fertilizer Applied: {_format_number(data.fertilizer)} kg/ha
- Soil Type: {data.soil_type.value}
- Pesticide Applied: {_format_number(data.pesticide)} kg/ha
- Year: {data.year}

Return the entire response as a single, well-formed JSON object.
""".strip()
