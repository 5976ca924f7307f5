"""
Prediction client for the external AI yield predictor.

Modules:
    prompt  — Task instruction and response schema
    gemini  — Backend seam and the Gemini implementation
    client  — Request/parse/validate flow
    errors  — Classified prediction failures
"""
