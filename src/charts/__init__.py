"""
Presentation helpers for prediction results.

Modules:
    sensitivity — Chart geometry and SVG output for sensitivity series
"""
