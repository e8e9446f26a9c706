"""
GeoCalc - address geocoding and driving distances for persons and venues

Runs as a single Lambda-style handler. See geocalc.handler.lambda_handler.
"""

__version__ = "1.0.0"
