"""
OpenTelemetry instrumentation for the FastAPI app and the MongoDB driver
"""

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

from app.core.logger import logger


def instrument_app(app):
    """
    Create spans for incoming requests and for every PyMongo command.
    Export is left to the OTEL_* environment of the deployment.
    """
    try:
        FastAPIInstrumentor.instrument_app(app)
        PymongoInstrumentor().instrument()
        logger.info(
            "OpenTelemetry instrumentation complete",
            metadata={"event": "telemetry_instrumented", "instrumented": ["fastapi", "pymongo"]}
        )
    except Exception as e:
        logger.error("Failed to instrument application", error=e)
