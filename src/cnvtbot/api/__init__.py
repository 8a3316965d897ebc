"""
CNVTBOT API Module
"""

from cnvtbot.api.routes import router
from cnvtbot.api.schemas import (
    ErrorResponse,
    HealthResponse,
    RatesResponse,
)

__all__ = [
    "router",
    "ErrorResponse",
    "HealthResponse",
    "RatesResponse",
]
