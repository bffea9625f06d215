from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    rules_loaded: int
    timestamp: datetime
    environment: str
    version: str
