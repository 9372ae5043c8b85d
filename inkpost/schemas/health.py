from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    success: bool = True
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    timestamp: str = Field(description="Current timestamp")
