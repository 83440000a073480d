"""
Telemetry Context

The structured metadata attached to every emitted event. Instances are
owned by the caller and filled in place by TelemetryContextInitializer.
"""

from pydantic import BaseModel, Field


class UserContext(BaseModel):
    """Pseudonymous user identity."""

    id: str | None = None
    user_agent: str | None = None


class DeviceContext(BaseModel):
    """Host operating system."""

    operating_system: str | None = None
    operating_system_version: str | None = None


class ComponentContext(BaseModel):
    """Version of the reporting component."""

    version: str | None = None


class SessionContext(BaseModel):
    """Per-process session."""

    id: str | None = None


class TelemetryContext(BaseModel):
    """Context shared by all telemetry items sent from this process."""

    instrumentation_key: str | None = None
    properties: dict[str, str] = Field(default_factory=dict)
    tags: dict[str, str] = Field(default_factory=dict)
    user: UserContext = Field(default_factory=UserContext)
    device: DeviceContext = Field(default_factory=DeviceContext)
    component: ComponentContext = Field(default_factory=ComponentContext)
    session: SessionContext = Field(default_factory=SessionContext)
