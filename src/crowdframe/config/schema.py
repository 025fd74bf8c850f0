"""Configuration schema for CrowdFrame."""

from typing import List, Optional
from pydantic import BaseModel, Field


SANDBOX_ENDPOINT = "https://mturk-requester-sandbox.us-east-1.amazonaws.com"


class ClientConfig(BaseModel):
    """Remote service connection settings."""

    region_name: str = Field(default="us-east-1", description="Service region")
    sandbox: bool = Field(
        default=False,
        description="Use the requester sandbox instead of the production service",
    )
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Explicit endpoint URL; takes precedence over the sandbox flag",
    )
    profile_name: Optional[str] = Field(
        default=None,
        description="Named credentials profile used by the underlying client",
    )

    def endpoint(self) -> Optional[str]:
        """Return the endpoint URL to connect to, ``None`` for the default."""

        if self.endpoint_url:
            return self.endpoint_url
        if self.sandbox:
            return SANDBOX_ENDPOINT
        return None


class CollectionConfig(BaseModel):
    """Paginated collection settings."""

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Number of results requested per page",
    )
    results: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of rows to collect (unbounded when omitted)",
    )
    statuses: List[str] = Field(
        default=["Approved", "Rejected", "Submitted"],
        description="Assignment statuses to collect",
    )
    persist_on_error: bool = Field(
        default=False,
        description="Retry transient failures instead of aborting on the first one",
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts per remote call before giving up",
    )
    backoff_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Pause between attempts (seconds)",
    )


class OutputConfig(BaseModel):
    """Output configuration settings."""

    directory: str = Field(default="tables", description="Output directory")


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    file: Optional[str] = Field(
        default="crowdframe.log",
        description=(
            "Log file name or path (relative paths are resolved within the output directory)"
        ),
    )


class CrowdFrameConfig(BaseModel):
    """Main CrowdFrame configuration schema."""

    client: ClientConfig = Field(default_factory=ClientConfig)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        """Pydantic configuration."""
        extra = "forbid"
        validate_assignment = True
