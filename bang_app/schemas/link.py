from pydantic import BaseModel, Field


class CreatedLink(BaseModel):
    """Returned once, on creation. The key is never shown again."""
    slug: str = Field(..., description="Public short identifier, e.g. !aZ3k9")
    key: str = Field(..., description="Admin key for stats and delete")


class VersionInfo(BaseModel):
    version: str


class HealthStatus(BaseModel):
    status: str
    environment: str
