from pydantic import BaseModel, ConfigDict


class PlatformModel(BaseModel):
    """Base for payloads received from the platform. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow", frozen=True)
