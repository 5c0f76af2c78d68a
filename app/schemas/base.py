"""
Base schemas and common response models.
"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
    )


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str
