"""Account credentials for the telephony REST API."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credentials(BaseModel):
    """Project credentials used for HTTP Basic auth against a space."""

    project_id: str = Field(..., min_length=1)
    auth_token: str = Field(..., min_length=1, repr=False)
    space_url: str = Field(..., min_length=1)

    @field_validator("space_url")
    @classmethod
    def normalize_space_url(cls, v: str) -> str:
        """Strip scheme and trailing slashes so the value is a bare host."""
        for prefix in ("https://", "http://"):
            if v.startswith(prefix):
                v = v[len(prefix) :]
        v = v.rstrip("/")
        if not v:
            raise ValueError("space_url must contain a host")
        return v

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
