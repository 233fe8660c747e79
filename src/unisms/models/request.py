from enum import Enum

from pydantic import BaseModel, Field


class BodyType(str, Enum):
    RAW = "raw"
    JSON = "json"
    FORM = "form"
    NONE = "none"


class HTTPRequestSpec(BaseModel):
    method: str = "POST"
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    body_type: BodyType = BodyType.NONE
    timeout: float | None = None

    def header(self, name: str) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
