from enum import Enum

from pydantic import BaseModel, Field


class ResponseType(str, Enum):
    JSON = "json"
    TEXT = "text"


class MatchMode(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    REGEX = "regex"


class ResponseValidatorConfig(BaseModel):
    response_type: ResponseType = ResponseType.JSON
    success_status_codes: tuple[int, int] = (200, 299)
    success_field: str = ""
    success_value: str = ""
    error_code_field: str = ""
    error_message_field: str = ""
    mode: MatchMode = MatchMode.EQUALS
    error_code_map: dict[str, str] = Field(default_factory=dict)
    # per-recipient results, e.g. Tencent's Response.SendStatusSet
    status_set_field: str = ""
    status_code_field: str = "Code"
    status_success_value: str = "Ok"
    status_message_field: str = "Message"
