from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated


class Account(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(min_length=1)]
    sub_provider: Annotated[str, Field(min_length=1)]
    api_key: str = ""
    api_secret: str = ""
    app_id: str = ""
    region: str = ""
    callback: str = ""
    sign_name: str = ""
    sender_id: str = ""
    endpoint: str = ""
    intl_endpoint: str = ""
    weight: Annotated[int, Field(ge=1)] = 1
    disabled: bool = False

    @field_validator("sub_provider")
    @classmethod
    def _lowercase_tag(cls, value: str) -> str:
        return value.strip().lower()

    def __repr__(self) -> str:
        return f"<Account name={self.name} sub_provider={self.sub_provider}>"
