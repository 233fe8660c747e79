from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated

from unisms.clock import CHINA_TZ
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.options import VendorOptions

DOMESTIC_REGION_CODES = (0, 86)
MIN_MOBILE_DIGITS = 7

O = TypeVar("O", bound=VendorOptions)


class MessageType(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    MMS = "mms"


class MessageCategory(str, Enum):
    VERIFICATION = "verification"
    NOTIFICATION = "notification"
    PROMOTION = "promotion"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    sub_provider: Annotated[str, Field(min_length=1)]
    type: MessageType = MessageType.TEXT
    category: MessageCategory = MessageCategory.NOTIFICATION
    mobiles: list[str] = Field(default_factory=list)
    region_code: Annotated[int, Field(ge=0)] = 0
    content: str = ""
    sign_name: str = ""
    template_id: str = ""
    template_params: dict[str, str] = Field(default_factory=dict)
    params_order: list[str] = Field(default_factory=list)
    callback_url: str = ""
    extend: str = ""
    uid: str = ""
    scheduled_at: datetime | None = None
    options: VendorOptions | None = None

    @field_validator("scheduled_at")
    @classmethod
    def naive_times_are_china_time(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=CHINA_TZ)
        return v

    @property
    def extras(self) -> dict[str, Any]:
        if self.options is None:
            return {}
        return self.options.model_dump(exclude_defaults=True)

    def is_intl(self) -> bool:
        return self.region_code not in DOMESTIC_REGION_CODES

    def is_domestic(self) -> bool:
        return not self.is_intl()

    def has_multiple_recipients(self) -> bool:
        return len(self.mobiles) > 1

    def options_for(self, cls: "type[O]") -> O:
        if isinstance(self.options, cls):
            return self.options
        return cls()

    def positional_params(self) -> list[str]:
        if self.params_order:
            return list(self.params_order)
        return list(self.template_params.values())

    def validate_for_send(self) -> None:
        if not self.mobiles:
            raise ParamError("at least one mobile number is required")
        for raw in self.mobiles:
            mobile = raw.strip()
            digits = sum(ch.isdigit() for ch in mobile)
            if digits < MIN_MOBILE_DIGITS or not (mobile[0] == "+" or mobile[0].isdigit()):
                raise ParamError(f"invalid mobile number: {raw!r}")
        if self.type == MessageType.TEXT and not (self.content or self.template_id):
            raise ParamError("text messages need content or a template id")
        if self.type == MessageType.MMS and not self.template_id:
            raise ParamError("MMS messages need a template id")

    def apply_defaults(self, account: Account) -> "Message":
        update: dict[str, Any] = {}
        if not self.sign_name:
            sign_name, content = split_signature(self.content)
            if sign_name:
                update["content"] = content
            update["sign_name"] = sign_name or account.sign_name
        if not self.callback_url and account.callback:
            update["callback_url"] = account.callback
        if self.region_code == 0:
            update["region_code"] = 86
        if not update:
            return self
        return self.model_copy(update=update)


def split_signature(content: str) -> tuple[str, str]:
    """Split a leading 【sign】 off ``content``."""
    if not content.startswith("【"):
        return "", content
    end = content.find("】")
    if end <= 1 or end > 20:
        return "", content
    return content[1:end], content[end + 1 :]


def add_signature(content: str, sign_name: str) -> str:
    if not sign_name or content.startswith("【"):
        return content
    return f"【{sign_name}】{content}"
