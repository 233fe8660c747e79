import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from typing_extensions import Self

from unisms.errors import ParamError
from unisms.models.message import Message, MessageCategory, MessageType
from unisms.models.options import (
    AliyunOptions,
    CL253Options,
    HuaweiOptions,
    JuheOptions,
    LuosimaoOptions,
    SmsbaoOptions,
    SubmailOptions,
    TencentOptions,
    UcpOptions,
    VendorOptions,
    VolcOptions,
    YunpianOptions,
    YuntongxunOptions,
)

logger = logging.getLogger("unisms")


class MessageBuilder:
    sub_provider = ""
    options_class: type[VendorOptions] = VendorOptions

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {"sub_provider": self.sub_provider, "mobiles": []}
        self._options: dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> Self:
        self._fields[name] = value
        return self

    def _option(self, name: str, value: Any) -> Self:
        self._options[name] = value
        return self

    def to(self, *mobiles: str | Iterable[str]) -> Self:
        for item in mobiles:
            if isinstance(item, str):
                self._fields["mobiles"].append(item)
            else:
                self._fields["mobiles"].extend(item)
        return self

    def content(self, content: str) -> Self:
        return self._set("content", content)

    def sign_name(self, sign_name: str) -> Self:
        return self._set("sign_name", sign_name)

    def template_id(self, template_id: str) -> Self:
        return self._set("template_id", template_id)

    def params(self, params: Mapping[str, Any]) -> Self:
        return self._set("template_params", {k: str(v) for k, v in params.items()})

    def params_order(self, values: Iterable[Any]) -> Self:
        return self._set("params_order", [str(v) for v in values])

    def type(self, msg_type: MessageType | str) -> Self:
        return self._set("type", msg_type)

    def voice(self) -> Self:
        return self.type(MessageType.VOICE)

    def mms(self) -> Self:
        return self.type(MessageType.MMS)

    def category(self, category: MessageCategory | str) -> Self:
        return self._set("category", category)

    def verification(self) -> Self:
        return self.category(MessageCategory.VERIFICATION)

    def region_code(self, region_code: int) -> Self:
        return self._set("region_code", region_code)

    def callback_url(self, url: str) -> Self:
        return self._set("callback_url", url)

    def scheduled_at(self, moment: datetime) -> Self:
        return self._set("scheduled_at", moment)

    def extend(self, extend: str) -> Self:
        return self._set("extend", extend)

    def uid(self, uid: str) -> Self:
        return self._set("uid", uid)

    def region(self, region: str) -> Self:
        return self._option("region", region)

    def build(self) -> Message:
        try:
            options = self.options_class(**self._options)
            return Message(**self._fields, options=options)
        except ValidationError as e:
            logger.error(f"Validation error: {e.errors()}")
            raise ParamError(
                f"invalid {self.sub_provider} message: "
                f"{e.errors(include_url=False, include_input=False)}"
            ) from e


class AliyunBuilder(MessageBuilder):
    sub_provider = "aliyun"
    options_class = AliyunOptions

    def called_show_number(self, number: str) -> Self:
        return self._option("called_show_number", number)

    def play_times(self, times: int) -> Self:
        return self._option("play_times", times)

    def volume(self, volume: int) -> Self:
        return self._option("volume", volume)

    def speed(self, speed: int) -> Self:
        return self._option("speed", speed)


class TencentBuilder(MessageBuilder):
    sub_provider = "tencent"
    options_class = TencentOptions

    def sdk_app_id(self, app_id: str) -> Self:
        return self._option("sdk_app_id", app_id)

    def extend_code(self, code: str) -> Self:
        return self._option("extend_code", code)

    def sender_id(self, sender_id: str) -> Self:
        return self._option("sender_id", sender_id)

    def session_context(self, context: str) -> Self:
        return self._option("session_context", context)

    def play_times(self, times: int) -> Self:
        return self._option("play_times", times)


class HuaweiBuilder(MessageBuilder):
    sub_provider = "huawei"
    options_class = HuaweiOptions

    def sender(self, sender: str) -> Self:
        return self._option("sender", sender)


class VolcBuilder(MessageBuilder):
    sub_provider = "volc"
    options_class = VolcOptions

    def sms_account(self, account: str) -> Self:
        return self._option("sms_account", account)

    def tag(self, tag: str) -> Self:
        return self._option("tag", tag)


class YuntongxunBuilder(MessageBuilder):
    sub_provider = "yuntongxun"
    options_class = YuntongxunOptions

    def app_id(self, app_id: str) -> Self:
        return self._option("app_id", app_id)

    def display_num(self, number: str) -> Self:
        return self._option("display_num", number)

    def play_times(self, times: int) -> Self:
        return self._option("play_times", times)

    def resp_url(self, url: str) -> Self:
        return self._option("resp_url", url)

    def user_data(self, data: str) -> Self:
        return self._option("user_data", data)

    def max_call_time(self, seconds: int) -> Self:
        return self._option("max_call_time", seconds)

    def media_name(self, name: str) -> Self:
        return self._option("media_name", name)


class CL253Builder(MessageBuilder):
    sub_provider = "cl253"
    options_class = CL253Options

    def report(self, enabled: bool = True) -> Self:
        return self._option("report", enabled)

    def td_flag(self, flag: int) -> Self:
        return self._option("td_flag", flag)

    def sender_id(self, sender_id: str) -> Self:
        return self._option("sender_id", sender_id)


class JuheBuilder(MessageBuilder):
    sub_provider = "juhe"
    options_class = JuheOptions


class LuosimaoBuilder(MessageBuilder):
    sub_provider = "luosimao"
    options_class = LuosimaoOptions


class SmsbaoBuilder(MessageBuilder):
    sub_provider = "smsbao"
    options_class = SmsbaoOptions

    def product_id(self, product_id: str) -> Self:
        return self._option("product_id", product_id)


class SubmailBuilder(MessageBuilder):
    sub_provider = "submail"
    options_class = SubmailOptions

    def sign_type(self, sign_type: str) -> Self:
        return self._option("sign_type", sign_type)

    def sign_version(self, version: str) -> Self:
        return self._option("sign_version", version)

    def tag(self, tag: str) -> Self:
        return self._option("tag", tag)

    def sender(self, sender: str) -> Self:
        return self._option("sender", sender)

    def recipient_params(self, params: Mapping[str, Mapping[str, Any]]) -> Self:
        return self._option("recipient_params", params)


class UcpBuilder(MessageBuilder):
    sub_provider = "ucp"
    options_class = UcpOptions


class YunpianBuilder(MessageBuilder):
    sub_provider = "yunpian"
    options_class = YunpianOptions

    def register(self, enabled: bool = True) -> Self:
        return self._option("register_user", enabled)

    def mobile_stat(self, enabled: bool = True) -> Self:
        return self._option("mobile_stat", enabled)


def aliyun() -> AliyunBuilder:
    return AliyunBuilder()


def tencent() -> TencentBuilder:
    return TencentBuilder()


def huawei() -> HuaweiBuilder:
    return HuaweiBuilder()


def volc() -> VolcBuilder:
    return VolcBuilder()


def yuntongxun() -> YuntongxunBuilder:
    return YuntongxunBuilder()


def cl253() -> CL253Builder:
    return CL253Builder()


def juhe() -> JuheBuilder:
    return JuheBuilder()


def luosimao() -> LuosimaoBuilder:
    return LuosimaoBuilder()


def smsbao() -> SmsbaoBuilder:
    return SmsbaoBuilder()


def submail() -> SubmailBuilder:
    return SubmailBuilder()


def ucp() -> UcpBuilder:
    return UcpBuilder()


def yunpian() -> YunpianBuilder:
    return YunpianBuilder()


BUILDERS = {
    builder.sub_provider: builder
    for builder in (
        AliyunBuilder,
        TencentBuilder,
        HuaweiBuilder,
        VolcBuilder,
        YuntongxunBuilder,
        CL253Builder,
        JuheBuilder,
        LuosimaoBuilder,
        SmsbaoBuilder,
        SubmailBuilder,
        UcpBuilder,
        YunpianBuilder,
    )
}
