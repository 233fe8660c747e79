from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated


class VendorOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    region: str = ""


class AliyunOptions(VendorOptions):
    called_show_number: str = ""
    play_times: Annotated[int, Field(ge=1, le=3)] | None = None
    volume: Annotated[int, Field(ge=0, le=100)] = 100
    speed: Annotated[int, Field(ge=-500, le=500)] | None = None


class TencentOptions(VendorOptions):
    sdk_app_id: str = ""
    extend_code: str = ""
    sender_id: str = ""
    session_context: str = ""
    play_times: Annotated[int, Field(ge=1, le=3)] | None = None


class HuaweiOptions(VendorOptions):
    sender: str = ""


class VolcOptions(VendorOptions):
    sms_account: str = ""
    tag: str = ""


class YuntongxunOptions(VendorOptions):
    app_id: str = ""
    display_num: str = ""
    play_times: Annotated[int, Field(ge=1, le=3)] | None = None
    resp_url: str = ""
    user_data: str = ""
    max_call_time: int | None = None
    media_name: str = ""


class CL253Options(VendorOptions):
    report: bool = False
    td_flag: int | None = None
    sender_id: str = ""


class JuheOptions(VendorOptions):
    pass


class LuosimaoOptions(VendorOptions):
    pass


class SmsbaoOptions(VendorOptions):
    product_id: str = ""


class SubmailOptions(VendorOptions):
    sign_type: Literal["md5", "sha1", "normal"] = "md5"
    sign_version: str = "2"
    tag: str = ""
    sender: str = ""
    # phone number -> template variables for that recipient
    recipient_params: dict[str, dict[str, str]] = Field(default_factory=dict)


class UcpOptions(VendorOptions):
    pass


class YunpianOptions(VendorOptions):
    register_user: bool | None = None
    mobile_stat: bool | None = None
