from typing import Any

from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType, add_signature
from unisms.models.options import YuntongxunOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import cloopen_authorization, cloopen_sig
from unisms.transformers.base import BaseTransformer, compact
from unisms.validation import ResponseHandler

HOST = "app.cloopen.com:8883"
API_VERSION = "2013-12-26"
INTL_HOSTS = {
    "cn": "app.cloopen.com:8883",
    "hk": "hksms.cloopen.com:8883",
}
DEFAULT_INTL_REGION = "hk"


class YuntongxunTransformer(BaseTransformer):
    sub_provider = "yuntongxun"
    max_batch_size = 200
    response_config = ResponseValidatorConfig(
        success_field="statusCode",
        success_value="000000",
        error_code_field="statusCode",
        error_message_field="statusMsg",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)

    def validate(self, msg: Message, account: Account) -> None:
        if not self._app_id(msg, account):
            raise ParamError("yuntongxun requires an app id")
        if msg.type == MessageType.TEXT:
            if msg.is_domestic() and not msg.template_id:
                raise ParamError("yuntongxun domestic SMS requires a template id")
            if msg.is_intl() and not msg.content:
                raise ParamError("yuntongxun international SMS requires content")
        elif msg.type == MessageType.VOICE:
            if msg.is_intl():
                raise self.unsupported("international voice")
            if not msg.content and not msg.options_for(YuntongxunOptions).media_name:
                raise ParamError("yuntongxun voice calls require content or a media file")

    def _app_id(self, msg: Message, account: Account) -> str:
        return msg.options_for(YuntongxunOptions).app_id or account.app_id

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        if msg.is_intl():
            return self._intl_text(msg, account), None
        payload = {
            "to": join_numbers(format_prefixed(m, msg.region_code) for m in msg.mobiles),
            "appId": self._app_id(msg, account),
            "templateId": msg.template_id,
            "datas": msg.positional_params(),
        }
        return self._account_request(account, "SMS/TemplateSMS", payload), None

    def _intl_text(self, msg: Message, account: Account) -> HTTPRequestSpec:
        region = self.region(msg, account, DEFAULT_INTL_REGION)
        host = account.intl_endpoint or INTL_HOSTS.get(region, INTL_HOSTS[DEFAULT_INTL_REGION])
        payload = {
            "mobile": join_numbers(format_prefixed(m, msg.region_code) for m in msg.mobiles),
            "content": add_signature(msg.content, msg.sign_name),
            "appId": self._app_id(msg, account),
        }
        url = f"https://{host}/v2/account/{account.api_key}/international/send"
        return self._signed(url, account, payload)

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(YuntongxunOptions)
        payload: dict[str, Any] = {
            "appId": self._app_id(msg, account),
            "to": format_prefixed(msg.mobiles[0], msg.region_code),
            "displayNum": options.display_num or account.sender_id,
            "playTimes": options.play_times,
            "respUrl": options.resp_url or msg.callback_url,
            "userData": options.user_data or msg.uid,
            "maxCallTime": options.max_call_time,
        }
        if msg.category == MessageCategory.VERIFICATION:
            path = "Calls/VoiceVerify"
            payload["verifyCode"] = msg.content
        else:
            path = "Calls/LandingCalls"
            payload["mediaName"] = options.media_name
            payload["mediaTxt"] = msg.content
        return self._account_request(account, path, compact(payload)), None

    def _account_request(
        self, account: Account, path: str, payload: dict[str, Any]
    ) -> HTTPRequestSpec:
        host = self.host(account, False, HOST)
        url = f"https://{host}/{API_VERSION}/Accounts/{account.api_key}/{path}"
        return self._signed(url, account, payload)

    def _signed(self, url: str, account: Account, payload: dict[str, Any]) -> HTTPRequestSpec:
        timestamp = self.china_now().strftime("%Y%m%d%H%M%S")
        spec = self.json_request(
            url,
            payload,
            {
                "Accept": "application/json",
                "Content-Type": "application/json;charset=utf-8",
                "Authorization": cloopen_authorization(account.api_key, timestamp),
            },
        )
        spec.query["sig"] = cloopen_sig(account.api_key, account.api_secret, timestamp)
        return spec


register_transformer(YuntongxunTransformer.sub_provider, YuntongxunTransformer())
