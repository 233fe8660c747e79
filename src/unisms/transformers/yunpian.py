from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType, add_signature
from unisms.models.options import YunpianOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.transformers.base import BaseTransformer, compact
from unisms.validation import ResponseHandler

SMS_HOST = "sms.yunpian.com"
VOICE_HOST = "voice.yunpian.com"
MMS_HOST = "vsms.yunpian.com"


def encode_tpl_value(params: Mapping[str, str]) -> str:
    """Encode template parameters as ``#name#=value`` pairs sorted by key."""
    pairs = sorted((quote_plus(f"#{k}#"), quote_plus(v)) for k, v in params.items())
    return "&".join(f"{k}={v}" for k, v in pairs)


class YunpianTransformer(BaseTransformer):
    sub_provider = "yunpian"
    required_credentials = ("api_key",)
    max_batch_size = 1000
    response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="0",
        error_code_field="code",
        error_message_field="msg",
    )
    batch_response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="",
        error_code_field="code",
        error_message_field="msg",
        status_set_field="data",
        status_code_field="code",
        status_success_value="0",
        status_message_field="msg",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)
        self.register_handler(MessageType.MMS, self._mms)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.type == MessageType.TEXT and msg.is_intl():
            if msg.has_multiple_recipients():
                raise self.unsupported("international bulk messages")
            if msg.template_id:
                raise self.unsupported("international template messages")
        if msg.type == MessageType.VOICE:
            if msg.is_intl():
                raise self.unsupported("international voice")
            if not msg.content:
                raise ParamError("yunpian voice requires the code as content")

    def _common(self, msg: Message, account: Account) -> dict[str, Any]:
        options = msg.options_for(YunpianOptions)
        return {
            "apikey": account.api_key,
            "callback_url": msg.callback_url,
            "uid": msg.uid,
            "extend": msg.extend,
            "register": None if options.register_user is None else str(options.register_user).lower(),
            "mobile_stat": None if options.mobile_stat is None else str(options.mobile_stat).lower(),
        }

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        host = self.host(account, msg.is_intl(), SMS_HOST)
        params = self._common(msg, account)
        params["mobile"] = join_numbers(
            format_prefixed(m, msg.region_code, plus=True) for m in msg.mobiles
        )
        batch = msg.has_multiple_recipients()
        if msg.template_id:
            params["tpl_id"] = msg.template_id
            params["tpl_value"] = encode_tpl_value(msg.template_params)
            path = "tpl_batch_send.json" if batch else "tpl_single_send.json"
        else:
            params["text"] = add_signature(msg.content, msg.sign_name)
            path = "batch_send.json" if batch else "single_send.json"
        handler = self.response_handler(self.batch_response_config) if batch else None
        return self.form_request(f"https://{host}/v2/sms/{path}", compact(params)), handler

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params = self._common(msg, account)
        params["mobile"] = format_prefixed(msg.mobiles[0], msg.region_code)
        params["code"] = msg.content
        return self.form_request(f"https://{VOICE_HOST}/v2/voice/send.json", compact(params)), None

    def _mms(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params = compact(
            {
                "apikey": account.api_key,
                "mobile": join_numbers(format_prefixed(m, msg.region_code) for m in msg.mobiles),
                "tpl_id": msg.template_id,
            }
        )
        return (
            self.form_request(f"https://{MMS_HOST}/v2/vsms/tpl_batch_send.json", params),
            self.response_handler(self.batch_response_config),
        )


register_transformer(YunpianTransformer.sub_provider, YunpianTransformer())
