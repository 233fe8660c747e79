from typing import Any

from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType
from unisms.models.options import AliyunOptions
from unisms.models.request import BodyType, HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import EMPTY_SHA256, acs3_authorization, flatten_params
from unisms.transformers.base import BaseTransformer, json_string
from unisms.validation import ResponseHandler

SMS_HOST = "dysmsapi.aliyuncs.com"
SMS_VERSION = "2017-05-25"
VOICE_HOST = "dyvmsapi.aliyuncs.com"
VOICE_VERSION = "2017-05-25"
DEFAULT_REGION = "cn-hangzhou"

SMS_TEMPLATE_PREFIX = "SMS_"
TTS_TEMPLATE_PREFIX = "TTS_"


class AliyunTransformer(BaseTransformer):
    sub_provider = "aliyun"
    max_batch_size = 1000
    response_config = ResponseValidatorConfig(
        success_field="Code",
        success_value="OK",
        error_code_field="Code",
        error_message_field="Message",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)
        self.register_handler(MessageType.MMS, self._mms)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.type == MessageType.TEXT:
            if not msg.template_id.startswith(SMS_TEMPLATE_PREFIX):
                raise ParamError(
                    f"aliyun text template code must start with {SMS_TEMPLATE_PREFIX}"
                )
            if msg.is_domestic() and not msg.sign_name:
                raise ParamError("aliyun domestic SMS requires a sign name")
        elif msg.type == MessageType.VOICE:
            if msg.is_intl():
                raise self.unsupported("international voice")
            if not msg.template_id:
                raise ParamError("aliyun voice calls require a template or voice code")
            if msg.category == MessageCategory.VERIFICATION and not msg.template_id.startswith(
                TTS_TEMPLATE_PREFIX
            ):
                raise ParamError(
                    f"aliyun TTS template code must start with {TTS_TEMPLATE_PREFIX}"
                )

    def _sms_host(self, msg: Message, account: Account) -> str:
        region = self.region(msg, account, DEFAULT_REGION)
        default = SMS_HOST if region == DEFAULT_REGION else f"dysmsapi.{region}.aliyuncs.com"
        return self.host(account, msg.is_intl(), default)

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        mobiles = [format_prefixed(m, msg.region_code) for m in msg.mobiles]
        params = {
            "PhoneNumbers": join_numbers(mobiles),
            "SignName": msg.sign_name,
            "TemplateCode": msg.template_id,
            "TemplateParam": json_string(msg.template_params) if msg.template_params else "",
            "SmsUpExtendCode": msg.extend,
            "OutId": msg.uid,
        }
        host = self._sms_host(msg, account)
        return self._signed_request(host, "SendSms", SMS_VERSION, params, account), None

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(AliyunOptions)
        params: dict[str, Any] = {
            "CalledNumber": format_prefixed(msg.mobiles[0], msg.region_code),
            "CalledShowNumber": options.called_show_number or account.sender_id,
            "PlayTimes": options.play_times,
            "Volume": options.volume,
            "Speed": options.speed,
            "OutId": msg.uid,
        }
        if msg.category == MessageCategory.VERIFICATION:
            action = "SingleCallByTts"
            params["TtsCode"] = msg.template_id
            if msg.template_params:
                params["TtsParam"] = json_string(msg.template_params)
        else:
            action = "SingleCallByVoice"
            params["VoiceCode"] = msg.template_id
        return self._signed_request(VOICE_HOST, action, VOICE_VERSION, params, account), None

    def _mms(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        raise self.unsupported("mms messages")

    def _signed_request(
        self,
        host: str,
        action: str,
        version: str,
        params: dict[str, Any],
        account: Account,
    ) -> HTTPRequestSpec:
        query = flatten_params({k: v for k, v in params.items() if v not in (None, "")})
        headers = {
            "host": host,
            "x-acs-action": action,
            "x-acs-version": version,
            "x-acs-date": self.utcnow().strftime("%Y-%m-%dT%H:%M:%SZ"),
            "x-acs-signature-nonce": format(self.clock.nonce(), "x"),
            "x-acs-content-sha256": EMPTY_SHA256,
            "content-type": "application/json",
        }
        headers["Authorization"] = acs3_authorization(
            "POST", "/", query, headers, EMPTY_SHA256, account.api_key, account.api_secret
        )
        return HTTPRequestSpec(
            method="POST",
            url=f"https://{host}/",
            headers=headers,
            query=query,
            body_type=BodyType.RAW,
        )


register_transformer(AliyunTransformer.sub_provider, AliyunTransformer())
