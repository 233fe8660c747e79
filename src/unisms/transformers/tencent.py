from typing import Any

from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType
from unisms.models.options import TencentOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_e164
from unisms.registry import register_transformer
from unisms.signcode import tc3_authorization
from unisms.transformers.base import BaseTransformer, compact
from unisms.validation import ResponseHandler

SMS_HOST = "sms.tencentcloudapi.com"
SMS_VERSION = "2021-01-11"
VOICE_HOST = "vms.tencentcloudapi.com"
VOICE_VERSION = "2020-09-02"
DEFAULT_REGION = "ap-guangzhou"


class TencentTransformer(BaseTransformer):
    sub_provider = "tencent"
    max_batch_size = 200
    response_config = ResponseValidatorConfig(
        success_field="Response.Error.Code",
        success_value="",
        error_code_field="Response.Error.Code",
        error_message_field="Response.Error.Message",
        status_set_field="Response.SendStatusSet",
        status_code_field="Code",
        status_success_value="Ok",
        status_message_field="Message",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)

    def validate(self, msg: Message, account: Account) -> None:
        options = msg.options_for(TencentOptions)
        if not (options.sdk_app_id or account.app_id):
            raise ParamError("tencent requires an SDK app id")
        if msg.type == MessageType.TEXT:
            if not msg.template_id:
                raise ParamError("tencent SMS requires a template id")
            if msg.is_domestic() and not msg.sign_name:
                raise ParamError("tencent domestic SMS requires a sign name")
        elif msg.type == MessageType.VOICE:
            if msg.is_intl():
                raise self.unsupported("international voice")
            if msg.category == MessageCategory.VERIFICATION:
                if not msg.content:
                    raise ParamError("tencent code voice requires the code as content")
            elif not msg.template_id:
                raise ParamError("tencent voice notifications require a template id")

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(TencentOptions)
        payload = compact(
            {
                "PhoneNumberSet": [format_e164(m, msg.region_code) for m in msg.mobiles],
                "SmsSdkAppId": options.sdk_app_id or account.app_id,
                "TemplateId": msg.template_id,
                "SignName": msg.sign_name,
                "TemplateParamSet": msg.positional_params(),
                "ExtendCode": options.extend_code or msg.extend,
                "SessionContext": options.session_context or msg.uid,
                "SenderId": options.sender_id,
            }
        )
        region = self.region(msg, account, DEFAULT_REGION)
        return (
            self._signed_request(
                self.host(account, False, SMS_HOST), "SendSms", SMS_VERSION, region, payload, account
            ),
            None,
        )

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(TencentOptions)
        payload: dict[str, Any] = {
            "CalledNumber": format_e164(msg.mobiles[0], msg.region_code),
            "VoiceSdkAppid": options.sdk_app_id or account.app_id,
            "PlayTimes": options.play_times,
            "SessionContext": options.session_context or msg.uid,
        }
        if msg.category == MessageCategory.VERIFICATION:
            action = "SendCodeVoice"
            payload["CodeMessage"] = msg.content
        else:
            action = "SendTtsVoice"
            payload["TemplateId"] = msg.template_id
            payload["TemplateParamSet"] = msg.positional_params()
        region = self.region(msg, account, DEFAULT_REGION)
        return (
            self._signed_request(VOICE_HOST, action, VOICE_VERSION, region, compact(payload), account),
            None,
        )

    def _signed_request(
        self,
        host: str,
        action: str,
        version: str,
        region: str,
        payload: dict[str, Any],
        account: Account,
    ) -> HTTPRequestSpec:
        now = self.utcnow()
        spec = self.json_request(f"https://{host}/", payload)
        spec.headers.update(
            {
                "Host": host,
                "X-TC-Action": action,
                "X-TC-Version": version,
                "X-TC-Timestamp": str(int(now.timestamp())),
                "X-TC-Region": region,
                "Authorization": tc3_authorization(
                    account.api_key, account.api_secret, now, spec.body
                ),
            }
        )
        return spec


register_transformer(TencentTransformer.sub_provider, TencentTransformer())
