from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.options import HuaweiOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_e164, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import base36, wsse_headers
from unisms.transformers.base import BaseTransformer, compact, json_string
from unisms.validation import ResponseHandler

DEFAULT_HOST = "api.rtc.huaweicloud.com:10443"
BATCH_SEND_PATH = "/sms/batchSendSms/v1"


class HuaweiTransformer(BaseTransformer):
    sub_provider = "huawei"
    max_batch_size = 500
    response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="000000",
        error_code_field="code",
        error_message_field="description",
        status_set_field="result",
        status_code_field="status",
        status_success_value="000000",
        status_message_field="status",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)

    def validate(self, msg: Message, account: Account) -> None:
        if not msg.template_id:
            raise ParamError("huawei SMS requires a template id")
        if not self._sender(msg, account):
            raise ParamError("huawei SMS requires a sender channel number")
        if msg.is_domestic() and not msg.sign_name:
            raise ParamError("huawei domestic SMS requires a sign name")

    def _sender(self, msg: Message, account: Account) -> str:
        return msg.options_for(HuaweiOptions).sender or account.sender_id or account.app_id

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        positional = msg.positional_params()
        params = compact(
            {
                "from": self._sender(msg, account),
                "to": join_numbers(format_e164(m, msg.region_code) for m in msg.mobiles),
                "templateId": msg.template_id,
                "templateParas": json_string(positional) if positional else "",
                "signature": msg.sign_name if msg.is_domestic() else "",
                "statusCallback": msg.callback_url,
                "extend": msg.extend,
            }
        )
        created = self.utcnow().strftime("%Y-%m-%dT%H:%M:%SZ")
        nonce = base36(self.clock.time_ns())
        headers = wsse_headers(account.api_key, account.api_secret, nonce, created)
        host = self.host(account, msg.is_intl(), DEFAULT_HOST)
        return self.form_request(f"https://{host}{BATCH_SEND_PATH}", params, headers), None


register_transformer(HuaweiTransformer.sub_provider, HuaweiTransformer())
