from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType, add_signature
from unisms.models.options import CL253Options
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_plain, format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.transformers.base import CHINA_TZ, BaseTransformer, compact
from unisms.validation import ResponseHandler

DOMESTIC_HOST = "smssh1.253.com"
INTL_HOST = "intapi.253.com"


class CL253Transformer(BaseTransformer):
    sub_provider = "cl253"
    max_batch_size = 1000
    supports_scheduling = True
    response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="0",
        error_code_field="code",
        error_message_field="errorMsg",
    )
    intl_response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="0",
        error_code_field="code",
        error_message_field="error",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)

    def validate(self, msg: Message, account: Account) -> None:
        if not msg.content:
            raise ParamError("cl253 SMS requires content")
        if msg.is_intl():
            if msg.has_multiple_recipients():
                raise self.unsupported("international bulk messages")
            if msg.scheduled_at is not None:
                raise self.unsupported("scheduled international messages")

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        if msg.is_intl():
            return self._intl(msg, account)
        options = msg.options_for(CL253Options)
        sendtime = ""
        if msg.scheduled_at is not None:
            sendtime = msg.scheduled_at.astimezone(CHINA_TZ).strftime("%Y%m%d%H%M")
        payload = compact(
            {
                "account": account.api_key,
                "password": account.api_secret,
                "msg": add_signature(msg.content, msg.sign_name),
                "phone": join_numbers(format_plain(m) for m in msg.mobiles),
                "report": "true" if options.report else "",
                "callbackUrl": msg.callback_url,
                "uid": msg.uid,
                "extend": msg.extend,
                "sendtime": sendtime,
            }
        )
        host = self.host(account, False, DOMESTIC_HOST)
        return self.json_request(f"https://{host}/msg/v1/send/json", payload), None

    def _intl(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(CL253Options)
        payload = compact(
            {
                "account": account.api_key,
                "password": account.api_secret,
                "msg": add_signature(msg.content, msg.sign_name),
                "mobile": format_prefixed(msg.mobiles[0], msg.region_code),
                "senderId": options.sender_id or account.sender_id,
                "templateId": msg.template_id,
                "tdFlag": options.td_flag,
                "callbackUrl": msg.callback_url,
                "uid": msg.uid,
            }
        )
        host = self.host(account, True, INTL_HOST)
        return (
            self.json_request(f"https://{host}/send/sms", payload),
            self.response_handler(self.intl_response_config),
        )


register_transformer(CL253Transformer.sub_provider, CL253Transformer())
