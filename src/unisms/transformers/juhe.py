from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_plain, format_prefixed
from unisms.registry import register_transformer
from unisms.transformers.base import BaseTransformer, compact, json_string
from unisms.validation import ResponseHandler

HOST = "v.juhe.cn"


class JuheTransformer(BaseTransformer):
    sub_provider = "juhe"
    required_credentials = ("api_key",)
    response_config = ResponseValidatorConfig(
        success_field="error_code",
        success_value="0",
        error_code_field="error_code",
        error_message_field="reason",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.MMS, self._mms)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.has_multiple_recipients():
            if msg.is_intl():
                raise self.unsupported("international bulk messages")
            raise self.unsupported("batch sending")
        if not msg.template_id:
            raise ParamError("juhe requires a template id")

    def _vars(self, msg: Message) -> str:
        return json_string(msg.template_params) if msg.template_params else ""

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        host = self.host(account, msg.is_intl(), HOST)
        # the country code travels separately in areaNum
        if msg.is_intl():
            mobile = format_plain(msg.mobiles[0])
        else:
            mobile = format_prefixed(msg.mobiles[0], msg.region_code)
        params = {
            "mobile": mobile,
            "tpl_id": msg.template_id,
            "vars": self._vars(msg),
            "key": account.api_key,
        }
        if msg.is_intl():
            params["areaNum"] = str(msg.region_code)
            return self.form_request(f"https://{host}/smsInternational/send", compact(params)), None
        params["ext"] = msg.extend
        return self.form_request(f"https://{host}/sms/send", compact(params)), None

    def _mms(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params = compact(
            {
                "mobile": format_prefixed(msg.mobiles[0], msg.region_code),
                "tpl_id": msg.template_id,
                "vars": self._vars(msg),
                "key": account.api_key,
            }
        )
        host = self.host(account, False, HOST)
        return self.form_request(f"https://{host}/caixinv2/send", params), None


register_transformer(JuheTransformer.sub_provider, JuheTransformer())
