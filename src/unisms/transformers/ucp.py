from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.transformers.base import BaseTransformer, compact
from unisms.validation import ResponseHandler

HOST = "open2.ucpaas.com"


class UcpTransformer(BaseTransformer):
    sub_provider = "ucp"
    max_batch_size = 100
    response_config = ResponseValidatorConfig(
        success_field="code",
        success_value="0",
        error_code_field="code",
        error_message_field="msg",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)

    def validate(self, msg: Message, account: Account) -> None:
        if not msg.template_id:
            raise ParamError("ucp requires a template id")

    def _number(self, msg: Message, mobile: str) -> str:
        if msg.is_intl():
            return "00" + format_prefixed(mobile, msg.region_code)
        return format_prefixed(mobile, msg.region_code)

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        payload = compact(
            {
                "clientid": account.api_key,
                "password": account.api_secret,
                "templateid": msg.template_id,
                "mobile": join_numbers(self._number(msg, m) for m in msg.mobiles),
                "param": ";".join(msg.positional_params()),
                "uid": msg.uid,
            }
        )
        path = "templatesms" if msg.has_multiple_recipients() else "variablesms"
        host = self.host(account, msg.is_intl(), HOST)
        return self.json_request(f"http://{host}/sms-server/{path}", payload), None


register_transformer(UcpTransformer.sub_provider, UcpTransformer())
