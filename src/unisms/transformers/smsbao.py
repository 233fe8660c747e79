from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType, add_signature
from unisms.models.options import SmsbaoOptions
from unisms.models.request import BodyType, HTTPRequestSpec
from unisms.models.response import ResponseType, ResponseValidatorConfig
from unisms.phone import format_plain, format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import md5_hex
from unisms.transformers.base import BaseTransformer, compact
from unisms.validation import ResponseHandler

SMS_HOST = "api.smsbao.com"
VOICE_URL = "http://api.smsbao.com/voice"

ERROR_MESSAGES = {
    "30": "password error",
    "40": "account does not exist",
    "41": "insufficient balance",
    "42": "account expired",
    "43": "IP address restricted",
    "50": "content contains sensitive words",
    "51": "incorrect mobile number",
}


class SmsbaoTransformer(BaseTransformer):
    sub_provider = "smsbao"
    max_batch_size = 99
    response_config = ResponseValidatorConfig(
        response_type=ResponseType.TEXT,
        success_value="0",
        error_code_map=ERROR_MESSAGES,
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)

    def validate(self, msg: Message, account: Account) -> None:
        if not msg.content:
            raise ParamError("smsbao requires content")
        if msg.type == MessageType.VOICE and msg.is_intl():
            raise self.unsupported("international voice")

    def _credentials(self, account: Account) -> dict[str, str]:
        return {"u": account.api_key, "p": md5_hex(account.api_secret)}

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        host = self.host(account, msg.is_intl(), SMS_HOST)
        if msg.is_intl():
            url = f"https://{host}/wsms"
            mobiles = [format_prefixed(m, msg.region_code, plus=True) for m in msg.mobiles]
            product = ""
        else:
            url = f"https://{host}/sms"
            mobiles = [format_plain(m) for m in msg.mobiles]
            product = msg.options_for(SmsbaoOptions).product_id
        query = compact(
            {
                **self._credentials(account),
                "m": join_numbers(mobiles),
                "c": add_signature(msg.content, msg.sign_name),
                "g": product,
            }
        )
        return HTTPRequestSpec(method="GET", url=url, query=query, body_type=BodyType.NONE), None

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        query = {
            **self._credentials(account),
            "m": format_plain(msg.mobiles[0]),
            "c": msg.content,
        }
        return HTTPRequestSpec(method="GET", url=VOICE_URL, query=query, body_type=BodyType.NONE), None


register_transformer(SmsbaoTransformer.sub_provider, SmsbaoTransformer())
