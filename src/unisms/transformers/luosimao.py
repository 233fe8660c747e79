from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType, add_signature
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_plain, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import basic_authorization
from unisms.transformers.base import CHINA_TZ, BaseTransformer
from unisms.validation import ResponseHandler

SMS_HOST = "sms-api.luosimao.com"
VOICE_HOST = "voice-api.luosimao.com"


class LuosimaoTransformer(BaseTransformer):
    sub_provider = "luosimao"
    required_credentials = ("api_secret",)
    max_batch_size = 10000
    supports_scheduling = True
    response_config = ResponseValidatorConfig(
        success_field="error",
        success_value="0",
        error_code_field="error",
        error_message_field="msg",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.is_intl():
            raise self.unsupported("international messages")
        if not msg.content:
            raise ParamError("luosimao requires content")
        if msg.type == MessageType.VOICE:
            if msg.category != MessageCategory.VERIFICATION:
                raise self.unsupported("voice notifications")
            if msg.scheduled_at is not None:
                raise self.unsupported("scheduled voice")

    def _auth(self, account: Account) -> dict[str, str]:
        return {"Authorization": basic_authorization("api", f"key-{account.api_secret}")}

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        message = add_signature(msg.content, msg.sign_name)
        host = self.host(account, False, SMS_HOST)
        if not msg.has_multiple_recipients() and msg.scheduled_at is None:
            params = {"mobile": format_plain(msg.mobiles[0]), "message": message}
            return self.form_request(f"https://{host}/v1/send.json", params, self._auth(account)), None

        params = {
            "mobile_list": join_numbers(format_plain(m) for m in msg.mobiles),
            "message": message,
        }
        if msg.scheduled_at is not None:
            params["time"] = msg.scheduled_at.astimezone(CHINA_TZ).strftime("%Y-%m-%d %H:%M:%S")
        return (
            self.form_request(f"https://{host}/v1/send_batch.json", params, self._auth(account)),
            None,
        )

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params = {"mobile": format_plain(msg.mobiles[0]), "code": msg.content}
        return (
            self.form_request(f"https://{VOICE_HOST}/v1/verify.json", params, self._auth(account)),
            None,
        )


register_transformer(LuosimaoTransformer.sub_provider, LuosimaoTransformer())
