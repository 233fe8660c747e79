from typing import Any

from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType, add_signature
from unisms.models.options import SubmailOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import submail_signature
from unisms.transformers.base import BaseTransformer, compact, json_string
from unisms.validation import ResponseHandler

HOST = "api-v4.mysubmail.com"
INTL_BATCH_LIMIT = 1000

# (international, template, batch) -> path
TEXT_PATHS = {
    (True, True, True): "/internationalsms/multixsend",
    (True, True, False): "/internationalsms/xsend",
    (True, False, True): "/internationalsms/batchsend",
    (True, False, False): "/internationalsms/send",
    (False, True, True): "/sms/multixsend",
    (False, True, False): "/sms/xsend",
    (False, False, True): "/sms/batchsend",
    (False, False, False): "/sms/send",
}


class SubmailTransformer(BaseTransformer):
    sub_provider = "submail"
    max_batch_size = 10000
    response_config = ResponseValidatorConfig(
        success_field="status",
        success_value="success",
        error_code_field="code",
        error_message_field="msg",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)
        self.register_handler(MessageType.VOICE, self._voice)
        self.register_handler(MessageType.MMS, self._mms)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.is_intl() and len(msg.mobiles) > INTL_BATCH_LIMIT:
            raise ParamError(
                f"submail accepts at most {INTL_BATCH_LIMIT} international numbers per request"
            )
        if msg.type == MessageType.VOICE:
            if msg.is_intl():
                raise self.unsupported("international voice")
            if not (msg.template_id or msg.content):
                raise ParamError("submail voice requires content or a template id")
        recipient_params = msg.options_for(SubmailOptions).recipient_params
        if recipient_params:
            if not msg.template_id:
                raise ParamError("per-recipient parameters need a template id")
            unknown = set(recipient_params) - set(msg.mobiles)
            if unknown:
                raise ParamError(
                    f"per-recipient parameters for unknown numbers: {', '.join(sorted(unknown))}"
                )

    def _number(self, msg: Message, mobile: str) -> str:
        return format_prefixed(mobile, msg.region_code, plus=msg.is_intl())

    def _multi(self, msg: Message) -> str:
        overrides = msg.options_for(SubmailOptions).recipient_params
        return json_string(
            [
                {
                    "to": self._number(msg, m),
                    "vars": overrides.get(m, msg.template_params),
                }
                for m in msg.mobiles
            ]
        )

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        template = bool(msg.template_id)
        batch = msg.has_multiple_recipients()
        params: dict[str, Any] = {}
        if template and batch:
            params["multi"] = self._multi(msg)
        else:
            params["to"] = join_numbers(self._number(msg, m) for m in msg.mobiles)
        if template:
            params["project"] = msg.template_id
            if not batch and msg.template_params:
                params["vars"] = json_string(msg.template_params)
        else:
            params["content"] = add_signature(msg.content, msg.sign_name)
        path = TEXT_PATHS[(msg.is_intl(), template, batch)]
        return self._signed(msg, account, path, params), None

    def _voice(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params: dict[str, Any] = {"to": self._number(msg, msg.mobiles[0])}
        if msg.template_id:
            path = "/voice/xsend"
            params["project"] = msg.template_id
            if msg.template_params:
                params["vars"] = json_string(msg.template_params)
        else:
            path = "/voice/send"
            params["content"] = msg.content
        return self._signed(msg, account, path, params), None

    def _mms(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        params: dict[str, Any] = {"project": msg.template_id}
        if msg.has_multiple_recipients():
            path = "/mms/multixsend"
            params["multi"] = self._multi(msg)
        else:
            path = "/mms/xsend"
            params["to"] = self._number(msg, msg.mobiles[0])
            if msg.template_params:
                params["vars"] = json_string(msg.template_params)
        return self._signed(msg, account, path, params), None

    def _signed(
        self, msg: Message, account: Account, path: str, params: dict[str, Any]
    ) -> HTTPRequestSpec:
        options = msg.options_for(SubmailOptions)
        params = compact(
            {
                **params,
                "appid": account.api_key,
                "tag": options.tag or msg.uid,
                "sender": options.sender,
                "timestamp": str(int(self.utcnow().timestamp())),
            }
        )
        if options.sign_type != "normal":
            params["sign_type"] = options.sign_type
            params["sign_version"] = options.sign_version
        params["signature"] = submail_signature(
            params, account.api_key, account.api_secret, options.sign_type
        )
        host = self.host(account, msg.is_intl(), HOST)
        return self.form_request(f"https://{host}{path}", params)


register_transformer(SubmailTransformer.sub_provider, SubmailTransformer())
