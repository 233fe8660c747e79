from unisms.clock import Clock
from unisms.errors import ParamError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.options import VolcOptions
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.phone import format_prefixed, join_numbers
from unisms.registry import register_transformer
from unisms.signcode import sha256_hex, volc_authorization
from unisms.transformers.base import BaseTransformer, compact, json_string
from unisms.validation import ResponseHandler

HOST = "sms.volcengineapi.com"
ACTION = "SendSms"
VERSION = "2020-01-01"
SERVICE = "volcSMS"
DEFAULT_REGION = "cn-north-1"


class VolcTransformer(BaseTransformer):
    sub_provider = "volc"
    max_batch_size = 200
    response_config = ResponseValidatorConfig(
        success_field="ResponseMetadata.Error.Code",
        success_value="",
        error_code_field="ResponseMetadata.Error.Code",
        error_message_field="ResponseMetadata.Error.Message",
    )

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.register_handler(MessageType.TEXT, self._text)

    def validate(self, msg: Message, account: Account) -> None:
        if msg.is_intl():
            raise self.unsupported("international messages")
        if not msg.sign_name:
            raise ParamError("volc SMS requires a sign name")
        if not msg.template_id:
            raise ParamError("volc SMS requires a template id")
        if not (msg.options_for(VolcOptions).sms_account or account.app_id):
            raise ParamError("volc SMS requires an SMS account")

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        options = msg.options_for(VolcOptions)
        payload = compact(
            {
                "SmsAccount": options.sms_account or account.app_id,
                "Sign": msg.sign_name,
                "TemplateID": msg.template_id,
                "TemplateParam": json_string(msg.template_params) if msg.template_params else "",
                "PhoneNumbers": join_numbers(
                    format_prefixed(m, msg.region_code) for m in msg.mobiles
                ),
                "Tag": options.tag,
            }
        )
        host = self.host(account, False, HOST)
        region = self.region(msg, account, DEFAULT_REGION)
        query = {"Action": ACTION, "Version": VERSION}
        spec = self.json_request(f"https://{host}/", payload)
        spec.query.update(query)

        payload_hash = sha256_hex(spec.body)
        x_date = self.utcnow().strftime("%Y%m%dT%H%M%SZ")
        signed = {
            "Content-Type": spec.headers["Content-Type"],
            "Host": host,
            "X-Content-Sha256": payload_hash,
            "X-Date": x_date,
        }
        spec.headers.update(signed)
        spec.headers["Authorization"] = volc_authorization(
            "POST",
            "/",
            query,
            signed,
            payload_hash,
            account.api_key,
            account.api_secret,
            x_date,
            region,
            SERVICE,
        )
        return spec, None


register_transformer(VolcTransformer.sub_provider, VolcTransformer())
