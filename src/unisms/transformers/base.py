import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Protocol
from urllib.parse import urlencode

from unisms.clock import CHINA_TZ, Clock, system_clock
from unisms.errors import ParamError, SMSError, UnsupportedCapabilityError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.request import BodyType, HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.validation import ResponseHandler, build_response_handler

logger = logging.getLogger("unisms")

Handler = Callable[[Message, Account], tuple[HTTPRequestSpec, ResponseHandler | None]]
BeforeHook = Callable[[Message, Account], Message | None]
AfterHook = Callable[[Message, Account, Exception | None], Exception | None]


class Transformer(Protocol):
    sub_provider: str

    def can_handle(self, msg: Message) -> bool: ...

    def transform(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler]: ...


def json_body(data: Any) -> bytes:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def json_string(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), sort_keys=True)


def form_body(data: Mapping[str, Any]) -> bytes:
    pairs = sorted((key, str(value)) for key, value in data.items() if value is not None)
    return urlencode(pairs).encode("utf-8")


def compact(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is empty."""
    return {key: value for key, value in data.items() if value not in (None, "", [], {})}


class BaseTransformer:
    sub_provider = ""
    response_config = ResponseValidatorConfig()
    required_credentials: tuple[str, ...] = ("api_key", "api_secret")
    max_batch_size = 1000
    supports_scheduling = False

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or system_clock
        self.handlers: dict[MessageType, Handler] = {}
        self.before_hooks: list[BeforeHook] = [self._prepare]
        self.after_hooks: list[AfterHook] = []

    def register_handler(self, msg_type: MessageType, handler: Handler) -> None:
        self.handlers[msg_type] = handler

    def add_before_hook(self, hook: BeforeHook) -> None:
        self.before_hooks.append(hook)

    def add_after_hook(self, hook: AfterHook) -> None:
        self.after_hooks.append(hook)

    def can_handle(self, msg: Message) -> bool:
        return msg.sub_provider == self.sub_provider

    def default_response_handler(self) -> ResponseHandler:
        return build_response_handler(self.sub_provider, self.response_config)

    def response_handler(self, config: ResponseValidatorConfig) -> ResponseHandler:
        return build_response_handler(self.sub_provider, config)

    def transform(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler]:
        for hook in self.before_hooks:
            replacement = hook(msg, account)
            if replacement is not None:
                msg = replacement

        error: Exception | None = None
        try:
            handler = self.handlers.get(msg.type)
            if handler is None:
                raise self.unsupported(f"{msg.type.value} messages")
            spec, response_handler = handler(msg, account)
        except SMSError as e:
            error = e

        for after in self.after_hooks:
            error = after(msg, account, error) or error

        if error is not None:
            raise error
        logger.debug(f"{self.sub_provider}: {spec.method} {spec.url}")
        return spec, response_handler or self.default_response_handler()

    def utcnow(self) -> datetime:
        return self.clock.now().astimezone(timezone.utc)

    def china_now(self) -> datetime:
        return self.clock.now().astimezone(CHINA_TZ)

    def unsupported(self, capability: str) -> UnsupportedCapabilityError:
        return UnsupportedCapabilityError(self.sub_provider, capability)

    def _prepare(self, msg: Message, account: Account) -> Message:
        msg = msg.apply_defaults(account)
        self.validate_common(msg, account)
        self.validate(msg, account)
        return msg

    def validate_common(self, msg: Message, account: Account) -> None:
        if msg.type not in self.handlers:
            raise self.unsupported(f"{msg.type.value} messages")
        msg.validate_for_send()
        missing = [name for name in self.required_credentials if not getattr(account, name)]
        if missing:
            raise ParamError(
                f"{self.sub_provider} account {account.name!r} is missing {', '.join(missing)}"
            )
        if len(msg.mobiles) > self.max_batch_size:
            raise ParamError(
                f"{self.sub_provider} accepts at most {self.max_batch_size} numbers per request"
            )
        if msg.scheduled_at is not None and not self.supports_scheduling:
            raise self.unsupported("scheduled sending")
        if msg.type == MessageType.VOICE and msg.has_multiple_recipients():
            raise self.unsupported("batch voice")
        if msg.type == MessageType.MMS and msg.is_intl():
            raise self.unsupported("international MMS")

    def validate(self, msg: Message, account: Account) -> None:
        """Vendor specific checks; runs after the common ones."""

    def region(self, msg: Message, account: Account, default: str) -> str:
        options = msg.options
        if options is not None and options.region:
            return options.region
        return account.region or default

    def host(self, account: Account, intl: bool, default: str) -> str:
        if intl and account.intl_endpoint:
            return account.intl_endpoint
        return account.endpoint or default

    def json_request(
        self, url: str, data: Any, headers: dict[str, str] | None = None
    ) -> HTTPRequestSpec:
        return HTTPRequestSpec(
            method="POST",
            url=url,
            headers={"Content-Type": "application/json", **(headers or {})},
            body=json_body(data),
            body_type=BodyType.JSON,
        )

    def form_request(
        self, url: str, data: Mapping[str, Any], headers: dict[str, str] | None = None
    ) -> HTTPRequestSpec:
        return HTTPRequestSpec(
            method="POST",
            url=url,
            headers={"Content-Type": "application/x-www-form-urlencoded", **(headers or {})},
            body=form_body(data),
            body_type=BodyType.FORM,
        )
