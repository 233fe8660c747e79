from typing import Callable

import pytest

from unisms.errors import ParamError, ProviderError, UnsupportedCapabilityError
from unisms.models.account import Account
from unisms.models.message import Message, MessageType
from unisms.models.request import HTTPRequestSpec
from unisms.models.response import ResponseValidatorConfig
from unisms.transformers.base import BaseTransformer
from unisms.validation import ResponseHandler


class EchoTransformer(BaseTransformer):
    sub_provider = "echo"
    max_batch_size = 3
    response_config = ResponseValidatorConfig(success_field="ok", success_value="true")

    def __init__(self) -> None:
        super().__init__()
        self.seen: list[Message] = []
        self.register_handler(MessageType.TEXT, self._text)

    def _text(
        self, msg: Message, account: Account
    ) -> tuple[HTTPRequestSpec, ResponseHandler | None]:
        if msg.content == "fail":
            raise ParamError("handler failed")
        self.seen.append(msg)
        return HTTPRequestSpec(url="https://echo.test/"), None


def _message(**overrides: object) -> Message:
    fields: dict[str, object] = {"sub_provider": "echo", "mobiles": ["13800138000"], "content": "hi"}
    fields.update(overrides)
    return Message(**fields)  # type: ignore[arg-type]


def test_defaults_are_applied_before_the_handler(
    make_account: Callable[..., Account],
) -> None:
    transformer = EchoTransformer()
    account = make_account("echo", callback="https://cb.test", sign_name="Default")
    transformer.transform(_message(content="【Brand】your code is 1"), account)
    seen = transformer.seen[-1]
    assert seen.sign_name == "Brand"
    assert seen.content == "your code is 1"
    assert seen.callback_url == "https://cb.test"
    assert seen.region_code == 86

    transformer.transform(_message(), account)
    assert transformer.seen[-1].sign_name == "Default"


def test_explicit_values_win_over_account(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()
    account = make_account("echo", callback="https://cb.test", sign_name="Default")
    transformer.transform(_message(sign_name="Mine", callback_url="https://own"), account)
    assert transformer.seen[-1].sign_name == "Mine"
    assert transformer.seen[-1].callback_url == "https://own"

    transformer.transform(_message(sign_name="Mine", content="【Brand】hi"), account)
    assert transformer.seen[-1].content == "【Brand】hi"


def test_default_response_handler_is_substituted(make_account: Callable[..., Account]) -> None:
    spec, handler = EchoTransformer().transform(_message(), make_account("echo"))
    assert spec.url == "https://echo.test/"
    handler(200, b'{"ok": true}')
    with pytest.raises(ProviderError):
        handler(200, b'{"ok": false}')


@pytest.mark.parametrize(
    "overrides",
    [
        {"mobiles": []},
        {"mobiles": ["12345"]},
        {"mobiles": ["abc1234567"]},
        {"content": ""},
        {"mobiles": ["13800000001", "13800000002", "13800000003", "13800000004"]},
    ],
)
def test_validation_errors(overrides: dict, make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()
    with pytest.raises(ParamError):
        transformer.transform(_message(**overrides), make_account("echo"))
    assert transformer.seen == []


def test_surrounding_whitespace_in_numbers_is_tolerated(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()
    transformer.transform(_message(mobiles=[" 13800138000", "13900139000 "]), make_account("echo"))
    assert len(transformer.seen) == 1


def test_missing_credentials(make_account: Callable[..., Account]) -> None:
    with pytest.raises(ParamError):
        EchoTransformer().transform(_message(), make_account("echo", api_secret=""))


def test_unregistered_type_is_unsupported(make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError) as exc_info:
        EchoTransformer().transform(_message(type=MessageType.MMS, template_id="t"), make_account("echo"))
    assert exc_info.value.provider == "echo"
    assert exc_info.value.capability == "mms messages"


def test_hooks_run_in_order(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()
    calls: list[str] = []

    def before(msg: Message, account: Account) -> Message:
        calls.append("before")
        return msg.model_copy(update={"uid": "from-hook"})

    def after(msg: Message, account: Account, error: Exception | None) -> Exception | None:
        calls.append("after")
        assert error is None
        return None

    transformer.add_before_hook(before)
    transformer.add_after_hook(after)
    transformer.transform(_message(), make_account("echo"))
    assert calls == ["before", "after"]
    assert transformer.seen[-1].uid == "from-hook"


def test_after_hook_can_rewrite_errors(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()

    def normalize(msg: Message, account: Account, error: Exception | None) -> Exception | None:
        if isinstance(error, ParamError):
            return ParamError(f"echo: {error}")
        return error

    transformer.add_after_hook(normalize)
    with pytest.raises(ParamError, match="echo: handler failed"):
        transformer.transform(_message(content="fail"), make_account("echo"))


def test_after_hook_returning_none_keeps_the_error(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()
    transformer.add_after_hook(lambda msg, account, error: None)
    with pytest.raises(ParamError, match="handler failed"):
        transformer.transform(_message(content="fail"), make_account("echo"))

    spec, handler = transformer.transform(_message(), make_account("echo"))
    assert spec.url == "https://echo.test/"
    assert callable(handler)


def test_unsupported_type_fails_before_vendor_checks(make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError) as exc_info:
        EchoTransformer().transform(_message(type=MessageType.VOICE), make_account("echo"))
    assert exc_info.value.capability == "voice messages"


def test_before_hook_error_skips_handler(make_account: Callable[..., Account]) -> None:
    transformer = EchoTransformer()

    def reject(msg: Message, account: Account) -> None:
        raise ParamError("blocked")

    transformer.add_before_hook(reject)
    with pytest.raises(ParamError, match="blocked"):
        transformer.transform(_message(), make_account("echo"))
    assert transformer.seen == []
