from datetime import datetime, timezone
from typing import Callable

import pytest

import unisms  # noqa: F401
from unisms.builders import BUILDERS
from unisms.errors import UnsupportedCapabilityError
from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType
from unisms.registry import get_transformer

VOICE_VENDORS = ["aliyun", "luosimao", "smsbao", "submail", "tencent", "yunpian", "yuntongxun"]
NO_VOICE_VENDORS = ["cl253", "huawei", "juhe", "ucp", "volc"]
SCHEDULING_VENDORS = {"cl253", "luosimao"}


def _voice(tag: str, mobiles: list[str], region_code: int = 0) -> Message:
    return (
        BUILDERS[tag]()
        .to(mobiles)
        .region_code(region_code)
        .voice()
        .category(MessageCategory.VERIFICATION)
        .content("1234")
        .template_id("TTS_1")
        .build()
    )


def _transform(msg: Message, account: Account) -> None:
    transformer = get_transformer(msg.sub_provider)
    assert transformer is not None
    transformer.transform(msg, account)


@pytest.mark.parametrize("tag", VOICE_VENDORS)
def test_batch_voice_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError):
        _transform(_voice(tag, ["13800138000", "13900139000"]), make_account(tag))


@pytest.mark.parametrize("tag", VOICE_VENDORS)
def test_international_voice_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError):
        _transform(_voice(tag, ["5551234"], region_code=1), make_account(tag))


@pytest.mark.parametrize("tag", NO_VOICE_VENDORS)
def test_voice_unsupported(tag: str, make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError) as exc_info:
        _transform(_voice(tag, ["13800138000"]), make_account(tag))
    assert exc_info.value.capability == "voice messages"


@pytest.mark.parametrize("tag", sorted(BUILDERS))
def test_international_mms_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    msg = BUILDERS[tag]().to("91234567").region_code(852).type(MessageType.MMS).template_id("m").build()
    with pytest.raises(UnsupportedCapabilityError):
        _transform(msg, make_account(tag))


@pytest.mark.parametrize("tag", ["cl253", "juhe", "yunpian"])
def test_international_bulk_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    msg = BUILDERS[tag]().to("5551234", "5551235").region_code(1).content("x").template_id("1").build()
    if tag == "yunpian":
        msg = msg.model_copy(update={"template_id": ""})
    with pytest.raises(UnsupportedCapabilityError):
        _transform(msg, make_account(tag))


@pytest.mark.parametrize("tag", ["volc", "luosimao"])
def test_international_text_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    msg = BUILDERS[tag]().to("5551234").region_code(1).content("x").sign_name("S").template_id("T").build()
    with pytest.raises(UnsupportedCapabilityError):
        _transform(msg, make_account(tag))


@pytest.mark.parametrize("tag", sorted(set(BUILDERS) - SCHEDULING_VENDORS))
def test_scheduling_rejected(tag: str, make_account: Callable[..., Account]) -> None:
    msg = (
        BUILDERS[tag]()
        .to("13800138000")
        .content("x")
        .sign_name("S")
        .template_id("SMS_1")
        .scheduled_at(datetime(2030, 1, 1, tzinfo=timezone.utc))
        .build()
    )
    with pytest.raises(UnsupportedCapabilityError) as exc_info:
        _transform(msg, make_account(tag))
    assert exc_info.value.capability == "scheduled sending"
