import base64
import hashlib
import json
from typing import Callable

import pytest

from unisms import yuntongxun
from unisms.clock import FrozenClock
from unisms.errors import ParamError, UnsupportedCapabilityError
from unisms.models.account import Account
from unisms.transformers.yuntongxun import YuntongxunTransformer

# 08:30:15 UTC is 16:30:15 in Beijing
BEIJING_TIMESTAMP = "20240301163015"


def test_domestic_template_sms(clock: FrozenClock, make_account: Callable[..., Account]) -> None:
    msg = yuntongxun().to("13800138000", "13900139000").template_id("1").params_order(["1234", "5"]).build()
    spec, _ = YuntongxunTransformer(clock=clock).transform(msg, make_account("yuntongxun"))

    assert spec.url == "https://app.cloopen.com:8883/2013-12-26/Accounts/AK/SMS/TemplateSMS"
    assert spec.query["sig"] == hashlib.md5(f"AKSK{BEIJING_TIMESTAMP}".encode()).hexdigest().upper()
    assert spec.header("Authorization") == base64.b64encode(f"AK:{BEIJING_TIMESTAMP}".encode()).decode()
    assert spec.header("Content-Type") == "application/json;charset=utf-8"
    assert spec.header("Accept") == "application/json"
    assert json.loads(spec.body) == {
        "to": "13800138000,13900139000",
        "appId": "1400000000",
        "templateId": "1",
        "datas": ["1234", "5"],
    }


def test_international_sms(clock: FrozenClock, make_account: Callable[..., Account]) -> None:
    msg = yuntongxun().to("91234567").region_code(852).content("hello").sign_name("Brand").build()
    spec, _ = YuntongxunTransformer(clock=clock).transform(msg, make_account("yuntongxun"))
    assert spec.url == "https://hksms.cloopen.com:8883/v2/account/AK/international/send"
    body = json.loads(spec.body)
    assert body["mobile"] == "85291234567"
    assert body["content"] == "【Brand】hello"


def test_voice_calls(clock: FrozenClock, make_account: Callable[..., Account]) -> None:
    spec, _ = YuntongxunTransformer(clock=clock).transform(
        yuntongxun().to("13800138000").voice().verification().content("1234").play_times(2).build(),
        make_account("yuntongxun"),
    )
    assert spec.url.endswith("/Accounts/AK/Calls/VoiceVerify")
    body = json.loads(spec.body)
    assert body["verifyCode"] == "1234"
    assert body["playTimes"] == 2
    assert body["displayNum"] == "csms12345678"

    spec, _ = YuntongxunTransformer(clock=clock).transform(
        yuntongxun().to("13800138000").voice().content("your parcel arrived").build(),
        make_account("yuntongxun"),
    )
    assert spec.url.endswith("/Accounts/AK/Calls/LandingCalls")
    assert json.loads(spec.body)["mediaTxt"] == "your parcel arrived"


def test_gates(make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError):
        YuntongxunTransformer().transform(
            yuntongxun().to("5551234").region_code(1).voice().content("1").build(),
            make_account("yuntongxun"),
        )
    with pytest.raises(ParamError):
        YuntongxunTransformer().transform(
            yuntongxun().to("13800138000").content("no template").build(),
            make_account("yuntongxun"),
        )
