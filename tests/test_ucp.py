import json
from typing import Callable

import pytest

from unisms import ucp
from unisms.errors import ParamError, UnsupportedCapabilityError
from unisms.models.account import Account
from unisms.transformers.ucp import UcpTransformer


def test_single_variable_sms(make_account: Callable[..., Account]) -> None:
    msg = ucp().to("13800138000").template_id("t1").params_order(["a", "b", "c"]).uid("u1").build()
    spec, _ = UcpTransformer().transform(msg, make_account("ucp"))
    assert spec.url == "http://open2.ucpaas.com/sms-server/variablesms"
    assert json.loads(spec.body) == {
        "clientid": "AK",
        "password": "SK",
        "templateid": "t1",
        "mobile": "13800138000",
        "param": "a;b;c",
        "uid": "u1",
    }


def test_batch_and_international(make_account: Callable[..., Account]) -> None:
    spec, _ = UcpTransformer().transform(
        ucp().to("13800138000", "13900139000").template_id("t1").build(), make_account("ucp")
    )
    assert spec.url.endswith("/templatesms")
    spec, _ = UcpTransformer().transform(
        ucp().to("91234567").region_code(852).template_id("t1").build(), make_account("ucp")
    )
    assert json.loads(spec.body)["mobile"] == "0085291234567"


def test_gates(make_account: Callable[..., Account]) -> None:
    with pytest.raises(UnsupportedCapabilityError):
        UcpTransformer().transform(
            ucp().to("5551234").region_code(1).voice().content("1").build(), make_account("ucp")
        )
    with pytest.raises(ParamError):
        UcpTransformer().transform(ucp().to("13800138000").content("x").build(), make_account("ucp"))
