from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from unisms.clock import FrozenClock
from unisms.models.account import Account

FIXED_TIME = datetime(2024, 3, 1, 8, 30, 15, tzinfo=timezone.utc)
FIXED_NONCE = 0xABCDEF


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FIXED_TIME, nonce=FIXED_NONCE)


def build_account(sub_provider: str, **overrides: Any) -> Account:
    fields: dict[str, Any] = {
        "name": f"{sub_provider}-primary",
        "sub_provider": sub_provider,
        "api_key": "AK",
        "api_secret": "SK",
        "app_id": "1400000000",
        "sender_id": "csms12345678",
    }
    fields.update(overrides)
    return Account(**fields)


@pytest.fixture
def make_account() -> Callable[..., Account]:
    return build_account
