import random
import time
from datetime import datetime, timedelta, timezone

CHINA_TZ = timezone(timedelta(hours=8))


class Clock:
    """Source of time and nonces for request signing."""

    def __init__(self) -> None:
        self._random = random.SystemRandom()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def time_ns(self) -> int:
        return time.time_ns()

    def nonce(self) -> int:
        return self._random.getrandbits(63)


class FrozenClock(Clock):
    def __init__(self, moment: datetime, nonce: int = 0x1234ABCD) -> None:
        super().__init__()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self._moment = moment
        self._nonce = nonce

    def now(self) -> datetime:
        return self._moment

    def time_ns(self) -> int:
        return int(self._moment.timestamp()) * 1_000_000_000 + self._moment.microsecond * 1000

    def nonce(self) -> int:
        return self._nonce


system_clock = Clock()
