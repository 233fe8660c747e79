"""Phone-number formatting families used by the vendor transformers."""

from collections.abc import Iterable

from unisms.models.message import DOMESTIC_REGION_CODES

CHINA_REGION_CODE = 86


def _bare(number: str) -> str:
    return number.strip().lstrip("+")


def _strip_country(number: str, region_code: int) -> str:
    explicit = number.strip().startswith("+")
    number = _bare(number)
    prefix = str(region_code)
    if number.startswith(prefix) and (explicit or len(number) > 11):
        return number[len(prefix) :]
    return number


def format_prefixed(number: str, region_code: int, plus: bool = False) -> str:
    """Bare domestic numbers, ``<cc><number>`` (or ``+<cc><number>``) abroad."""
    if region_code in DOMESTIC_REGION_CODES:
        return _strip_country(number, CHINA_REGION_CODE)
    national = _strip_country(number, region_code)
    return f"{'+' if plus else ''}{region_code}{national}"


def format_e164(number: str, region_code: int) -> str:
    if region_code in DOMESTIC_REGION_CODES:
        region_code = CHINA_REGION_CODE
    return f"+{region_code}{_strip_country(number, region_code)}"


def format_plain(number: str, region_code: int = 0) -> str:
    return number.strip()


def join_numbers(numbers: Iterable[str]) -> str:
    return ",".join(numbers)
