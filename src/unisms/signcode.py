import base64
import hashlib
import hmac
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from urllib.parse import quote

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

ACS3_ALGORITHM = "ACS3-HMAC-SHA256"
TC3_ALGORITHM = "TC3-HMAC-SHA256"
VOLC_ALGORITHM = "HMAC-SHA256"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _bytes(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def sha256_hex(data: str | bytes) -> str:
    return hashlib.sha256(_bytes(data)).hexdigest()


def hmac_sha256(key: str | bytes, data: str | bytes) -> bytes:
    return hmac.new(_bytes(key), _bytes(data), hashlib.sha256).digest()


def hmac_sha256_hex(key: str | bytes, data: str | bytes) -> str:
    return hmac_sha256(key, data).hex()


def md5_hex(data: str | bytes) -> str:
    return hashlib.md5(_bytes(data)).hexdigest()


def sha1_hex(data: str | bytes) -> str:
    return hashlib.sha1(_bytes(data)).hexdigest()


def b64encode(data: str | bytes) -> str:
    return base64.b64encode(_bytes(data)).decode("ascii")


def base36(number: int) -> str:
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    number = abs(number)
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def percent_encode(value: Any) -> str:
    """RFC 3986 encoding: space becomes %20, * becomes %2A and ~ is kept."""
    return quote(str(value), safe="")


def flatten_params(params: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in params.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value, start=1):
                item_name = f"{name}.{index}"
                if isinstance(item, Mapping):
                    flat.update(flatten_params(item, item_name))
                else:
                    flat[item_name] = "" if item is None else str(item)
        elif value is not None:
            flat[name] = str(value)
    return flat


def canonical_query(params: Mapping[str, Any]) -> str:
    flat = flatten_params(params)
    return "&".join(
        f"{percent_encode(key)}={percent_encode(flat[key])}" for key in sorted(flat)
    )


def canonical_headers(
    headers: Mapping[str, str], include: Any = None
) -> tuple[str, str]:
    """Return the canonical header block and the signed header list.

    ``include`` decides which lowercased header names take part in the
    signature; every header is signed when it is omitted.
    """
    selected: dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if include is None or include(lowered):
            selected[lowered] = value.strip()
    names = sorted(selected)
    block = "".join(f"{name}:{selected[name]}\n" for name in names)
    return block, ";".join(names)


def canonical_request(
    method: str,
    path: str,
    query: str,
    header_block: str,
    signed_headers: str,
    payload_hash: str,
) -> str:
    return "\n".join(
        [method.upper(), path, query, header_block, signed_headers, payload_hash]
    )


def _acs_header(name: str) -> bool:
    return name in ("host", "content-type") or name.startswith("x-acs-")


def acs3_authorization(
    method: str,
    path: str,
    query: Mapping[str, Any],
    headers: Mapping[str, str],
    payload_hash: str,
    access_key: str,
    secret: str,
) -> str:
    header_block, signed = canonical_headers(headers, _acs_header)
    request = canonical_request(
        method, path, canonical_query(query), header_block, signed, payload_hash
    )
    string_to_sign = f"{ACS3_ALGORITHM}\n{sha256_hex(request)}"
    signature = hmac_sha256_hex(secret, string_to_sign)
    return (
        f"{ACS3_ALGORITHM} Credential={access_key},"
        f"SignedHeaders={signed},Signature={signature}"
    )


def tc3_signature(secret: str, moment: datetime, payload: bytes) -> str:
    k_date = hmac_sha256("TC3" + secret, moment.strftime("%Y%m%d"))
    k_service = hmac_sha256(k_date, "sms")
    k_signing = hmac_sha256(k_service, "tc3_request")
    return hmac_sha256_hex(k_signing, payload)


def tc3_authorization(
    secret_id: str, secret: str, moment: datetime, payload: bytes
) -> str:
    scope = f"{moment.strftime('%Y-%m-%d')}/sms/tc3_request"
    signature = tc3_signature(secret, moment, payload)
    return (
        f"{TC3_ALGORITHM} Credential={secret_id}/{scope}, "
        f"SignedHeaders=content-type;host, Signature={signature}"
    )


def wsse_headers(app_key: str, secret: str, nonce: str, created: str) -> dict[str, str]:
    digest = b64encode(hashlib.sha256(_bytes(nonce + created + secret)).digest())
    return {
        "Authorization": 'WSSE realm="SDP",profile="UsernameToken",type="Appkey"',
        "X-WSSE": (
            f'UsernameToken Username="{app_key}",PasswordDigest="{digest}",'
            f'Nonce="{nonce}",Created="{created}"'
        ),
    }


def volc_signing_key(secret: str, short_date: str, region: str, service: str) -> bytes:
    k_date = hmac_sha256(secret, short_date)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, "request")


def volc_authorization(
    method: str,
    path: str,
    query: Mapping[str, Any],
    headers: Mapping[str, str],
    payload_hash: str,
    access_key: str,
    secret: str,
    x_date: str,
    region: str,
    service: str,
) -> str:
    short_date = x_date[:8]
    scope = f"{short_date}/{region}/{service}/request"
    header_block, signed = canonical_headers(headers)
    request = canonical_request(
        method, path, canonical_query(query), header_block, signed, payload_hash
    )
    string_to_sign = "\n".join([VOLC_ALGORITHM, x_date, scope, sha256_hex(request)])
    signature = hmac_sha256(
        volc_signing_key(secret, short_date, region, service), string_to_sign
    ).hex()
    return (
        f"{VOLC_ALGORITHM} Credential={access_key}/{scope}, "
        f"SignedHeaders={signed}, Signature={signature}"
    )


def cloopen_sig(account_sid: str, token: str, timestamp: str) -> str:
    return md5_hex(account_sid + token + timestamp).upper()


def cloopen_authorization(account_sid: str, timestamp: str) -> str:
    return b64encode(f"{account_sid}:{timestamp}")


def basic_authorization(username: str, password: str) -> str:
    return "Basic " + b64encode(f"{username}:{password}")


SUBMAIL_UNSIGNED_FIELDS = frozenset({"signature", "sign_type", "sign_version"})


def submail_signature(
    params: Mapping[str, str], app_id: str, app_key: str, sign_type: str
) -> str:
    """Sign a Submail request; ``normal`` sends the app key itself."""
    if sign_type == "normal":
        return app_key
    message = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in SUBMAIL_UNSIGNED_FIELDS
    )
    material = app_id + app_key + message + app_id + app_key
    if sign_type == "sha1":
        return sha1_hex(material)
    return md5_hex(material)
