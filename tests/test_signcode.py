import base64
import hashlib
import hmac
import itertools

from unisms import signcode


def test_hash_helpers_match_known_vectors() -> None:
    assert signcode.sha256_hex("") == signcode.EMPTY_SHA256
    assert signcode.md5_hex("abc") == "900150983cd24fb0d6963f7d28e17f72"
    assert signcode.sha1_hex("abc") == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert (
        signcode.hmac_sha256_hex("Jefe", "what do ya want for nothing?")
        == "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
    )


def test_base36() -> None:
    assert signcode.base36(0) == "0"
    assert signcode.base36(35) == "z"
    assert signcode.base36(36) == "10"
    assert signcode.base36(1295) == "zz"


def test_percent_encode_follows_rfc3986() -> None:
    assert signcode.percent_encode("a b") == "a%20b"
    assert signcode.percent_encode("a*b") == "a%2Ab"
    assert signcode.percent_encode("a~b") == "a~b"
    assert signcode.percent_encode("a+b") == "a%2Bb"
    assert signcode.percent_encode('{"code":"1"}') == "%7B%22code%22%3A%221%22%7D"


def test_flatten_params_expands_lists_and_maps() -> None:
    flat = signcode.flatten_params(
        {"Phones": ["1", "2"], "Tag": {"Key": "k", "Value": "v"}, "Empty": None}
    )
    assert flat == {"Phones.1": "1", "Phones.2": "2", "Tag.Key": "k", "Tag.Value": "v"}


def test_canonical_query_is_order_independent() -> None:
    params = {"b": "2", "a": "1 1", "c": "*", "d": "~"}
    expected = "a=1%201&b=2&c=%2A&d=~"
    for order in itertools.permutations(params):
        assert signcode.canonical_query({k: params[k] for k in order}) == expected


def test_canonical_headers_filters_and_sorts() -> None:
    block, signed = signcode.canonical_headers(
        {"X-Acs-Date": " now ", "Host": "h", "Accept": "x", "Content-Type": "j"},
        lambda name: name != "accept",
    )
    assert block == "content-type:j\nhost:h\nx-acs-date:now\n"
    assert signed == "content-type;host;x-acs-date"


def test_acs3_authorization_matches_manual_signature() -> None:
    headers = {"host": "example.com", "x-acs-action": "SendSms", "x-other": "ignored"}
    auth = signcode.acs3_authorization(
        "POST", "/", {"B": "2", "A": "1"}, headers, signcode.EMPTY_SHA256, "key", "secret"
    )
    canonical = (
        "POST\n/\nA=1&B=2\nhost:example.com\nx-acs-action:SendSms\n\n"
        f"host;x-acs-action\n{signcode.EMPTY_SHA256}"
    )
    string_to_sign = "ACS3-HMAC-SHA256\n" + hashlib.sha256(canonical.encode()).hexdigest()
    signature = hmac.new(b"secret", string_to_sign.encode(), hashlib.sha256).hexdigest()
    assert auth == (
        "ACS3-HMAC-SHA256 Credential=key,"
        f"SignedHeaders=host;x-acs-action,Signature={signature}"
    )


def test_wsse_digest() -> None:
    headers = signcode.wsse_headers("app", "secret", "abc", "2024-03-01T08:30:15Z")
    digest = base64.b64encode(
        hashlib.sha256(b"abc2024-03-01T08:30:15Zsecret").digest()
    ).decode()
    assert headers["X-WSSE"] == (
        f'UsernameToken Username="app",PasswordDigest="{digest}",'
        'Nonce="abc",Created="2024-03-01T08:30:15Z"'
    )
    assert headers["Authorization"] == 'WSSE realm="SDP",profile="UsernameToken",type="Appkey"'


def test_submail_signature_modes() -> None:
    params = {"to": "13800138000", "appid": "app", "signature": "x", "sign_type": "md5"}
    plain = "appid=app&to=13800138000"
    assert signcode.submail_signature(params, "app", "key", "normal") == "key"
    assert signcode.submail_signature(params, "app", "key", "md5") == hashlib.md5(
        f"appkey{plain}appkey".encode()
    ).hexdigest()
    assert signcode.submail_signature(params, "app", "key", "sha1") == hashlib.sha1(
        f"appkey{plain}appkey".encode()
    ).hexdigest()


def test_cloopen_helpers() -> None:
    assert signcode.cloopen_sig("sid", "token", "20240301163015") == hashlib.md5(
        b"sidtoken20240301163015"
    ).hexdigest().upper()
    assert signcode.cloopen_authorization("sid", "20240301163015") == base64.b64encode(
        b"sid:20240301163015"
    ).decode()
