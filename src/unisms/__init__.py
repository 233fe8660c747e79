from unisms import transformers  # noqa: F401
from unisms.builders import (
    aliyun,
    cl253,
    huawei,
    juhe,
    luosimao,
    smsbao,
    submail,
    tencent,
    ucp,
    volc,
    yunpian,
    yuntongxun,
)
from unisms.errors import (
    NetworkError,
    ParamError,
    ProviderError,
    SMSError,
    TransportError,
    UnsupportedCapabilityError,
)
from unisms.models import (
    Account,
    HTTPRequestSpec,
    Message,
    MessageCategory,
    MessageType,
    ResponseValidatorConfig,
    SendResult,
)
from unisms.registry import get_transformer, register_transformer, registered_tags
from unisms.sender import Sender

__all__ = [
    "Account",
    "HTTPRequestSpec",
    "Message",
    "MessageCategory",
    "MessageType",
    "NetworkError",
    "ParamError",
    "ProviderError",
    "ResponseValidatorConfig",
    "SMSError",
    "SendResult",
    "Sender",
    "TransportError",
    "UnsupportedCapabilityError",
    "aliyun",
    "cl253",
    "get_transformer",
    "huawei",
    "juhe",
    "luosimao",
    "register_transformer",
    "registered_tags",
    "smsbao",
    "submail",
    "tencent",
    "ucp",
    "volc",
    "yunpian",
    "yuntongxun",
]
