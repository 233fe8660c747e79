from unisms.models.account import Account
from unisms.models.message import Message, MessageCategory, MessageType
from unisms.models.request import BodyType, HTTPRequestSpec
from unisms.models.response import MatchMode, ResponseType, ResponseValidatorConfig
from unisms.models.result import SendResult

__all__ = [
    "Account",
    "BodyType",
    "HTTPRequestSpec",
    "MatchMode",
    "Message",
    "MessageCategory",
    "MessageType",
    "ResponseType",
    "ResponseValidatorConfig",
    "SendResult",
]
