import json
import logging
import re
from typing import Any, Callable

from unisms.errors import ProviderError, TransportError
from unisms.models.response import MatchMode, ResponseType, ResponseValidatorConfig

logger = logging.getLogger("unisms")

ResponseHandler = Callable[[int, bytes], None]

INVALID_RESPONSE = "INVALID_RESPONSE"


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dotted path (``a.b.0.c``) through dicts and lists."""
    if not path:
        return None
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def matches(value: str, expected: str, mode: MatchMode) -> bool:
    if mode == MatchMode.NOT_EQUALS:
        return value != expected
    if mode == MatchMode.REGEX:
        return re.search(expected, value) is not None
    return value == expected


class ResponseValidator:
    def __init__(self, provider: str, config: ResponseValidatorConfig) -> None:
        self.provider = provider
        self.config = config

    def __call__(self, status_code: int, body: bytes) -> None:
        self.validate(status_code, body)

    def validate(self, status_code: int, body: bytes) -> None:
        low, high = self.config.success_status_codes
        text = body.decode("utf-8", errors="replace")
        if not low <= status_code <= high:
            logger.error(f"{self.provider}: HTTP {status_code} from server: {text}")
            raise TransportError(status_code, text)

        if self.config.response_type == ResponseType.TEXT:
            self._validate_text(text.strip())
        else:
            self._validate_json(text)

    def _fail(self, code: str, message: str) -> ProviderError:
        message = self.config.error_code_map.get(code, message)
        logger.error(f"{self.provider} rejected the request: {code} {message}")
        return ProviderError(self.provider, code, message)

    def _validate_text(self, text: str) -> None:
        if not matches(text, self.config.success_value, self.config.mode):
            raise self._fail(text, text)

    def _validate_json(self, text: str) -> None:
        try:
            data = json.loads(text)
        except ValueError as e:
            logger.error(f"{self.provider}: invalid JSON response: {e}")
            raise ProviderError(
                self.provider, INVALID_RESPONSE, f"invalid JSON response: {text}"
            ) from e

        value = _as_text(resolve_path(data, self.config.success_field))
        if not matches(value, self.config.success_value, self.config.mode):
            code = _as_text(resolve_path(data, self.config.error_code_field)) or value
            message = _as_text(resolve_path(data, self.config.error_message_field))
            raise self._fail(code, message)

        if self.config.status_set_field:
            self._validate_status_set(data)

    def _validate_status_set(self, data: Any) -> None:
        statuses = resolve_path(data, self.config.status_set_field)
        if not isinstance(statuses, list):
            return
        for status in statuses:
            code = _as_text(resolve_path(status, self.config.status_code_field))
            if code != self.config.status_success_value:
                message = _as_text(resolve_path(status, self.config.status_message_field))
                raise self._fail(code, message)


def build_response_handler(
    provider: str, config: ResponseValidatorConfig
) -> ResponseHandler:
    return ResponseValidator(provider, config)
