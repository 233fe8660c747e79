class SMSError(Exception):
    """Base class for every error raised while sending a message."""

    def is_retryable(self) -> bool:
        return False


class ParamError(SMSError):
    pass


class UnsupportedCapabilityError(SMSError):
    def __init__(self, provider: str, capability: str) -> None:
        self.provider = provider
        self.capability = capability
        super().__init__(f"{provider}: {capability} is not supported")


class ProviderError(SMSError):
    def __init__(self, provider: str, code: str, message: str) -> None:
        self.provider = provider
        self.code = code
        self.message = message
        super().__init__(f"{provider} error {code}: {message}")

    def __repr__(self) -> str:
        return (
            f"<ProviderError provider={self.provider} code={self.code}"
            f" message={self.message}>"
        )


class TransportError(SMSError):
    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")

    def is_retryable(self) -> bool:
        return True


class NetworkError(TransportError):
    """Connection failure, timeout or cancellation before a response arrived."""

    def __init__(self, reason: str) -> None:
        super().__init__(0, reason)
        self.args = (f"Error in network request: {reason}",)
