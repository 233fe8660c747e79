from typing import Any


class SendResult:
    def __init__(
        self,
        status: str,
        message: str,
        provider: str = "",
        account: str = "",
        data: dict[str, Any] | str = "",
    ) -> None:
        self.status = status
        self.message = message
        self.provider = provider
        self.account = account
        self.data = data

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self):
        return {
            "status": self.status,
            "message": self.message,
            "provider": self.provider,
            "account": self.account,
            "data": self.data,
        }

    def __repr__(self) -> str:
        return (
            f"<SendResult status={self.status} provider={self.provider}"
            f" message={self.message}>"
        )
