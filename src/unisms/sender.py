import logging
from collections.abc import Iterable
from urllib.parse import quote, urlencode

import requests

from unisms.errors import NetworkError, ParamError, ProviderError
from unisms.models.account import Account
from unisms.models.message import Message
from unisms.models.request import BodyType, HTTPRequestSpec
from unisms.models.result import SendResult
from unisms.registry import TransformerRegistry, default_registry
from unisms.settings import SenderSettings, get_settings
from unisms.validation import ResponseHandler

logger = logging.getLogger("unisms")


class Sender:
    def __init__(
        self,
        accounts: Iterable[Account] = (),
        registry: TransformerRegistry | None = None,
        session: requests.Session | None = None,
        settings: SenderSettings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or default_registry
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self._settings.user_agent})
        self._accounts: list[Account] = []
        for account in accounts:
            self.add_account(account)

    def add_account(self, account: Account) -> None:
        if any(a.name == account.name for a in self._accounts):
            raise ParamError(f"duplicate account name: {account.name}")
        self._accounts.append(account)

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    def select_account(self, msg: Message, account_name: str | None = None) -> Account:
        for account in self._accounts:
            if account.disabled or account.sub_provider != msg.sub_provider:
                continue
            if account_name is None or account.name == account_name:
                return account
        raise ParamError(
            f"no enabled {msg.sub_provider} account"
            + (f" named {account_name!r}" if account_name else "")
        )

    def send(self, msg: Message, account_name: str | None = None) -> SendResult:
        account = self.select_account(msg, account_name)
        transformer = self._registry.get(msg.sub_provider)
        if transformer is None:
            raise ParamError(f"no transformer registered for {msg.sub_provider!r}")

        spec, handler = transformer.transform(msg, account)
        logger.info(
            f"Sending {msg.type.value} to {len(msg.mobiles)} recipient(s) via "
            f"{account.sub_provider}/{account.name}"
        )
        body = self.execute(spec, handler)
        return SendResult(
            status="success",
            message="Message accepted",
            provider=account.sub_provider,
            account=account.name,
            data=body,
        )

    def try_send(self, msg: Message, account_name: str | None = None) -> SendResult:
        """Like ``send`` but reports provider rejections as an error result."""
        try:
            return self.send(msg, account_name)
        except ProviderError as e:
            return SendResult(
                status="error",
                message=e.message,
                provider=e.provider,
                data={"code": e.code},
            )

    def execute(self, spec: HTTPRequestSpec, handler: ResponseHandler) -> str:
        url = spec.url
        if spec.query:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urlencode(spec.query, quote_via=quote)}"
        data = spec.body if spec.body and spec.body_type != BodyType.NONE else None
        try:
            res = self._session.request(
                method=spec.method,
                url=url,
                headers=spec.headers,
                data=data,
                timeout=spec.timeout or self._settings.timeout_seconds,
                verify=self._settings.verify_ssl,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error: {e}")
            raise NetworkError(str(e)) from e

        handler(res.status_code, res.content)
        return res.text
