"""
Cached chart of accounts.

Fetching accounts for every lookup is slow and burns rate limit, so
AccountsList loads them once and answers code/type lookups from memory.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Iterator, Optional

from loguru import logger

from .exceptions import NotLoadedError
from .models import Account

if TYPE_CHECKING:
    from .gateway import Gateway


class AccountsList:
    """
    Usage:
        accounts = gateway.get_accounts_list()
        sales = accounts.find_by_code("200")
        banks = accounts.find_all_by_type("BANK")
    """

    def __init__(self, gateway: "Gateway", load_on_init: bool = True):
        self.gateway = gateway
        self._accounts: Optional[list[Account]] = None
        self._by_code: dict[str, Account] = {}
        if load_on_init:
            self.load()

    @property
    def loaded(self) -> bool:
        return self._accounts is not None

    def load(self) -> "AccountsList":
        """(Re)load all accounts from Xero."""
        response = self.gateway.get_accounts()
        self._accounts = response.items
        self._by_code = {account.code: account for account in self._accounts if account.code}
        logger.debug(f"Loaded {len(self._accounts)} accounts")
        return self

    @property
    def accounts(self) -> list[Account]:
        if self._accounts is None:
            raise NotLoadedError("Accounts list has not been loaded; call load() first")
        return self._accounts

    def find_by_code(self, code: str) -> Optional[Account]:
        if not self.loaded:
            raise NotLoadedError("Accounts list has not been loaded; call load() first")
        return self._by_code.get(code)

    def __getitem__(self, code: str) -> Account:
        account = self.find_by_code(code)
        if account is None:
            raise KeyError(code)
        return account

    def find_all_by_type(self, account_type: str) -> list[Account]:
        return [account for account in self.accounts if account.type == account_type]

    def find_all_by_tax_type(self, tax_type: str) -> list[Account]:
        return [account for account in self.accounts if account.tax_type == tax_type]

    def __iter__(self) -> Iterator[Account]:
        return iter(self.accounts)

    def __len__(self) -> int:
        return len(self.accounts)
