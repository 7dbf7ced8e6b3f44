"""
Trade Order - Account Lookup.

Frame 1 resolves the account, its owner and broker. Frame 2
checks that an executor other than the owner holds a
permission grant on the account.
"""

from sqlalchemy.orm import Session

from storage.repositories.accounts import (
    AccountPermissionRepository,
    CustomerAccountRepository,
)

from .errors import required_row
from .types import AccountProfile


class AccountLookup:
    """Account and permission lookups within a session."""

    def __init__(self, session: Session):
        self._accounts = CustomerAccountRepository(session)
        self._permissions = AccountPermissionRepository(session)

    def resolve_account(self, account_id: int) -> AccountProfile:
        """
        Resolve account, customer and broker attributes.

        Raises:
            NotFoundError: Unknown account
        """
        with required_row("CustomerAccount", account_id):
            row = self._accounts.get_account_profile(account_id)

        return AccountProfile(
            account_id=account_id,
            broker_id=row.ca_b_id,
            customer_id=row.ca_c_id,
            account_name=row.ca_name,
            tax_status=row.ca_tax_st,
            customer_last_name=row.c_l_name,
            customer_first_name=row.c_f_name,
            customer_tax_id=row.c_tax_id,
            customer_tier=row.c_tier,
            broker_name=row.b_name,
        )

    def is_permission_denied(
        self,
        account_id: int,
        exec_first_name: str,
        exec_last_name: str,
        exec_tax_id: str,
    ) -> bool:
        """True when no grant matches the executor's identity."""
        grants = self._permissions.count_grants(
            account_id, exec_first_name, exec_last_name, exec_tax_id
        )
        return grants == 0
