"""
Account Repositories.

============================================================
PURPOSE
============================================================
Read access to customer accounts, their owners and brokers,
and the executor permission grants.

============================================================
"""

from decimal import Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from storage.models.accounts import (
    AccountPermission,
    Broker,
    Customer,
    CustomerAccount,
)
from storage.repositories.base import BaseRepository


class CustomerAccountRepository(BaseRepository[CustomerAccount]):
    """Repository for customer accounts."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, CustomerAccount, "CustomerAccountRepository")

    def get_account_profile(self, ca_id: int) -> Row:
        """
        Get account, owner and broker attributes in one read.

        Args:
            ca_id: Account identifier

        Returns:
            Row with ca_b_id, ca_c_id, ca_name, ca_tax_st, c_l_name,
            c_f_name, c_tax_id, c_tier, b_name

        Raises:
            RecordNotFoundError: If the account does not exist
        """
        stmt = (
            select(
                CustomerAccount.ca_b_id,
                CustomerAccount.ca_c_id,
                CustomerAccount.ca_name,
                CustomerAccount.ca_tax_st,
                Customer.c_l_name,
                Customer.c_f_name,
                Customer.c_tax_id,
                Customer.c_tier,
                Broker.b_name,
            )
            .join(Customer, Customer.c_id == CustomerAccount.ca_c_id)
            .join(Broker, Broker.b_id == CustomerAccount.ca_b_id)
            .where(CustomerAccount.ca_id == ca_id)
        )
        row = self._execute_one_row(stmt)
        if row is None:
            raise self._not_found(ca_id, "ca_id")
        return row

    def get_balance(self, ca_id: int) -> Decimal:
        """Get the cash balance of an account, raising if not found."""
        return self._get_by_id_or_raise(ca_id, "ca_id").ca_bal


class AccountPermissionRepository(BaseRepository[AccountPermission]):
    """Repository for executor permission grants."""

    def __init__(self, session: Session) -> None:
        super().__init__(session, AccountPermission, "AccountPermissionRepository")

    def count_grants(
        self,
        ca_id: int,
        first_name: str,
        last_name: str,
        tax_id: str,
    ) -> int:
        """Count grants matching the executor's identity on an account."""
        stmt = (
            select(func.count())
            .select_from(AccountPermission)
            .where(and_(
                AccountPermission.ap_ca_id == ca_id,
                AccountPermission.ap_f_name == first_name,
                AccountPermission.ap_l_name == last_name,
                AccountPermission.ap_tax_id == tax_id,
            ))
        )
        return self._execute_scalar(stmt) or 0
