"""
Trade Order - Security & Pricing Resolver.

============================================================
PURPOSE
============================================================
Resolves the security a trade refers to, its current market
price, and the characteristics of the requested trade type.

A security is addressed either by symbol or by the pair
(company name, issue), never both. Inputs are validated before
any lookup.

============================================================
"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from core.exceptions import InvalidInputError
from storage.repositories.reference import (
    CompanyRepository,
    LastTradeRepository,
    SecurityRepository,
    TradeTypeRepository,
)

from .errors import required_row
from .types import SecurityQuote, TradeTypeInfo


logger = logging.getLogger(__name__)


def validate_security_selector(symbol: str, company_name: str, issue: str) -> None:
    """
    Check that exactly one way of addressing the security is used.

    Raises:
        InvalidInputError: Both forms supplied, or neither complete
    """
    by_symbol = bool(symbol)
    by_company = bool(company_name) or bool(issue)

    if by_symbol and by_company:
        raise InvalidInputError(
            "symbol and (company name, issue) are mutually exclusive",
            field="symbol",
            context={"symbol": symbol, "company_name": company_name, "issue": issue},
        )
    if not by_symbol and not (company_name and issue):
        raise InvalidInputError(
            "either symbol or both company name and issue are required",
            field="company_name" if by_company else "symbol",
        )


def effective_requested_price(
    trade_type: TradeTypeInfo,
    market_price: Decimal,
    requested_price: Decimal,
) -> Decimal:
    """
    Price the trade is estimated at.

    Market orders trade at the current market price whatever the
    caller asked for; limit orders keep the caller's price.
    """
    return market_price if trade_type.is_market else requested_price


class SecurityResolver:
    """
    Resolves securities, prices and trade types within a session.
    """

    def __init__(self, session: Session):
        self._companies = CompanyRepository(session)
        self._securities = SecurityRepository(session)
        self._last_trades = LastTradeRepository(session)
        self._trade_types = TradeTypeRepository(session)

    def resolve(
        self,
        symbol: str = "",
        company_name: str = "",
        issue: str = "",
    ) -> SecurityQuote:
        """
        Resolve a security and its current market price.

        Args:
            symbol: Security symbol, or empty
            company_name: Issuing company name, or empty
            issue: Issue code, or empty

        Returns:
            SecurityQuote

        Raises:
            InvalidInputError: Inconsistent selector
            NotFoundError: Unknown security, company or price
        """
        validate_security_selector(symbol, company_name, issue)

        if symbol:
            with required_row("Security", symbol):
                security = self._securities.get_by_symbol(symbol)
            with required_row("Company", security.s_co_id):
                company = self._companies.get_company(security.s_co_id)
        else:
            with required_row("Company", company_name):
                company = self._companies.get_company_by_name(company_name)
            with required_row("Security", f"{company_name}/{issue}"):
                security = self._securities.get_by_company_issue(company.co_id, issue)

        with required_row("LastTrade", security.s_symb):
            market_price = self._last_trades.get_price(security.s_symb)

        quote = SecurityQuote(
            symbol=security.s_symb,
            security_name=security.s_name,
            company_name=company.co_name,
            exchange_id=security.s_ex_id,
            market_price=market_price,
        )
        logger.debug(
            f"Resolved security {quote.symbol} on {quote.exchange_id} "
            f"at market price {quote.market_price}"
        )
        return quote

    def resolve_trade_type(self, trade_type_id: str) -> TradeTypeInfo:
        """
        Resolve the market and sell flags of a trade type.

        Raises:
            NotFoundError: Unknown trade type code
        """
        with required_row("TradeType", trade_type_id):
            trade_type = self._trade_types.get_trade_type(trade_type_id)

        return TradeTypeInfo(
            trade_type_id=trade_type.tt_id,
            is_market=trade_type.tt_is_mrkt,
            is_sell=trade_type.tt_is_sell,
        )
