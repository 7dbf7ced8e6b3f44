"""
Trade Order - Service.

============================================================
PURPOSE
============================================================
Synchronous call interface of the order-placement workflow,
consumed by the benchmark driver.

ENTRY POINTS:
- resolve_account        (Frame 1)
- check_permission       (Frame 2)
- estimate_trade_impact  (Frame 3)
- commit_trade           (Frame 4)
- place_order            (Frames 1-4 in one transaction)

Each entry point runs in its own transaction. Lookups fail
fast with NotFoundError; any failure rolls the transaction
back. There are no retries here; retrying is the caller's
decision.

============================================================
FLOW (Frame 3)
============================================================

    resolve security ──► resolve trade type ──► effective price
                                                      │
                                                      ▼
                                                 match lots
                                                      │
              ┌───────────────────┬───────────────────┤
              ▼                   ▼                   ▼
         estimate tax        look up fees      compute assets
              └───────────────────┴───────────────────┘
                                  │
                                  ▼
                            select status

============================================================
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from core.clock import ClockProtocol
from core.exceptions import InvalidInputError, PermissionDeniedError
from database.engine import transaction_scope

from .account_lookup import AccountLookup
from .commit_writer import TradeCommitWriter
from .config import TradeOrderConfig
from .fee_calculator import FeeCalculator, commission_amount
from .id_generator import TradeIdGenerator
from .lot_matcher import LotMatcher
from .margin_calculator import MarginCalculator
from .security_resolver import (
    SecurityResolver,
    effective_requested_price,
    validate_security_selector,
)
from .status_selector import build_commit_plan, select_status
from .tax_estimator import TaxEstimator
from .types import (
    AccountProfile,
    LotOrdering,
    TradeCommitRequest,
    TradeImpactEstimate,
    TradeImpactRequest,
    TradeOrderRequest,
    TradeOrderResult,
)


logger = logging.getLogger(__name__)


def _validate_quantity(trade_qty: int) -> None:
    if trade_qty <= 0:
        raise InvalidInputError(
            f"trade quantity must be positive, got {trade_qty}",
            field="trade_qty",
        )


class TradeOrderService:
    """
    Order placement against the brokerage data store.

    ============================================================
    DEPENDENCIES (injected)
    ============================================================
    - session_factory: opens one session per call
    - id_generator: trade identifiers
    - clock: trade timestamps
    - config: status codes and taxable statuses

    ============================================================
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        id_generator: TradeIdGenerator,
        clock: Optional[ClockProtocol] = None,
        config: Optional[TradeOrderConfig] = None,
    ):
        self._session_factory = session_factory
        self._config = config or TradeOrderConfig()
        self._writer = TradeCommitWriter(id_generator, clock)

    @property
    def config(self) -> TradeOrderConfig:
        return self._config

    # --------------------------------------------------------
    # FRAME 1 / FRAME 2
    # --------------------------------------------------------

    def resolve_account(self, account_id: int) -> AccountProfile:
        """
        Resolve account, customer and broker attributes.

        Raises:
            NotFoundError: Unknown account
        """
        with transaction_scope(self._session_factory) as session:
            return AccountLookup(session).resolve_account(account_id)

    def check_permission(
        self,
        account_id: int,
        exec_first_name: str,
        exec_last_name: str,
        exec_tax_id: str,
    ) -> bool:
        """
        Check the executor's permission on the account.

        Returns:
            True when permission is DENIED (no matching grant)
        """
        with transaction_scope(self._session_factory) as session:
            return AccountLookup(session).is_permission_denied(
                account_id, exec_first_name, exec_last_name, exec_tax_id
            )

    # --------------------------------------------------------
    # FRAME 3
    # --------------------------------------------------------

    def estimate_trade_impact(self, request: TradeImpactRequest) -> TradeImpactEstimate:
        """
        Estimate the financial impact of a requested trade.

        Raises:
            InvalidInputError: Inconsistent security selector or quantity
            NotFoundError: Unresolvable security, trade type or rate
        """
        with transaction_scope(self._session_factory) as session:
            return self._estimate(session, request)

    def _estimate(self, session: Session, request: TradeImpactRequest) -> TradeImpactEstimate:
        validate_security_selector(request.symbol, request.company_name, request.issue)
        _validate_quantity(request.trade_qty)

        resolver = SecurityResolver(session)
        quote = resolver.resolve(request.symbol, request.company_name, request.issue)
        trade_type = resolver.resolve_trade_type(request.trade_type_id)
        price = effective_requested_price(trade_type, quote.market_price, request.requested_price)

        match = LotMatcher(session).estimate(
            account_id=request.account_id,
            symbol=quote.symbol,
            trade_qty=request.trade_qty,
            is_sell=trade_type.is_sell,
            ordering=LotOrdering.from_is_lifo(request.is_lifo),
            requested_price=price,
        )

        tax_amount = TaxEstimator(session, self._config.taxable_statuses).estimate(
            match, request.customer_id, request.tax_status
        )

        fees = FeeCalculator(session)
        comm_rate = fees.commission_rate(
            request.customer_tier, trade_type.trade_type_id, quote.exchange_id, request.trade_qty
        )
        charge_amount = fees.charge(request.customer_tier, trade_type.trade_type_id)

        assets = MarginCalculator(session).compute(request.account_id, request.is_margin)

        status_id = select_status(
            trade_type.is_market,
            request.pending_status_id,
            request.submitted_status_id,
        )

        estimate = TradeImpactEstimate(
            company_name=quote.company_name,
            requested_price=price,
            symbol=quote.symbol,
            security_name=quote.security_name,
            buy_value=match.acquisition_value,
            charge_amount=charge_amount,
            commission_rate=comm_rate,
            customer_assets=assets,
            market_price=quote.market_price,
            sell_value=match.disposal_value,
            status_id=status_id,
            tax_amount=tax_amount,
            is_market=trade_type.is_market,
            is_sell=trade_type.is_sell,
            exchange_id=quote.exchange_id,
        )

        logger.debug(
            f"Estimated {trade_type.trade_type_id} {request.trade_qty} {quote.symbol} "
            f"for account {request.account_id}: buy_value={estimate.buy_value} "
            f"sell_value={estimate.sell_value} tax={estimate.tax_amount} "
            f"status={estimate.status_id}"
        )
        return estimate

    # --------------------------------------------------------
    # FRAME 4
    # --------------------------------------------------------

    def commit_trade(self, request: TradeCommitRequest) -> int:
        """
        Create the trade, its pending request (limit orders) and
        its first history entry, atomically.

        Returns:
            Generated trade identifier

        Raises:
            TransactionFailureError: The unit of work failed; nothing
                was persisted
        """
        _validate_quantity(request.trade_qty)

        plan = build_commit_plan(
            is_market=request.is_market,
            account_id=request.account_id,
            trade_type_id=request.trade_type_id,
            symbol=request.symbol,
            trade_qty=request.trade_qty,
            requested_price=request.requested_price,
            status_id=request.status_id,
            exec_name=request.exec_name,
            is_cash=request.is_cash,
            is_lifo=request.is_lifo,
            charge=request.charge,
            commission=request.commission,
            tax=request.tax_amount,
        )

        with transaction_scope(self._session_factory) as session:
            trade_id = self._writer.write(session, plan)

        logger.info(
            f"Trade {trade_id} committed: {request.trade_type_id} {request.trade_qty} "
            f"{request.symbol} for account {request.account_id}, status {request.status_id}"
        )
        return trade_id

    # --------------------------------------------------------
    # FULL TRANSACTION
    # --------------------------------------------------------

    def place_order(self, request: TradeOrderRequest) -> TradeOrderResult:
        """
        Run the complete trade order transaction.

        The permission check is skipped when the executor is the
        account owner. With roll_it_back set, the trade is written
        and then rolled back, leaving no trace but the consumed id.

        Raises:
            PermissionDeniedError: Executor not authorized
            InvalidInputError / NotFoundError: As in the frames
            TransactionFailureError: Commit failed
        """
        with transaction_scope(self._session_factory) as session:
            lookup = AccountLookup(session)
            account = lookup.resolve_account(request.account_id)

            if not self._is_owner(account, request):
                denied = lookup.is_permission_denied(
                    request.account_id,
                    request.exec_first_name,
                    request.exec_last_name,
                    request.exec_tax_id,
                )
                if denied:
                    logger.warning(
                        f"Permission denied for {request.exec_name} on account "
                        f"{request.account_id}"
                    )
                    raise PermissionDeniedError(request.account_id, request.exec_name)

            estimate = self._estimate(session, TradeImpactRequest(
                account_id=request.account_id,
                customer_id=account.customer_id,
                customer_tier=account.customer_tier,
                trade_type_id=request.trade_type_id,
                trade_qty=request.trade_qty,
                tax_status=account.tax_status,
                is_lifo=request.is_lifo,
                is_margin=request.is_margin,
                symbol=request.symbol,
                company_name=request.company_name,
                issue=request.issue,
                requested_price=request.requested_price,
                pending_status_id=self._config.status.pending_id,
                submitted_status_id=self._config.status.submitted_id,
            ))

            comm_amount = commission_amount(
                estimate.commission_rate, request.trade_qty, estimate.requested_price
            )

            plan = build_commit_plan(
                is_market=estimate.is_market,
                account_id=request.account_id,
                trade_type_id=request.trade_type_id,
                symbol=estimate.symbol,
                trade_qty=request.trade_qty,
                requested_price=estimate.requested_price,
                status_id=estimate.status_id,
                exec_name=request.exec_name,
                is_cash=not request.is_margin,
                is_lifo=request.is_lifo,
                charge=estimate.charge_amount,
                commission=comm_amount,
                tax=estimate.tax_amount,
            )
            trade_id = self._writer.write(session, plan)

            if request.roll_it_back:
                session.rollback()
                logger.info(f"Trade {trade_id} rolled back on request")
            else:
                logger.info(
                    f"Trade {trade_id} placed: {request.trade_type_id} {request.trade_qty} "
                    f"{estimate.symbol} @ {estimate.requested_price} for account "
                    f"{request.account_id}, status {estimate.status_id}"
                )

        return TradeOrderResult(
            trade_id=trade_id,
            account=account,
            estimate=estimate,
            commission_amount=comm_amount,
            rolled_back=request.roll_it_back,
        )

    @staticmethod
    def _is_owner(account: AccountProfile, request: TradeOrderRequest) -> bool:
        return (
            request.exec_first_name == account.customer_first_name
            and request.exec_last_name == account.customer_last_name
            and request.exec_tax_id == account.customer_tax_id
        )
