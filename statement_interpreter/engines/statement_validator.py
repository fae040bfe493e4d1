"""Input sufficiency checks and the data-quality record."""

import logging
from datetime import datetime, timezone
from typing import Optional

from statement_interpreter.engines.trend_analyzer import RELIABLE_CAGR_PERIODS
from statement_interpreter.errors import InsufficientDataError
from statement_interpreter.schemas.report import DataQuality, HistoricalDepth
from statement_interpreter.schemas.statements import FinancialStatements

logger = logging.getLogger(__name__)


class StatementValidator:
    """Reject statement sets too thin to analyse; describe the rest.

    Args:
        min_annual_periods: Fewer annual income statements than this is fatal.
        preferred_annual_periods: Below this a warning is attached to the
            data-quality record but analysis proceeds.
    """

    def __init__(
        self,
        min_annual_periods: int = 2,
        preferred_annual_periods: int = RELIABLE_CAGR_PERIODS,
    ):
        self.min_annual_periods = min_annual_periods
        self.preferred_annual_periods = preferred_annual_periods

    def validate(
        self,
        statements: FinancialStatements,
        as_of: Optional[datetime] = None,
    ) -> DataQuality:
        """Return the data-quality record or raise :class:`InsufficientDataError`."""
        missing = [
            name
            for name, collection in (
                ("incomeStatements", statements.income_statements),
                ("balanceSheets", statements.balance_sheets),
                ("cashFlowStatements", statements.cash_flow_statements),
            )
            if not collection.annual
        ]
        if missing:
            logger.error("%s: missing annual statements: %s", statements.symbol, ", ".join(missing))
            raise InsufficientDataError(
                f"Missing required annual statements: {', '.join(missing)}", missing=missing
            )

        annual = statements.income_statements.annual
        if len(annual) < self.min_annual_periods:
            logger.error(
                "%s: %d annual period(s), need at least %d",
                statements.symbol, len(annual), self.min_annual_periods,
            )
            raise InsufficientDataError(
                f"Insufficient historical data: {len(annual)} annual period(s), "
                f"need at least {self.min_annual_periods}"
            )

        warnings: list[str] = []
        if len(annual) < self.preferred_annual_periods:
            warning = (
                f"Limited historical data ({len(annual)} years) - ideally need "
                f"{self.preferred_annual_periods}+ years for reliable trends"
            )
            logger.warning("%s: %s", statements.symbol, warning)
            warnings.append(warning)

        data_points = sum(
            period.populated_fields()
            for collection in (
                statements.income_statements,
                statements.balance_sheets,
                statements.cash_flow_statements,
            )
            for period in collection.annual
        )

        as_of = as_of or datetime.now(timezone.utc)
        latest = annual[0]
        return DataQuality(
            last_updated=statements.updated_at or as_of.isoformat(),
            fiscal_year_end=latest.date or (str(latest.fiscal_year) if latest.fiscal_year else ""),
            data_points=data_points,
            historical_depth=HistoricalDepth(
                annual=len(annual),
                quarterly=len(statements.income_statements.quarterly),
            ),
            warnings=warnings,
        )
