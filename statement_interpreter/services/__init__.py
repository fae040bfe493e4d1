"""Service-layer orchestration modules."""

from statement_interpreter.services.interpretation_service import FinancialInterpreter

__all__ = [
    "FinancialInterpreter",
]
