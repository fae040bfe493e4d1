"""Interpreter facade — single entry point for all external interfaces.

The CLI (``scripts/run_analysis.py``) and the FastAPI routes use this
instead of wiring engines directly. If the internal pipeline changes only
the container and this file need updating.

Usage::

    facade = InterpreterFacade()            # uses Settings() from .env
    report = facade.analyze(statements)
    payload = facade.analyze_to_dict(raw_json_dict)
    quick = facade.quick_analysis(statements)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dependency_injector import providers

from statement_interpreter.config import Settings
from statement_interpreter.container import AppContainer
from statement_interpreter.schemas.report import (
    AnalysisOptions,
    FinancialInterpretationReport,
    QuickAnalysis,
)
from statement_interpreter.schemas.statements import FinancialStatements

logger = logging.getLogger(__name__)

StatementsInput = Union[FinancialStatements, Dict[str, Any]]


class InterpreterFacade:
    """High-level API for the statement interpreter.

    Accepts either validated ``FinancialStatements`` or their camelCase JSON
    form. Returns pydantic schemas or plain dicts.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        container: Optional[AppContainer] = None,
    ):
        if container is None:
            container = AppContainer()
            container.settings.override(providers.Object(settings or Settings()))
        self._container = container

    @property
    def settings(self) -> Settings:
        return self._container.settings()

    # ══════════════════════════════════════════════════════════════════
    # ANALYSIS
    # ══════════════════════════════════════════════════════════════════

    def analyze(
        self,
        statements: StatementsInput,
        options: Optional[AnalysisOptions] = None,
    ) -> FinancialInterpretationReport:
        """Full interpretation report for one company."""
        return self._container.interpreter().analyze(self._coerce(statements), options)

    def analyze_to_dict(
        self,
        statements: StatementsInput,
        options: Optional[AnalysisOptions] = None,
    ) -> Dict[str, Any]:
        """Full report as camelCase JSON-compatible dict."""
        return self.analyze(statements, options).model_dump(mode="json", by_alias=True)

    def quick_analysis(
        self,
        statements: StatementsInput,
        options: Optional[AnalysisOptions] = None,
    ) -> QuickAnalysis:
        """Grade, top concern and top strength only."""
        return self._container.interpreter().quick_analysis(self._coerce(statements), options)

    # ── input helpers ─────────────────────────────────────────────────

    @staticmethod
    def load_statements(path: Union[str, Path]) -> FinancialStatements:
        """Read a camelCase statements document from disk."""
        path = Path(path)
        logger.info("Loading statements from %s", path)
        return FinancialStatements.model_validate(json.loads(path.read_text()))

    @staticmethod
    def _coerce(statements: StatementsInput) -> FinancialStatements:
        if isinstance(statements, FinancialStatements):
            return statements
        return FinancialStatements.model_validate(statements)
