"""Analysis endpoints — hand a statements document to the interpreter.

Both endpoints accept ``FinancialStatements`` as camelCase JSON. Analysis
options travel as query parameters so the body stays a plain statements
document.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from statement_interpreter.dependencies import get_facade
from statement_interpreter.errors import AnalysisTimeoutError, InsufficientDataError
from statement_interpreter.facade import InterpreterFacade
from statement_interpreter.logging_config import get_logger
from statement_interpreter.schemas.report import AnalysisOptions
from statement_interpreter.schemas.statements import FinancialStatements

logger = get_logger(__name__)
router = APIRouter()


def _options(
    include_industry_context: bool = True,
    include_peer_analysis: bool = False,
    synthesize_ttm: bool = False,
) -> AnalysisOptions:
    return AnalysisOptions(
        include_industry_context=include_industry_context,
        include_peer_analysis=include_peer_analysis,
        synthesize_ttm=synthesize_ttm,
    )


def _insufficient(symbol: str, exc: InsufficientDataError) -> JSONResponse:
    logger.warning("analysis_rejected", symbol=symbol, reason=str(exc), missing=exc.missing)
    return JSONResponse(
        status_code=422,
        content={"error": "insufficient_data", "message": str(exc), "missing": exc.missing},
    )


def _timed_out(symbol: str, exc: AnalysisTimeoutError) -> JSONResponse:
    logger.error("analysis_timed_out", symbol=symbol, reason=str(exc))
    return JSONResponse(status_code=504, content={"error": "analysis_timeout", "message": str(exc)})


@router.post("")
def analyze_statements(
    statements: FinancialStatements,
    options: AnalysisOptions = Depends(_options),
    facade: InterpreterFacade = Depends(get_facade),
) -> Any:
    """Full interpretation report.

    Returns:
        The report as camelCase JSON, or 422 ``{"error": "insufficient_data"}``
        when the statements are too thin to analyse.
    """
    logger.info("analysis_requested", symbol=statements.symbol)
    try:
        return facade.analyze_to_dict(statements, options)
    except InsufficientDataError as exc:
        return _insufficient(statements.symbol, exc)
    except AnalysisTimeoutError as exc:
        return _timed_out(statements.symbol, exc)


@router.post("/quick")
def quick_analysis(
    statements: FinancialStatements,
    options: AnalysisOptions = Depends(_options),
    facade: InterpreterFacade = Depends(get_facade),
) -> Any:
    """Grade, top concern and top strength."""
    try:
        quick = facade.quick_analysis(statements, options)
    except InsufficientDataError as exc:
        return _insufficient(statements.symbol, exc)
    except AnalysisTimeoutError as exc:
        return _timed_out(statements.symbol, exc)
    return quick.model_dump(mode="json", by_alias=True)
