"""Base classes for flag rules.

A rule is a small stateless object that inspects a
:class:`~statement_interpreter.engines.context.StatementContext` and returns
a flag or ``None``. ``None`` covers both "condition not met" and "inputs
missing"; rules never raise on absent data.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional

from statement_interpreter.engines.context import StatementContext
from statement_interpreter.schemas.flags import (
    GreenFlag,
    GreenFlagCategory,
    GreenFlagId,
    RedFlag,
    RedFlagCategory,
    RedFlagId,
    Severity,
    Strength,
)


class RedFlagRule(ABC):
    flag_id: ClassVar[RedFlagId]
    severity: ClassVar[Severity]
    category: ClassVar[RedFlagCategory]
    title: ClassVar[str]
    formula: ClassVar[str]
    data_used: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def evaluate(self, ctx: StatementContext) -> Optional[RedFlag]:
        ...

    def flag(
        self,
        *,
        technical: str,
        beginner: str,
        value: Optional[float],
        threshold: Optional[float],
        recommendation: str,
    ) -> RedFlag:
        return RedFlag(
            id=self.flag_id,
            severity=self.severity,
            category=self.category,
            title=self.title,
            technical_description=technical,
            beginner_explanation=beginner,
            formula=self.formula,
            value=value,
            threshold=threshold,
            recommendation=recommendation,
        )


class GreenFlagRule(ABC):
    flag_id: ClassVar[GreenFlagId]
    strength: ClassVar[Strength]
    category: ClassVar[GreenFlagCategory]
    title: ClassVar[str]
    formula: ClassVar[str]
    data_used: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def evaluate(self, ctx: StatementContext) -> Optional[GreenFlag]:
        ...

    def flag(
        self,
        *,
        technical: str,
        beginner: str,
        value: Optional[float],
        benchmark: Optional[float],
        insight: str,
        strength: Optional[Strength] = None,
    ) -> GreenFlag:
        return GreenFlag(
            id=self.flag_id,
            strength=strength or self.strength,
            category=self.category,
            title=self.title,
            technical_description=technical,
            beginner_explanation=beginner,
            formula=self.formula,
            value=value,
            benchmark=benchmark,
            insight=insight,
        )
