"""Ordered post-mutation side effects.

A mutation builds a list of effects and runs them after its primary write.
Effects execute strictly in list order. A ``required`` effect that fails
propagates its exception and the remaining effects do not run; a best-effort
effect that fails is logged and the run continues.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Effect:
    name: str
    run: Callable[[], Awaitable[Any]]
    best_effort: bool = False


@dataclass
class EffectReport:
    completed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def run_effects(effects: list[Effect]) -> EffectReport:
    """Run ``effects`` in order and report which best-effort ones failed."""
    report = EffectReport()
    for effect in effects:
        try:
            await effect.run()
        except Exception as e:
            if not effect.best_effort:
                logger.error(f"❌ Required effect '{effect.name}' failed: {str(e)}")
                raise
            logger.warning(f"⚠️ Best-effort effect '{effect.name}' failed (continuing): {str(e)}")
            report.failed.append(effect.name)
        else:
            report.completed.append(effect.name)
    return report


def required(name: str, run: Callable[[], Awaitable[Any]]) -> Effect:
    return Effect(name=name, run=run, best_effort=False)


def best_effort(name: str, run: Callable[[], Awaitable[Any]]) -> Effect:
    return Effect(name=name, run=run, best_effort=True)
