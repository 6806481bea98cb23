"""
Policy response — support-dependent mitigation of shock events.

The template with the highest minSupport ≤ internationalSupport is applied to
every shock before the projection starts:

    Гуманітарний прорив   (≥ 0.7)  severity × 0.82, recovery × 0.8
    Стабілізаційна місія  (≥ 0.4)  severity × 0.92, recovery × 0.9
    Обмежена реакція      (≥ 0.0)  severity × 1.05, recovery × 1.1

Low support amplifies shocks. Adjusted recovery is rounded and never drops
below one year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..core.numeric import round_half_up
from ..core.results import PolicyImpactSummary
from ..core.types import ShockEvent

logger = logging.getLogger("population_engine.systems.policy")


@dataclass(frozen=True)
class PolicyTemplate:
    label: str
    min_support: float
    severity_multiplier: float
    recovery_multiplier: float

    def summary(self) -> PolicyImpactSummary:
        return PolicyImpactSummary(
            label=self.label,
            severity_modifier=self.severity_multiplier,
            recovery_modifier=self.recovery_multiplier,
        )


# Highest support first.
POLICY_TEMPLATES: Tuple[PolicyTemplate, ...] = (
    PolicyTemplate("Гуманітарний прорив", 0.7, 0.82, 0.8),
    PolicyTemplate("Стабілізаційна місія", 0.4, 0.92, 0.9),
    PolicyTemplate("Обмежена реакція", 0.0, 1.05, 1.1),
)


def select_policy_template(
    support_level: float,
    templates: Sequence[PolicyTemplate] = POLICY_TEMPLATES,
) -> PolicyTemplate:
    """Template with the highest min_support not exceeding support_level."""
    eligible = [t for t in templates if support_level >= t.min_support]
    if not eligible:
        return min(templates, key=lambda t: t.min_support)
    return max(eligible, key=lambda t: t.min_support)


def apply_policy_responses(
    shocks: Sequence[ShockEvent],
    support_level: float,
    templates: Sequence[PolicyTemplate] = POLICY_TEMPLATES,
) -> Tuple[Tuple[ShockEvent, ...], Tuple[PolicyImpactSummary, ...]]:
    """Return (effective_shocks, applied_policies).

    The input shocks are never modified; new ShockEvent objects are built.
    No shocks means no policy is recorded.
    """
    if not shocks:
        return (), ()

    template = select_policy_template(support_level, templates)
    logger.debug(
        "Policy template %r selected for support %.2f (%d shocks)",
        template.label, support_level, len(shocks),
    )
    adjusted = tuple(
        shock.copy_with(
            severity=shock.severity * template.severity_multiplier,
            recovery_years=max(
                1, int(round_half_up(shock.recovery_years * template.recovery_multiplier))
            ),
        )
        for shock in shocks
    )
    return adjusted, (template.summary(),)
