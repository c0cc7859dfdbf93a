"""Onboarding checklist definitions.

The catalogue is fixed in code; progress rows reference steps by id.
"""

from __future__ import annotations

from dataclasses import dataclass

from portal.db.enums import StepCategory


@dataclass(frozen=True)
class OnboardingStep:
    id: str
    title: str
    description: str
    icon: str
    category: StepCategory


ONBOARDING_STEPS: tuple[OnboardingStep, ...] = (
    OnboardingStep(
        id="account_setup",
        title="Account Setup",
        description="Initial account configuration completed",
        icon="check",
        category=StepCategory.SETUP,
    ),
    OnboardingStep(
        id="viewed_bookings_guide",
        title="Bookings Training",
        description="Completed table booking system guide",
        icon="calendar",
        category=StepCategory.TRAINING,
    ),
    OnboardingStep(
        id="viewed_loyalty_guide",
        title="Loyalty Training",
        description="Completed loyalty program setup guide",
        icon="star",
        category=StepCategory.TRAINING,
    ),
    OnboardingStep(
        id="viewed_marketing_guide",
        title="Marketing Training",
        description="Completed marketing automation guide",
        icon="mail",
        category=StepCategory.TRAINING,
    ),
    OnboardingStep(
        id="feature_configuration",
        title="Feature Configuration",
        description="Core features configured and tested",
        icon="settings",
        category=StepCategory.CONFIGURATION,
    ),
    OnboardingStep(
        id="go_live",
        title="Go Live",
        description="Platform launched and operational",
        icon="rocket",
        category=StepCategory.LAUNCH,
    ),
)

STEP_IDS: frozenset[str] = frozenset(step.id for step in ONBOARDING_STEPS)


def completion_percentage(completed: int, total: int = len(ONBOARDING_STEPS)) -> int:
    """
    round(100 * completed / total), with halves rounding up.

    Python's round() is banker's rounding, so use floor(x + 0.5).
    """
    if total <= 0:
        return 0
    return int(100 * completed / total + 0.5)
