"""Translate landing-provider payloads into domain landings."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from catchwatch.domain.model import Landing, LandingItem, LandingSource

from .schema import CatchActivityPayload, ELogPayload, LandingDeclarationPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from catchwatch.domain.ports import RawPayload

    from .schema import CatchItemPayload

log = getLogger(__name__)

type LiveWeightFactor = Callable[[str, str | None, str | None], float]

# eLog weights are reported as live weight already
ELOG_FACTOR = 1.0


def _items(
    catches: Iterable[CatchItemPayload], factor_for: LiveWeightFactor | None
) -> tuple[LandingItem, ...]:
    return tuple(
        LandingItem(
            species=item.species,
            weight=item.weight,
            factor=(
                factor_for(item.species, item.state, item.presentation)
                if factor_for
                else ELOG_FACTOR
            ),
            state=item.state,
            presentation=item.presentation,
        )
        for item in catches
    )


class ProviderTranslator:
    """Map each payload family to landings, applying live-weight factors."""

    def __init__(self, factor_for: LiveWeightFactor) -> None:
        self.factor_for = factor_for

    def declaration_to_landings(self, payload: RawPayload) -> list[Landing]:
        declaration = LandingDeclarationPayload.model_validate(payload)
        return [
            Landing(
                rss_number=declaration.rss_number,
                date_time_landed=declaration.date_time_landed,
                source=LandingSource.LANDING_DECLARATION,
                items=_items(declaration.items, self.factor_for),
            )
        ]

    def elog_to_landings(self, payload: RawPayload) -> list[Landing]:
        elog = ELogPayload.model_validate(payload)
        return [
            Landing(
                rss_number=elog.rss_number,
                date_time_landed=activity.date_time_landed,
                source=LandingSource.ELOG,
                items=_items(activity.catches, None),
            )
            for activity in elog.activities
        ]

    def catch_activity_to_landings(self, payload: RawPayload, rss_number: str) -> list[Landing]:
        recording = CatchActivityPayload.model_validate(payload)
        landings = [
            Landing(
                rss_number=rss_number,
                date_time_landed=activity.date_time_landed,
                source=LandingSource.CATCH_RECORDING,
                items=_items(activity.catches, self.factor_for),
            )
            for activity in recording.activities
        ]
        log.debug("Translated %d catch recordings for %s", len(landings), rss_number)
        return landings
