"""Manual override store for Tour days."""

import logging
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from datetime import date

from ..schemas.inventory import DEFAULT_OVERRIDE, ManualOverride, OverridePatch

logger = logging.getLogger(__name__)


class ManualOverrideStore(Mapping[int, ManualOverride]):
    """
    Local mirror of Tour overrides, keyed by day of month.

    The mapping interface is read-only and never creates rows, so it can be
    handed to the availability resolver. ``read`` creates the default row
    lazily; rows are only ever overwritten, never deleted.
    """

    def __init__(
        self,
        overrides: Mapping[int, ManualOverride] | None = None,
        default: ManualOverride = DEFAULT_OVERRIDE,
    ):
        self.default = default
        self._rows: dict[int, ManualOverride] = dict(overrides or {})
        self._in_flight: Counter[int] = Counter()

    @staticmethod
    def key_for(day: date) -> int:
        """Mirror key of a calendar date."""
        return day.day

    def __getitem__(self, day_of_month: int) -> ManualOverride:
        return self._rows[day_of_month]

    def __iter__(self) -> Iterator[int]:
        return iter(dict(self._rows))

    def __len__(self) -> int:
        return len(self._rows)

    def peek(self, day: date) -> ManualOverride:
        """Effective override for ``day`` without creating a row."""
        return self._rows.get(self.key_for(day), self.default)

    def read(self, day: date) -> ManualOverride:
        """Effective override for ``day``, creating the default row if absent."""
        key = self.key_for(day)
        if key not in self._rows:
            self._rows[key] = self.default
        return self._rows[key]

    def write(self, day: date, override: ManualOverride) -> None:
        """Overwrite the row for ``day``."""
        self._rows[self.key_for(day)] = override

    def increment_booked(self, day: date, by: int = 1) -> ManualOverride:
        """Raise the stored booked counter for ``day``."""
        updated = self.read(day).incremented(by)
        self.write(day, updated)
        return updated

    def apply_patch(self, day: date, patch: OverridePatch) -> ManualOverride:
        """Apply an administrative patch; only blocking touches the booked counter."""
        updated = patch.apply_to(self.read(day))
        self.write(day, updated)
        return updated

    def hold(self, day: date) -> None:
        """Mark ``day`` as carrying a local change whose durable write is pending."""
        self._in_flight[self.key_for(day)] += 1

    def release(self, day: date) -> None:
        """Drop one pending-change mark from ``day``."""
        key = self.key_for(day)
        self._in_flight[key] -= 1
        if self._in_flight[key] <= 0:
            del self._in_flight[key]

    def in_flight(self) -> frozenset[int]:
        """Day keys with local changes not yet confirmed durably."""
        return frozenset(self._in_flight)

    def reset(self, overrides: Mapping[date, ManualOverride], keep: Iterable[int] = ()) -> None:
        """
        Replace all rows with a fresh read of the durable store.

        Rows of days still in flight, or listed in ``keep``, stay as they are
        locally: the durable read may predate their write.
        """
        rows = {self.key_for(day): override for day, override in overrides.items()}
        kept = 0
        for key in self.in_flight().union(keep):
            if key in self._rows:
                rows[key] = self._rows[key]
                kept += 1
        self._rows = rows
        logger.debug("Override mirror reset", extra={"rows": len(self._rows), "kept": kept})
