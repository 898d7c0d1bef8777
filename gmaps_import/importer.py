"""Runs every record through the save flow, one at a time."""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .errors import SessionLostError
from .sequencer import SaveOutcome, SaveSequencer

LOGGER = logging.getLogger('gmaps_import')


@dataclass
class ImportSummary:
    outcomes: List[SaveOutcome] = field(default_factory=list)
    aborted: bool = False

    @property
    def succeeded(self) -> List[SaveOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[SaveOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def memo_conflicts(self) -> List[SaveOutcome]:
        return [o for o in self.outcomes if o.memo_conflict]


class PlaceImporter:
    def __init__(self, sequencer: SaveSequencer):
        self.sequencer = sequencer

    def run(self, records: Iterable) -> ImportSummary:
        """Save ``records`` in order.

        A failed record is logged and the next one is attempted. A lost
        browser session marks the summary aborted and re-raises, since every
        remaining record would fail the same way.
        """
        summary = ImportSummary()
        for record in records:
            try:
                outcome = self.sequencer.save(record)
            except SessionLostError as e:
                summary.aborted = True
                LOGGER.error('Browser session lost while saving place. %s. Error: %s', record.describe(), e)
                raise
            summary.outcomes.append(outcome)
            if not outcome.succeeded:
                LOGGER.error('Failed to save place. %s. Error [%s]: %s',
                             record.describe(), outcome.error_code, outcome.failure_reason)
        LOGGER.info('Import finished: %d saved, %d failed, %d memo(s) need manual follow-up',
                    len(summary.succeeded), len(summary.failed), len(summary.memo_conflicts))
        return summary
