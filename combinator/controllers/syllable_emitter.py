from __future__ import annotations

import concurrent.futures as cf
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from combinator.domain.bitmap import pack
from combinator.domain.enums import JamoSlot
from combinator.domain.hangul import NUM_INI, SyllableIndex, iter_row
from combinator.domain.records import SyllableRecord
from combinator.services.sinks import OutputSinks, RecordSink
from combinator.services.workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmitSummary:
    total: int = 0
    complete: int = 0

    @property
    def partial(self) -> int:
        return self.total - self.complete


class SyllableEmitter:
    """Composes every syllable of a workspace and routes it to sinks.

    Typical flow:
        emitter = SyllableEmitter(workspace)
        summary = emitter.emit(sinks)

    Each syllable is computed independently from read-only rules and sheets.
    Rows sharing an initial are handed to a thread pool; results come back in
    canonical (ini, mid, fin) order, so only the calling thread touches sinks.
    """

    def __init__(self, workspace: Workspace, *, workers: Optional[int] = None) -> None:
        self._workspace = workspace
        self._config = workspace.config
        self._workers = max(1, int(workers if workers is not None else self._config.workers))

    # ---------------------------
    # Per-syllable work
    # ---------------------------

    def _plane(self, slot: JamoSlot, syllable: SyllableIndex, variant: Optional[int]) -> Optional[bytes]:
        if variant is None:
            return None
        sheet = self._workspace.source(slot, syllable.index_for(slot)).sheet
        if sheet is None:
            return None
        return sheet.cell_bits(variant, self._config.size, self._config.ink)

    def build_record(self, syllable: SyllableIndex) -> SyllableRecord:
        variants = {slot: self._workspace.find_variant(slot, syllable) for slot in JamoSlot}

        if self._config.warn_no_match:
            self._warn_unresolved(syllable, variants)

        bitmap = pack(*(self._plane(slot, syllable, variants[slot]) for slot in JamoSlot))
        return SyllableRecord(
            syllable=syllable,
            bitmap=bitmap,
            ini_variant=variants[JamoSlot.INI],
            mid_variant=variants[JamoSlot.MID],
            fin_variant=variants[JamoSlot.FIN],
        )

    def _warn_unresolved(self, syllable: SyllableIndex, variants: dict[JamoSlot, Optional[int]]) -> None:
        for slot in JamoSlot:
            if variants[slot] is not None:
                continue
            if slot is JamoSlot.FIN and syllable.fin == 0:
                continue
            logger.warning("couldn't find %s variant for %s", slot.value, syllable.label)

    def build_row(self, ini: int) -> list[SyllableRecord]:
        return [self.build_record(s) for s in iter_row(ini)]

    # ---------------------------
    # Full pass
    # ---------------------------

    def iter_records(self) -> Iterator[SyllableRecord]:
        """Yield every syllable record in canonical order."""
        if self._workers == 1:
            for ini in range(NUM_INI):
                yield from self.build_row(ini)
            return

        with cf.ThreadPoolExecutor(max_workers=self._workers) as ex:
            for row in ex.map(self.build_row, range(NUM_INI)):
                yield from row

    def emit(
        self,
        sinks: OutputSinks | None = None,
        *,
        all_sinks: Iterable[RecordSink] = (),
        complete_sinks: Iterable[RecordSink] = (),
    ) -> EmitSummary:
        """Write every record to the "all" sinks and complete ones to the "complete" sinks."""
        to_all = list(all_sinks) + (sinks.all if sinks is not None else [])
        to_complete = list(complete_sinks) + (sinks.complete if sinks is not None else [])

        total = complete = 0
        for record in self.iter_records():
            for sink in to_all:
                sink.write(record)
            if record.complete:
                complete += 1
                for sink in to_complete:
                    sink.write(record)
            total += 1

        summary = EmitSummary(total=total, complete=complete)
        logger.info("Emitted %d syllables (%d complete, %d partial)", summary.total, summary.complete, summary.partial)
        return summary
