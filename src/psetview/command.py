from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from enum import Enum

from .collector import ExtendedDataCollector
from .config import DEFAULT_CONFIG, ScanConfig
from .errors import EntityNotFoundError
from .host import EntitySelector, PropertySetSource, ReportPresenter, StatusChannel, TransactionScope
from .report import ScanResult

log = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Entity selection was cancelled."
FAILED_GUIDANCE = "Failed to extract extended data."


class ScanState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    SCANNING = "scanning"
    REPORTING = "reporting"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanOutcome:
    state: ScanState
    result: ScanResult | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.state in {ScanState.DONE, ScanState.CANCELLED}


def run_scan(
    selector: EntitySelector,
    scope: TransactionScope,
    presenter: ReportPresenter,
    status: StatusChannel,
    *,
    property_sets: PropertySetSource | None = None,
    config: ScanConfig = DEFAULT_CONFIG,
    verbose: bool = False,
) -> ScanOutcome:
    """Select one entity, scan it inside a read scope and show the report.

    Per-field and per-pass problems stay inside the report. Anything else
    (selection, scope acquisition, a vanished entity) ends in ``FAILED`` with a
    message on the status channel instead of propagating to the caller.
    """
    state = ScanState.IDLE
    try:
        state = ScanState.SELECTING
        entity_id = selector.prompt_for_entity()
        if entity_id is None:
            status.write_message(CANCELLED_MESSAGE)
            return ScanOutcome(ScanState.CANCELLED, message=CANCELLED_MESSAGE)

        state = ScanState.SCANNING
        collector = ExtendedDataCollector(config, property_sets)
        with scope.open() as token:
            entity = token.get_entity(entity_id)
            if entity is None:
                raise EntityNotFoundError(entity_id)
            result = collector.collect(entity)
            token.commit()

        state = ScanState.REPORTING
        presenter.show(result.lines())
        presenter.close()
    except Exception as exc:
        log.debug("scan failed while %s", state.value, exc_info=True)
        message = str(exc) or type(exc).__name__
        status.write_message(f"error: {message}")
        status.write_message(FAILED_GUIDANCE)
        if verbose:
            status.write_message(traceback.format_exc().rstrip())
        return ScanOutcome(ScanState.FAILED, message=message)

    return ScanOutcome(ScanState.DONE, result=result)
