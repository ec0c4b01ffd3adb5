from __future__ import annotations

import uuid


class ResolutionError(RuntimeError):
    pass


class BatchNotFoundError(ResolutionError):
    def __init__(self, batch_id: uuid.UUID) -> None:
        super().__init__(f"No staging provider assignments found for batch {batch_id}.")
        self.batch_id = batch_id


class BatchFacilityMismatchError(ResolutionError):
    def __init__(self, batch_id: uuid.UUID, expected: int, found: list[int]) -> None:
        super().__init__(
            f"Batch {batch_id} contains rows for facilities {found}; expected only {expected}."
        )
        self.batch_id = batch_id
        self.expected_facility_id = expected
        self.found_facility_ids = found


class ResolutionCancelled(ResolutionError):
    pass
