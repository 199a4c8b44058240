from typing import Hashable, Iterator, List


class DeletionLedger:
    """
    Ids of persisted variations removed during one edit session.

    The backend has no notion of diffing the variation list, so every removal
    has to be sent as an explicit delete instruction on save. The ledger only
    grows; a regenerated combination gets a new variation, never a ledgered id.
    """

    def __init__(self):
        # dict keeps first-recorded order
        self._ids = {}

    def record_deleted(self, variation_id: Hashable) -> bool:
        """
        Add an id. Recording the same id twice is a no-op.

        Returns:
            True if the id was not recorded before
        """
        if variation_id is None:
            raise ValueError("Only persisted variations can be ledgered")
        if variation_id in self._ids:
            return False
        self._ids[variation_id] = True
        return True

    def snapshot(self) -> List[Hashable]:
        """Every recorded id, for serialization. Does not clear the ledger."""
        return list(self._ids)

    def reset(self) -> None:
        self._ids.clear()

    def __contains__(self, variation_id: Hashable) -> bool:
        return variation_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._ids))
