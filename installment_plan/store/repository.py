"""Loan repository over a key-value store.

Persistence is best effort: store failures are logged and reported as
``False``/``None`` so the in-memory snapshot stays the source of truth for
the session.
"""

import json
import logging

from installment_plan.constants import (
    STORAGE_KEY_LOAN_INDEX,
    STORAGE_KEY_PREFIX,
    STORAGE_KEY_SELECTED_LOAN,
)
from installment_plan.exceptions import EntityNotFoundError, SerializationError, StorageError
from installment_plan.models.plan import Loan
from installment_plan.store.base import KeyValueStore
from installment_plan.store.serialization import dumps, loads

logger = logging.getLogger(__name__)


class LoanRepository:
    """Load, save and delete whole loan records.

    Each loan is stored under its own key; an index key lists the known
    loan ids and a separate key remembers the selected loan.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @staticmethod
    def loan_key(loan_id: str) -> str:
        return f"{STORAGE_KEY_PREFIX}:loan:{loan_id}"

    # --- Loans ---

    def load(self, loan_id: str) -> Loan | None:
        try:
            raw = self.store.get(self.loan_key(loan_id))
            if raw is None:
                return None
            return loads(raw)
        except StorageError:
            logger.exception("Failed to load loan %s", loan_id)
            return None

    def require(self, loan_id: str) -> Loan:
        """Like :meth:`load`, but a missing or unreadable loan raises.

        Raises
        ------
        EntityNotFoundError
            If no loan can be loaded for ``loan_id``.
        """
        loan = self.load(loan_id)
        if loan is None:
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        return loan

    def save(self, loan: Loan) -> bool:
        """Write the whole loan record and register it in the index."""
        try:
            self.store.set(self.loan_key(loan.loan_id), dumps(loan))
            ids = self._read_index()
            if loan.loan_id not in ids:
                ids.append(loan.loan_id)
                self._write_index(ids)
        except StorageError:
            logger.exception("Failed to save loan %s", loan.loan_id)
            return False
        logger.debug("Saved loan %s with %d installments", loan.loan_id, len(loan.installments))
        return True

    def delete(self, loan_id: str) -> bool:
        """Remove a loan; returns ``False`` if it was not stored or removal failed."""
        try:
            existed = self.store.remove(self.loan_key(loan_id))
            ids = self._read_index()
            if loan_id in ids:
                ids.remove(loan_id)
                self._write_index(ids)
            if self.load_selected() == loan_id:
                self.store.remove(STORAGE_KEY_SELECTED_LOAN)
        except StorageError:
            logger.exception("Failed to delete loan %s", loan_id)
            return False
        return existed

    def list_ids(self) -> list[str]:
        try:
            return self._read_index()
        except StorageError:
            logger.exception("Failed to read loan index")
            return []

    def load_all(self) -> list[Loan]:
        """All stored loans in index order; unreadable records are skipped."""
        loans = []
        for loan_id in self.list_ids():
            loan = self.load(loan_id)
            if loan is not None:
                loans.append(loan)
        return loans

    # --- Selection ---

    def save_selected(self, loan_id: str) -> bool:
        try:
            self.store.set(STORAGE_KEY_SELECTED_LOAN, loan_id.encode("utf-8"))
        except StorageError:
            logger.exception("Failed to save selected loan %s", loan_id)
            return False
        return True

    def load_selected(self) -> str | None:
        try:
            raw = self.store.get(STORAGE_KEY_SELECTED_LOAN)
        except StorageError:
            logger.exception("Failed to load selected loan")
            return None
        return raw.decode("utf-8") if raw else None

    def clear(self) -> bool:
        """Remove every loan, the index and the selection."""
        try:
            for loan_id in self._read_index():
                self.store.remove(self.loan_key(loan_id))
            self.store.remove(STORAGE_KEY_LOAN_INDEX)
            self.store.remove(STORAGE_KEY_SELECTED_LOAN)
        except StorageError:
            logger.exception("Failed to clear storage")
            return False
        return True

    # --- Index ---

    def _read_index(self) -> list[str]:
        raw = self.store.get(STORAGE_KEY_LOAN_INDEX)
        if not raw:
            return []
        try:
            ids = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SerializationError(f"Loan index is not valid JSON: {e}") from e
        return [str(loan_id) for loan_id in ids]

    def _write_index(self, ids: list[str]) -> None:
        self.store.set(STORAGE_KEY_LOAN_INDEX, json.dumps(ids).encode("utf-8"))
