"""Classification store domain service."""

import logging
from typing import Iterable, Optional

from euer.database.base import Database
from euer.domain.entities import (
    Classification,
    ClassificationSnapshot,
    SourceType,
    VatMode,
)
from euer.domain.errors import ValidationError, invalid_choice

logger = logging.getLogger(__name__)


def _coerce_source_type(value: SourceType | str) -> SourceType:
    try:
        return SourceType(value)
    except ValueError:
        raise ValidationError(
            invalid_choice("source type", value, [s.value for s in SourceType])
        ) from None


def _normalize_source_id(value: str) -> str:
    return str(value).strip()


def _coerce_vat_mode(value: VatMode | str) -> VatMode:
    try:
        return VatMode(value)
    except ValueError:
        raise ValidationError(
            invalid_choice("VAT mode", value, [m.value for m in VatMode])
        ) from None


class ClassificationService:
    """Service for persisting user-confirmed classifications."""

    def __init__(self, db: Database):
        """Initialize classification service.

        Args:
            db: Database instance
        """
        self.db = db

    def upsert(
        self,
        source_type: SourceType | str,
        source_id: str,
        tax_year: int,
        eur_line_id: Optional[str] = None,
        excluded: bool = False,
        vat_mode: VatMode | str = VatMode.NONE,
        note: Optional[str] = None,
    ) -> Classification:
        """Create or replace the classification of one event.

        At most one classification exists per (source type, source ID, tax
        year); an existing row is updated in place and keeps its ID. An
        excluded event never keeps a line.

        Args:
            source_type: "transaction" or "invoice"
            source_id: ID of the event within its source
            tax_year: Tax year of the classification
            eur_line_id: Target line ID, or None
            excluded: True if the event is not part of the EÜR
            vat_mode: "none" or "default"
            note: Optional free-text note

        Returns:
            The stored classification as read back from the database

        Raises:
            ValidationError: If source type, source ID or VAT mode is invalid
        """
        source = _coerce_source_type(source_type)
        mode = _coerce_vat_mode(vat_mode)
        source_id = _normalize_source_id(source_id)
        if not source_id:
            raise ValidationError("Source ID must not be empty")

        line_id = None if excluded else (eur_line_id or None)
        return self.db.save_classification(
            source_type=source,
            source_id=source_id,
            tax_year=tax_year,
            eur_line_id=line_id,
            excluded=bool(excluded),
            vat_mode=mode,
            note=note or None,
        )

    def upsert_many(
        self,
        source_type: SourceType | str,
        source_ids: Iterable[str],
        tax_year: int,
        eur_line_id: Optional[str] = None,
        excluded: bool = False,
        vat_mode: VatMode | str = VatMode.NONE,
        note: Optional[str] = None,
    ) -> list[Classification]:
        """Apply the same classification to several events.

        Duplicate source IDs are applied once, in first-seen order.
        """
        results = []
        for source_id in dict.fromkeys(_normalize_source_id(s) for s in source_ids):
            results.append(
                self.upsert(
                    source_type=source_type,
                    source_id=source_id,
                    tax_year=tax_year,
                    eur_line_id=eur_line_id,
                    excluded=excluded,
                    vat_mode=vat_mode,
                    note=note,
                )
            )
        logger.debug("Bulk classified %d %s events for %s", len(results), source_type, tax_year)
        return results

    def get_by_key(
        self, source_type: SourceType | str, source_id: str, tax_year: int
    ) -> Optional[Classification]:
        """Get the classification of one event, or None."""
        return self.db.get_classification(
            _coerce_source_type(source_type), _normalize_source_id(source_id), tax_year
        )

    def list_for_year(self, tax_year: int) -> list[Classification]:
        """List all classifications of a tax year."""
        return self.db.list_classifications(tax_year)

    def list_for_year_as_map(self, tax_year: int) -> dict[str, Classification]:
        """List classifications keyed by ``"{source_type}:{source_id}"``."""
        return {item.key: item for item in self.list_for_year(tax_year)}

    def snapshot(
        self, source_type: SourceType | str, source_ids: Iterable[str], tax_year: int
    ) -> list[ClassificationSnapshot]:
        """Capture the current state of several keys before changing them."""
        source = _coerce_source_type(source_type)
        return [
            ClassificationSnapshot(
                source_type=source,
                source_id=source_id,
                tax_year=tax_year,
                classification=self.db.get_classification(source, source_id, tax_year),
            )
            for source_id in dict.fromkeys(_normalize_source_id(s) for s in source_ids)
        ]

    def restore(self, snapshots: Iterable[ClassificationSnapshot]) -> list[Classification]:
        """Undo changes by writing snapshots back.

        Rows are never deleted, so a key that had no classification is
        restored as an empty, not excluded row.
        """
        restored = []
        for snap in snapshots:
            prior = snap.classification
            restored.append(
                self.upsert(
                    source_type=snap.source_type,
                    source_id=snap.source_id,
                    tax_year=snap.tax_year,
                    eur_line_id=prior.eur_line_id if prior else None,
                    excluded=prior.excluded if prior else False,
                    vat_mode=prior.vat_mode if prior else VatMode.NONE,
                    note=prior.note if prior else None,
                )
            )
        return restored
