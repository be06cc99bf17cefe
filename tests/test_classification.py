"""Tests for the classification store."""

import pytest

from euer.domain.entities import ClassificationSnapshot, SourceType, VatMode
from euer.domain.errors import ValidationError


def test_upsert_creates_classification(classification_service):
    """Test creating a classification."""
    cls = classification_service.upsert(
        source_type="transaction",
        source_id="7",
        tax_year=2025,
        eur_line_id="E2025_KZ280",
        vat_mode="default",
        note="Hosting",
    )

    assert cls.id is not None
    assert cls.source_type == SourceType.TRANSACTION
    assert cls.source_id == "7"
    assert cls.eur_line_id == "E2025_KZ280"
    assert cls.excluded is False
    assert cls.vat_mode == VatMode.DEFAULT
    assert cls.note == "Hosting"
    assert cls.updated_at is not None
    assert cls.key == "transaction:7"


def test_upsert_updates_existing_row(classification_service):
    """Test that a second upsert replaces fields but keeps the ID."""
    first = classification_service.upsert("transaction", "7", 2025, eur_line_id="E2025_KZ280")
    second = classification_service.upsert("transaction", "7", 2025, eur_line_id="E2025_KZ228")

    assert second.id == first.id
    assert second.eur_line_id == "E2025_KZ228"
    assert len(classification_service.list_for_year(2025)) == 1


def test_upsert_is_idempotent(classification_service):
    """Test that repeating the same upsert keeps one row with the same values."""
    classification_service.upsert("invoice", "3", 2025, eur_line_id="E2025_KZ112")
    classification_service.upsert("invoice", "3", 2025, eur_line_id="E2025_KZ112")

    rows = classification_service.list_for_year(2025)
    assert len(rows) == 1
    assert rows[0].eur_line_id == "E2025_KZ112"


def test_upsert_keys_are_per_tax_year(classification_service):
    """Test that the same source can be classified per year."""
    classification_service.upsert("transaction", "7", 2025, eur_line_id="E2025_KZ280")
    classification_service.upsert("transaction", "7", 2026, eur_line_id="E2026_KZ280")

    assert len(classification_service.list_for_year(2025)) == 1
    assert classification_service.get_by_key("transaction", "7", 2026).eur_line_id == "E2026_KZ280"


def test_upsert_excluded_clears_line(classification_service):
    """Test that an excluded event never keeps a line."""
    cls = classification_service.upsert(
        "transaction", "7", 2025, eur_line_id="E2025_KZ280", excluded=True
    )

    assert cls.excluded is True
    assert cls.eur_line_id is None


def test_upsert_invalid_source_type(classification_service):
    """Test validation of the source type."""
    with pytest.raises(ValidationError, match="Invalid source type"):
        classification_service.upsert("receipt", "7", 2025, eur_line_id="E2025_KZ280")


def test_upsert_invalid_vat_mode(classification_service):
    """Test validation of the VAT mode."""
    with pytest.raises(ValidationError, match="Invalid VAT mode"):
        classification_service.upsert("transaction", "7", 2025, vat_mode="reduced")


def test_upsert_empty_source_id(classification_service):
    """Test that a source ID is required."""
    with pytest.raises(ValidationError):
        classification_service.upsert("transaction", "  ", 2025)


def test_upsert_many(classification_service):
    """Test bulk classification with duplicate IDs applied once."""
    results = classification_service.upsert_many(
        "transaction", ["1", "2", "1", "3"], 2025, eur_line_id="E2025_KZ183"
    )

    assert [cls.source_id for cls in results] == ["1", "2", "3"]
    by_key = classification_service.list_for_year_as_map(2025)
    assert set(by_key) == {"transaction:1", "transaction:2", "transaction:3"}
    assert all(cls.eur_line_id == "E2025_KZ183" for cls in by_key.values())


def test_get_by_key_missing(classification_service):
    """Test that a missing key returns None."""
    assert classification_service.get_by_key("transaction", "404", 2025) is None


def test_snapshot_and_restore(classification_service):
    """Test undoing a bulk change."""
    classification_service.upsert("transaction", "1", 2025, eur_line_id="E2025_KZ280", note="before")

    snapshots = classification_service.snapshot("transaction", ["1", "2"], 2025)
    assert snapshots[0].classification.eur_line_id == "E2025_KZ280"
    assert snapshots[1].classification is None

    classification_service.upsert_many("transaction", ["1", "2"], 2025, excluded=True)
    classification_service.restore(snapshots)

    restored = classification_service.get_by_key("transaction", "1", 2025)
    assert restored.eur_line_id == "E2025_KZ280"
    assert restored.excluded is False
    assert restored.note == "before"

    # Rows are never deleted; a previously absent key comes back empty
    emptied = classification_service.get_by_key("transaction", "2", 2025)
    assert emptied is not None
    assert emptied.eur_line_id is None
    assert emptied.excluded is False


def test_restore_accepts_built_snapshots(classification_service):
    """Test restoring a snapshot created by the caller."""
    classification_service.restore([
        ClassificationSnapshot(
            source_type=SourceType.INVOICE,
            source_id="5",
            tax_year=2025,
            classification=None,
        )
    ])

    assert classification_service.get_by_key("invoice", "5", 2025).eur_line_id is None


def test_upsert_strips_source_id(classification_service):
    """Test that padded source IDs are stored and looked up trimmed."""
    stored = classification_service.upsert("transaction", " 5 ", 2025, eur_line_id="E2025_KZ183")

    assert stored.source_id == "5"
    assert stored.key == "transaction:5"
    assert classification_service.get_by_key("transaction", "5 ", 2025).id == stored.id

    results = classification_service.upsert_many("transaction", ["5", " 5"], 2025, eur_line_id="E2025_KZ228")
    assert len(results) == 1
    assert len(classification_service.list_for_year(2025)) == 1

    snapshots = classification_service.snapshot("transaction", [" 5 "], 2025)
    assert snapshots[0].source_id == "5"
    assert snapshots[0].classification.eur_line_id == "E2025_KZ228"


def test_padded_source_id_classifies_event(temp_db, sample_events, classification_service, report_service, tax_config):
    """Test that a classification stored with a padded ID applies to its event."""
    line_by_name = {
        "invoice": ("invoice", "E2025_KZ112"),
        "hosting": ("transaction", "E2025_KZ183"),
        "rent": ("transaction", "E2025_KZ183"),
        "other_income": ("transaction", "E2025_KZ112"),
    }
    for name, (source_type, line_id) in line_by_name.items():
        classification_service.upsert(source_type, f" {sample_events[name]} ", 2025, eur_line_id=line_id)

    report = report_service.get_report(2025, tax_config)

    assert report.unclassified_count == 0
