"""Tests unitaires pour le chargement et la validation des données."""

import pytest

from audit_coverage.data.loader import DataLoader
from audit_coverage.data.schemas import (
    AuditorMetadata,
    InvalidAuditEntryError,
    InvalidAuditorError,
    validate_roster,
)


@pytest.fixture
def loader(tmp_path):
    return DataLoader(data_dir=tmp_path)


class TestLoadEntries:
    """Chargement des entrées d'audit depuis un CSV."""

    def test_codes_kept_as_text(self, loader, tmp_path):
        (tmp_path / "audits.csv").write_text(
            "auditor,department,count2024,count2025\n"
            "Alice,01,2,3\n"
            "Bob,2A,0,1\n",
            encoding="utf-8",
        )
        entries = loader.load_entries_csv("audits.csv")
        assert [e.department for e in entries] == ["01", "2A"]
        assert entries[0].count2025 == 3

    def test_column_aliases(self, loader, tmp_path):
        (tmp_path / "audits.csv").write_text(
            "auditeur,departement,count_2024,count_2025\n"
            "Alice,75,1,4\n",
            encoding="utf-8",
        )
        entries = loader.load_entries_csv(tmp_path / "audits.csv")
        assert entries[0].auditor == "Alice"

    def test_invalid_row(self, loader, tmp_path):
        (tmp_path / "audits.csv").write_text(
            "auditor,department,count2024,count2025\n"
            "Alice,75,1,4\n"
            "Bob,69,0,-2\n",
            encoding="utf-8",
        )
        with pytest.raises(InvalidAuditEntryError) as exc_info:
            loader.load_entries_csv("audits.csv")
        assert exc_info.value.index == 1

    def test_missing_column(self, loader, tmp_path):
        (tmp_path / "audits.csv").write_text("auditor,department\nAlice,75\n", encoding="utf-8")
        with pytest.raises(ValueError, match="count2024"):
            loader.load_entries_csv("audits.csv")

    def test_missing_file(self, loader):
        with pytest.raises(FileNotFoundError):
            loader.load_entries_csv("absent.csv")


class TestLoadRoster:
    """Chargement de l'annuaire."""

    def test_roster_csv(self, loader, tmp_path):
        (tmp_path / "auditeurs.csv").write_text(
            "name,postalCode,city,team,type\n"
            "Alice,06200,Nice,SGS,SAL\n"
            "Bob,20167,Ajaccio,Ext,ST\n",
            encoding="utf-8",
        )
        roster = loader.load_roster_csv("auditeurs.csv")
        assert roster[0].department == "06"
        assert roster[0].is_employee_billing is True
        assert roster[1].department == "20"
        assert roster[1].is_employee_billing is False

    def test_invalid_team(self):
        with pytest.raises(InvalidAuditorError) as exc_info:
            validate_roster([
                {"name": "A", "postalCode": "75001", "team": "SGS", "type": "SAL"},
                {"name": "B", "postalCode": "75001", "team": "XYZ", "type": "SAL"},
            ])
        assert exc_info.value.index == 1

    def test_snake_case_field(self):
        meta = AuditorMetadata.model_validate(
            {"name": "A", "postal_code": "33000", "team": "VIT", "type": "ST"}
        )
        assert meta.department == "33"
