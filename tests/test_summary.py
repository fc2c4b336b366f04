"""Tests unitaires pour les vues dérivées (répartition, classement, détail)."""

import pytest

from audit_coverage.config import CoverageLevel
from audit_coverage.data.schemas import AuditEntry, AuditorMetadata
from audit_coverage.engine.aggregation import aggregate
from audit_coverage.engine.travel import TravelEstimator
from audit_coverage.reporting.summary import (
    department_detail,
    level_counts,
    roster_by_department,
    stats_to_dataframe,
    top_departments,
    total_interventions,
)


@pytest.fixture
def stats():
    return aggregate([
        AuditEntry(auditor="A", department="75", count2024=4, count2025=10),
        AuditEntry(auditor="A", department="92", count2024=1, count2025=3),
        AuditEntry(auditor="B", department="75", count2024=3, count2025=2),
    ])


@pytest.fixture
def roster():
    return [
        AuditorMetadata(name="A", postalCode="75011", city="Paris", team="SGS", type="SAL"),
        AuditorMetadata(name="B", postalCode="69003", city="Lyon", team="VIT", type="ST"),
        AuditorMetadata(name="D", postalCode="69100", city="Villeurbanne", team="Ext", type="ST"),
    ]


class TestLevelCounts:
    """Répartition des départements par niveau."""

    def test_counts(self, stats):
        counts = level_counts(stats)
        assert counts[CoverageLevel.GOOD] == 1
        assert counts[CoverageLevel.WEAK] == 1
        assert counts[CoverageLevel.EXCELLENT] == 0
        assert counts[CoverageLevel.NONE] == 93
        assert sum(counts.values()) == 95

    def test_custom_universe(self, stats):
        assert level_counts(stats, universe_size=10)[CoverageLevel.NONE] == 8

    def test_total_interventions(self, stats):
        assert total_interventions(stats) == 15


class TestTopDepartments:
    """Classement par score."""

    def test_order(self, stats):
        top = top_departments(stats)
        assert [s.id for s in top] == ["75", "92"]

    def test_stable_ties(self):
        stats = aggregate([
            AuditEntry(auditor="X", department="13", count2024=0, count2025=1),
            AuditEntry(auditor="Y", department="33", count2024=0, count2025=1),
            AuditEntry(auditor="Z", department="59", count2024=0, count2025=1),
        ])
        assert [s.id for s in top_departments(stats, n=2)] == ["13", "33"]


class TestDepartmentDetail:
    """Détail départemental enrichi des trajets."""

    def test_rows_sorted_by_activity(self, stats, roster):
        detail = department_detail(stats["75"], roster)
        assert [r.name for r in detail.rows] == ["A", "B"]

    def test_rows_tie_keep_input_order(self, roster):
        """À activité égale, les auditeurs restent dans l'ordre d'entrée."""
        stats = aggregate([
            AuditEntry(auditor="D", department="13", count2024=0, count2025=2),
            AuditEntry(auditor="B", department="13", count2024=1, count2025=5),
            AuditEntry(auditor="A", department="13", count2024=0, count2025=2),
        ])
        detail = department_detail(stats["13"], roster)
        assert [r.name for r in detail.rows] == ["B", "D", "A"]

    def test_employee_local_trip(self, stats, roster):
        row = department_detail(stats["75"], roster).rows[0]
        assert row.residence == "75"
        assert row.travel.distance_km == 25
        assert row.travel.cost_eur is None
        assert row.round_trip_km_2025 == 25 * 2 * 10
        assert row.round_trip_km_2024 == 25 * 2 * 4
        assert row.round_trip_cost_2025 is None

    def test_contractor_round_trip(self, stats, roster):
        row = department_detail(stats["75"], roster).rows[1]
        assert row.residence == "69"
        assert row.team == "VIT"
        assert row.travel.cost_eur is not None
        assert row.round_trip_km_2025 == row.travel.distance_km * 2 * 2
        assert row.round_trip_cost_2025 == pytest.approx(row.travel.cost_eur * 4, abs=0.01)

    def test_unknown_auditor_defaults(self, stats):
        detail = department_detail(stats["92"], roster=[])
        row = detail.rows[0]
        assert row.residence == "75"
        assert row.city is None
        assert row.travel.cost_eur is not None

    def test_injected_estimator(self, stats, roster):
        est = TravelEstimator(centroids={})
        detail = department_detail(stats["92"], roster, estimator=est)
        assert detail.rows[0].travel.distance_km == 0
        assert detail.total_round_trip_km_2025 == 0
        assert detail.total_round_trip_cost_2025 == 0


class TestExport:
    """Export et regroupements."""

    def test_dataframe(self, stats):
        df = stats_to_dataframe(stats)
        assert list(df["department"]) == ["75", "92"]
        assert df.loc[0, "level"] == "Bonne"
        assert df.loc[0, "home_base_count"] == 2
        assert df["total2025"].sum() == 15

    def test_dataframe_empty(self):
        df = stats_to_dataframe({})
        assert df.empty
        assert "score" in df.columns

    def test_roster_by_department(self, roster):
        grouped = roster_by_department(roster)
        assert grouped == {"75": ["A"], "69": ["B", "D"]}
