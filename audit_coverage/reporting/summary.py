"""Vues dérivées des statistiques départementales.

  - Répartition des départements par niveau (absents → « Aucune »)
  - Classement des départements par score
  - Détail d'un département : auditeurs, trajets et cumuls aller-retour
  - Export DataFrame
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from audit_coverage.config import (
    DEFAULT_RESIDENCE_DEPARTMENT,
    DEPARTMENT_UNIVERSE_SIZE,
    CoverageLevel,
)
from audit_coverage.data.schemas import AuditorMetadata
from audit_coverage.engine.aggregation import DepartmentStats
from audit_coverage.engine.travel import TravelEstimator, TravelInfo

logger = logging.getLogger(__name__)


def level_counts(
    stats: Mapping[str, DepartmentStats],
    universe_size: int = DEPARTMENT_UNIVERSE_SIZE,
) -> Dict[CoverageLevel, int]:
    """Nombre de départements par niveau, du meilleur au plus faible.

    Le compte « Aucune » vaut ``universe_size`` moins les départements présents.
    """
    counts = {level: 0 for level in CoverageLevel}
    for stat in stats.values():
        counts[stat.level] += 1
    counts[CoverageLevel.NONE] = max(universe_size - len(stats), 0)
    return counts


def total_interventions(stats: Mapping[str, DepartmentStats]) -> int:
    """Total des audits 2025, tous départements confondus."""
    return sum(s.total2025 for s in stats.values())


def top_departments(stats: Mapping[str, DepartmentStats], n: int = 6) -> List[DepartmentStats]:
    """Les ``n`` départements au score le plus élevé (tri stable)."""
    return sorted(stats.values(), key=lambda s: s.score, reverse=True)[:n]


def roster_by_department(roster: Iterable[AuditorMetadata]) -> Dict[str, List[str]]:
    """Auditeurs regroupés par département de résidence."""
    grouped: Dict[str, List[str]] = {}
    for auditor in roster:
        grouped.setdefault(auditor.department, []).append(auditor.name)
    return grouped


@dataclass(frozen=True)
class AuditorTravelRow:
    """Ligne du détail départemental pour un auditeur."""
    name: str
    city: Optional[str]
    team: Optional[str]
    residence: str
    is_base: bool
    count25: int
    count24: int
    travel: TravelInfo
    # Cumuls aller-retour (distance * 2 * nombre d'audits)
    round_trip_km_2025: int
    round_trip_km_2024: int
    round_trip_cost_2025: Optional[float]
    round_trip_cost_2024: Optional[float]


@dataclass
class DepartmentDetail:
    """Vue détaillée d'un département."""
    stats: DepartmentStats
    rows: List[AuditorTravelRow]

    @property
    def total_round_trip_km_2025(self) -> int:
        return sum(r.round_trip_km_2025 for r in self.rows)

    @property
    def total_round_trip_cost_2025(self) -> float:
        """Frais refacturables (hors auditeurs pris en charge)."""
        return round(sum(r.round_trip_cost_2025 or 0.0 for r in self.rows), 2)


def _round_trip_cost(travel: TravelInfo, count: int) -> Optional[float]:
    if travel.cost_eur is None:
        return None
    return round(travel.cost_eur * 2 * count, 2)


def department_detail(
    stats: DepartmentStats,
    roster: Iterable[AuditorMetadata],
    estimator: Optional[TravelEstimator] = None,
) -> DepartmentDetail:
    """Détail d'un département, auditeurs triés par activité 2025 décroissante.

    Le trajet part du département de résidence de l'auditeur (code postal) ;
    un auditeur absent de l'annuaire est supposé résider en
    ``DEFAULT_RESIDENCE_DEPARTMENT`` et facturé au kilomètre.

    Args:
        stats: statistiques du département de destination.
        roster: annuaire des auditeurs.
        estimator: estimateur de trajets (par défaut : table intégrée).

    Returns:
        DepartmentDetail.
    """
    estimator = estimator or TravelEstimator()
    by_name = {a.name: a for a in roster}

    rows: List[AuditorTravelRow] = []
    for activity in sorted(stats.auditors, key=lambda a: a.count25, reverse=True):
        meta = by_name.get(activity.name)
        if meta is None:
            logger.debug("Auditeur %s absent de l'annuaire", activity.name)
        residence = meta.department if meta else DEFAULT_RESIDENCE_DEPARTMENT
        employee = meta.is_employee_billing if meta else False
        travel = estimator.estimate(residence, stats.id, employee)

        rows.append(AuditorTravelRow(
            name=activity.name,
            city=meta.city if meta else None,
            team=meta.team if meta else None,
            residence=residence,
            is_base=activity.is_base,
            count25=activity.count25,
            count24=activity.count24,
            travel=travel,
            round_trip_km_2025=travel.distance_km * 2 * activity.count25,
            round_trip_km_2024=travel.distance_km * 2 * activity.count24,
            round_trip_cost_2025=_round_trip_cost(travel, activity.count25),
            round_trip_cost_2024=_round_trip_cost(travel, activity.count24),
        ))

    return DepartmentDetail(stats=stats, rows=rows)


def stats_to_dataframe(stats: Mapping[str, DepartmentStats]) -> pd.DataFrame:
    """Export tabulaire, une ligne par département (ordre du mapping)."""
    records = [
        {
            "department": s.id,
            "total2025": s.total2025,
            "total2024": s.total2024,
            "auditors_count": s.auditors_count,
            "home_base_count": len(s.is_home_base_for),
            "score": s.score,
            "level": s.level.value,
            "rank": s.level.rank,
        }
        for s in stats.values()
    ]
    columns = [
        "department", "total2025", "total2024", "auditors_count",
        "home_base_count", "score", "level", "rank",
    ]
    return pd.DataFrame(records, columns=columns)
