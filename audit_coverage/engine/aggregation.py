"""Agrégation par département : volumes, auditeurs, score et niveau de couverture.

Enchaîne :
  1. Validation des entrées (échec immédiat, pas de résultat partiel)
  2. Résolution des bases auditeurs
  3. Repli (fold) des entrées en fiches départementales immuables
  4. Score = volume 2025 * 0.8 + auditeurs * 4 + bonus base (15)
  5. Niveau par seuils (35 / 18 / 8 / > 0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from audit_coverage.config import DEFAULT_SCORING, CoverageLevel, ScoringPolicy
from audit_coverage.data.schemas import AuditEntry, validate_entries
from audit_coverage.engine.home_base import resolve_home_bases

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditorActivity:
    """Détail d'un auditeur actif en 2025 dans un département."""
    name: str
    count25: int
    count24: int
    is_base: bool


@dataclass(frozen=True)
class DepartmentStats:
    """Statistiques de couverture d'un département."""
    id: str
    total2025: int = 0
    total2024: int = 0
    auditors_count: int = 0
    is_home_base_for: Tuple[str, ...] = ()     # auditeurs résidents, ordre d'entrée
    auditors: Tuple[AuditorActivity, ...] = ()  # uniquement count2025 > 0
    score: float = 0.0
    level: CoverageLevel = CoverageLevel.NONE

    @property
    def has_home_base(self) -> bool:
        return len(self.is_home_base_for) > 0


def compute_score(
    total2025: int,
    auditors_count: int,
    has_home_base: bool,
    policy: ScoringPolicy = DEFAULT_SCORING,
) -> float:
    """Score composite : volume, diversité des auditeurs, bonus de résidence."""
    score = total2025 * policy.volume_weight
    score += auditors_count * policy.auditor_bonus
    if has_home_base:
        score += policy.home_base_bonus
    return score


def classify_level(score: float, policy: ScoringPolicy = DEFAULT_SCORING) -> CoverageLevel:
    """Niveau de couverture ; seuils évalués dans l'ordre, premier atteint gagne."""
    if score >= policy.threshold_excellent:
        return CoverageLevel.EXCELLENT
    if score >= policy.threshold_good:
        return CoverageLevel.GOOD
    if score >= policy.threshold_average:
        return CoverageLevel.AVERAGE
    if score > 0:
        return CoverageLevel.WEAK
    return CoverageLevel.NONE


def _fold_entry(
    stats: Mapping[str, DepartmentStats],
    entry: AuditEntry,
    home_bases: Mapping[str, str],
) -> Dict[str, DepartmentStats]:
    """Intègre une entrée ; renvoie un nouveau mapping sans modifier l'ancien."""
    current = stats.get(entry.department) or DepartmentStats(id=entry.department)
    is_base = home_bases.get(entry.auditor) == entry.department

    home_for = current.is_home_base_for
    if is_base and entry.auditor not in home_for:
        home_for = home_for + (entry.auditor,)

    updated = replace(current, is_home_base_for=home_for)

    if entry.count2025 > 0:
        already_active = any(a.name == entry.auditor for a in current.auditors)
        updated = replace(
            updated,
            total2025=current.total2025 + entry.count2025,
            total2024=current.total2024 + entry.count2024,
            auditors_count=current.auditors_count + (0 if already_active else 1),
            auditors=current.auditors + (
                AuditorActivity(
                    name=entry.auditor,
                    count25=entry.count2025,
                    count24=entry.count2024,
                    is_base=is_base,
                ),
            ),
        )

    return {**stats, entry.department: updated}


def _finalize(stat: DepartmentStats, policy: ScoringPolicy) -> DepartmentStats:
    score = compute_score(stat.total2025, stat.auditors_count, stat.has_home_base, policy)
    return replace(stat, score=score, level=classify_level(score, policy))


def aggregate(
    entries: Iterable[Union[AuditEntry, Mapping[str, Any]]],
    policy: ScoringPolicy = DEFAULT_SCORING,
) -> Dict[str, DepartmentStats]:
    """Calcule les statistiques de couverture par département.

    Seuls les départements ayant au moins une entrée avec ``count2025 > 0``
    figurent dans le résultat ; les autres sont implicitement « Aucune ».

    Args:
        entries: entrées d'audit (modèles ou dicts), dans l'ordre d'origine.
        policy: coefficients et seuils du score.

    Returns:
        dict code département → DepartmentStats, dans l'ordre de première
        apparition des départements.

    Raises:
        InvalidAuditEntryError: si une entrée est malformée.
    """
    validated = validate_entries(entries)
    home_bases = resolve_home_bases(validated)

    folded: Dict[str, DepartmentStats] = reduce(
        lambda acc, entry: _fold_entry(acc, entry, home_bases),
        validated,
        {},
    )

    result = {
        dept: _finalize(stat, policy)
        for dept, stat in folded.items()
        if stat.auditors_count > 0
    }

    logger.info(
        "Agrégation : %d entrées, %d auditeurs, %d départements couverts (%d sans activité 2025)",
        len(validated), len(home_bases), len(result), len(folded) - len(result),
    )
    return result
