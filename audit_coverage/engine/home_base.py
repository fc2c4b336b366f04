"""Résolution du département de rattachement (« base ») de chaque auditeur.

La base d'un auditeur est le département où son activité 2025 est maximale.
En cas d'égalité, la première entrée rencontrée dans l'ordre d'entrée l'emporte
(comparaison stricte sur un seul parcours gauche → droite). Ce comportement est
observable : réordonner deux entrées à égalité change la base.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from audit_coverage.data.schemas import AuditEntry


def resolve_home_bases(entries: Iterable[AuditEntry]) -> Dict[str, str]:
    """Calcule la base de chaque auditeur.

    Args:
        entries: entrées d'audit validées, dans l'ordre d'origine.

    Returns:
        dict auditeur → code département de la base.
    """
    best: Dict[str, Tuple[str, int]] = {}
    for entry in entries:
        current = best.get(entry.auditor)
        # Strictement supérieur : la première entrée gagne les égalités
        if current is None or entry.count2025 > current[1]:
            best[entry.auditor] = (entry.department, entry.count2025)
    return {auditor: dept for auditor, (dept, _) in best.items()}
