"""Chargement des données d'audit (CSV ou enregistrements).

Point d'entrée unique pour l'activité des auditeurs et l'annuaire.
Les codes départements et postaux sont lus comme texte ("01", "2A").
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from audit_coverage.data.schemas import (
    AuditEntry,
    AuditorMetadata,
    validate_entries,
    validate_roster,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

# Colonnes acceptées → nom canonique
ENTRY_COLUMNS: Dict[str, str] = {
    "auditor": "auditor",
    "auditeur": "auditor",
    "department": "department",
    "departement": "department",
    "count2024": "count2024",
    "count_2024": "count2024",
    "count2025": "count2025",
    "count_2025": "count2025",
}

ROSTER_COLUMNS: Dict[str, str] = {
    "name": "name",
    "nom": "name",
    "postalCode": "postal_code",
    "postal_code": "postal_code",
    "code_postal": "postal_code",
    "city": "city",
    "ville": "city",
    "team": "team",
    "equipe": "team",
    "type": "type",
}

REQUIRED_ENTRY_COLUMNS = ["auditor", "department", "count2024", "count2025"]
REQUIRED_ROSTER_COLUMNS = ["name", "postal_code", "team", "type"]


def _normalize_columns(
    df: pd.DataFrame,
    aliases: Mapping[str, str],
    required: List[str],
    path: Path,
) -> pd.DataFrame:
    df = df.rename(columns={c: aliases[c] for c in df.columns if c in aliases})
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Colonnes manquantes dans {path.name} : {', '.join(missing)}")
    return df


class DataLoader:
    """Point d'entrée unifié pour le chargement des données d'audit."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    def _resolve(self, filename: Union[str, Path]) -> Path:
        path = Path(filename)
        if not path.is_absolute():
            path = self.data_dir / path
        if not path.exists():
            raise FileNotFoundError(f"Fichier introuvable : {path}")
        return path

    def read_csv(self, filename: Union[str, Path]) -> pd.DataFrame:
        """Lit un CSV brut, toutes colonnes en texte.

        Args:
            filename: chemin absolu ou relatif au répertoire de données.

        Returns:
            DataFrame.
        """
        path = self._resolve(filename)
        return pd.read_csv(path, dtype=str, keep_default_na=False)

    # --- Activité ---

    def load_entries_csv(self, filename: Union[str, Path]) -> List[AuditEntry]:
        """Charge et valide les entrées d'audit d'un CSV.

        Raises:
            FileNotFoundError: fichier absent.
            ValueError: colonnes manquantes.
            InvalidAuditEntryError: ligne invalide (index = rang de la ligne).
        """
        path = self._resolve(filename)
        df = _normalize_columns(
            self.read_csv(path), ENTRY_COLUMNS, REQUIRED_ENTRY_COLUMNS, path,
        )
        entries = self.entries_from_records(df[REQUIRED_ENTRY_COLUMNS].to_dict("records"))
        logger.info("%d entrées d'audit chargées depuis %s", len(entries), path)
        return entries

    @staticmethod
    def entries_from_records(records: Iterable[Mapping[str, Any]]) -> List[AuditEntry]:
        """Valide une liste de dicts (ex. issue d'un JSON)."""
        return validate_entries(records)

    # --- Annuaire ---

    def load_roster_csv(self, filename: Union[str, Path]) -> List[AuditorMetadata]:
        """Charge et valide l'annuaire des auditeurs d'un CSV.

        Raises:
            FileNotFoundError: fichier absent.
            ValueError: colonnes manquantes.
            InvalidAuditorError: ligne invalide.
        """
        path = self._resolve(filename)
        df = _normalize_columns(
            self.read_csv(path), ROSTER_COLUMNS, REQUIRED_ROSTER_COLUMNS, path,
        )
        columns = REQUIRED_ROSTER_COLUMNS + (["city"] if "city" in df.columns else [])
        roster = self.roster_from_records(df[columns].to_dict("records"))
        logger.info("%d auditeurs chargés depuis %s", len(roster), path)
        return roster

    @staticmethod
    def roster_from_records(records: Iterable[Mapping[str, Any]]) -> List[AuditorMetadata]:
        """Valide une liste de fiches auditeurs."""
        return validate_roster(records)
