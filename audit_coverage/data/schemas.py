"""Modèles Pydantic pour la validation des données d'audit."""

from __future__ import annotations

from typing import Any, Iterable, List, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from audit_coverage.config import EMPLOYEE_BILLING_TEAM


class InvalidAuditEntryError(ValueError):
    """Entrée d'audit malformée (compteur négatif, identifiant vide…)."""

    def __init__(self, index: int, value: Any, reason: str):
        self.index = index
        self.value = value
        self.reason = reason
        super().__init__(f"Entrée d'audit #{index} invalide ({value!r}) : {reason}")


class InvalidAuditorError(ValueError):
    """Fiche auditeur malformée dans l'annuaire."""

    def __init__(self, index: int, value: Any, reason: str):
        self.index = index
        self.value = value
        self.reason = reason
        super().__init__(f"Auditeur #{index} invalide ({value!r}) : {reason}")


class AuditEntry(BaseModel):
    """Activité d'un auditeur dans un département (2024 / 2025)."""
    model_config = ConfigDict(frozen=True)

    auditor: str
    department: str
    count2024: int = Field(ge=0)
    count2025: int = Field(ge=0)

    @field_validator("auditor", "department")
    @classmethod
    def non_blank(cls, v: str) -> str:
        """Identifiant non vide, sans espaces parasites (pas de normalisation)."""
        if not v.strip():
            raise ValueError("identifiant vide")
        if v != v.strip():
            raise ValueError(f"espaces en début ou fin d'identifiant : {v!r}")
        return v

    @field_validator("count2024", "count2025", mode="before")
    @classmethod
    def integral_count(cls, v: Any) -> Any:
        """Compteur entier ; refuse booléens et flottants, accepte "12" (CSV)."""
        if isinstance(v, (bool, float)):
            raise ValueError(f"compteur non entier : {v!r}")
        if isinstance(v, str):
            text = v.strip()
            if not text.lstrip("-").isdigit():
                raise ValueError(f"compteur non entier : {v!r}")
            return int(text)
        return v


class AuditorMetadata(BaseModel):
    """Fiche annuaire d'un auditeur."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    postal_code: str = Field(alias="postalCode", min_length=2)
    city: str = ""
    team: Literal["SGS", "VIT", "Ext"]
    type: Literal["ST", "SAL"]

    @field_validator("name", "postal_code")
    @classmethod
    def non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("valeur vide")
        return v

    @property
    def department(self) -> str:
        """Département de résidence (deux premiers caractères du code postal)."""
        return self.postal_code[:2]

    @property
    def is_employee_billing(self) -> bool:
        """Frais de déplacement pris en charge par l'employeur (équipe SGS)."""
        return self.team == EMPLOYEE_BILLING_TEAM


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", "")


def validate_entries(
    records: Iterable[Union[AuditEntry, Mapping[str, Any]]],
) -> List[AuditEntry]:
    """Valide une séquence d'entrées (modèles ou dicts), dans l'ordre.

    Raises:
        InvalidAuditEntryError: à la première entrée invalide ; aucune
            entrée n'est renvoyée dans ce cas.
    """
    entries: List[AuditEntry] = []
    for i, rec in enumerate(records):
        if isinstance(rec, AuditEntry):
            entries.append(rec)
            continue
        try:
            entries.append(AuditEntry.model_validate(rec))
        except ValidationError as exc:
            raise InvalidAuditEntryError(i, rec, _first_error(exc)) from exc
    return entries


def validate_roster(
    records: Iterable[Union[AuditorMetadata, Mapping[str, Any]]],
) -> List[AuditorMetadata]:
    """Valide l'annuaire des auditeurs.

    Raises:
        InvalidAuditorError: à la première fiche invalide.
    """
    roster: List[AuditorMetadata] = []
    for i, rec in enumerate(records):
        if isinstance(rec, AuditorMetadata):
            roster.append(rec)
            continue
        try:
            roster.append(AuditorMetadata.model_validate(rec))
        except ValidationError as exc:
            raise InvalidAuditorError(i, rec, _first_error(exc)) from exc
    return roster
