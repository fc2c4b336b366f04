"""Constantes de couverture audit — scoring, niveaux, déplacements, géographie.

Toutes les valeurs de politique (coefficients, seuils, barème kilométrique)
vivent ici. Elles sont regroupées dans des dataclasses figées
(``ScoringPolicy``, ``TravelPolicy``) que l'on peut remplacer à l'appel
pour recalibrer sans toucher aux algorithmes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


# ---------------------------------------------------------------------------
# Niveaux de couverture
# ---------------------------------------------------------------------------

class CoverageLevel(Enum):
    """Niveau de couverture d'un département (libellés d'affichage)."""
    EXCELLENT = "Excellente"
    GOOD = "Bonne"
    AVERAGE = "Moyenne"
    WEAK = "Faible"
    NONE = "Aucune"

    @property
    def rank(self) -> int:
        """Rang ordinal : NONE (0) < WEAK < AVERAGE < GOOD < EXCELLENT (4)."""
        return LEVEL_RANKS[self]

    @property
    def color(self) -> str:
        return LEVEL_COLORS[self]


LEVEL_RANKS: Dict[CoverageLevel, int] = {
    CoverageLevel.NONE: 0,
    CoverageLevel.WEAK: 1,
    CoverageLevel.AVERAGE: 2,
    CoverageLevel.GOOD: 3,
    CoverageLevel.EXCELLENT: 4,
}

# Palette de la carte (donnée de référence, non calculée)
LEVEL_COLORS: Dict[CoverageLevel, str] = {
    CoverageLevel.EXCELLENT: "#1E40AF",
    CoverageLevel.GOOD: "#3B82F6",
    CoverageLevel.AVERAGE: "#93C5FD",
    CoverageLevel.WEAK: "#DBEAFE",
    CoverageLevel.NONE: "#F1F5F9",
}


# ---------------------------------------------------------------------------
# Score de couverture
#
# score = total2025 * 0.8 + nb_auditeurs * 4 + (15 si base d'au moins un auditeur)
# Seuils empiriques, à conserver tels quels pour la compatibilité.
# ---------------------------------------------------------------------------

SCORE_VOLUME_WEIGHT = 0.8       # poids du volume 2025
SCORE_AUDITOR_BONUS = 4         # par auditeur actif (redondance)
SCORE_HOME_BASE_BONUS = 15      # résidence locale d'au moins un auditeur

THRESHOLD_EXCELLENT = 35        # score ≥ 35
THRESHOLD_GOOD = 18             # score ≥ 18
THRESHOLD_AVERAGE = 8           # score ≥ 8
# score > 0 → WEAK ; score ≤ 0 → NONE

# Métropole + Corse + codes utilisés dans le jeu de données
DEPARTMENT_UNIVERSE_SIZE = 95


@dataclass(frozen=True)
class ScoringPolicy:
    """Coefficients et seuils du score de couverture."""
    volume_weight: float = SCORE_VOLUME_WEIGHT
    auditor_bonus: float = SCORE_AUDITOR_BONUS
    home_base_bonus: float = SCORE_HOME_BASE_BONUS
    threshold_excellent: float = THRESHOLD_EXCELLENT
    threshold_good: float = THRESHOLD_GOOD
    threshold_average: float = THRESHOLD_AVERAGE


DEFAULT_SCORING = ScoringPolicy()


# ---------------------------------------------------------------------------
# Déplacements
# ---------------------------------------------------------------------------

EARTH_RADIUS_KM = 6371.0
CIRCUITY_FACTOR = 1.3           # détour route / vol d'oiseau
ACCESS_DISTANCE_KM = 10         # premier / dernier kilomètre
AVERAGE_SPEED_KMH = 75
MILEAGE_RATE_EUR = 0.42         # indemnité kilométrique €/km

# Déplacement local (même département)
LOCAL_TRIP_KM = 25
LOCAL_TRIP_MINUTES = 30

# Département de résidence si l'auditeur est absent de l'annuaire
DEFAULT_RESIDENCE_DEPARTMENT = "75"

# Équipe dont les frais sont pris en charge par l'employeur
EMPLOYEE_BILLING_TEAM = "SGS"


@dataclass(frozen=True)
class TravelPolicy:
    """Paramètres d'estimation des trajets routiers."""
    earth_radius_km: float = EARTH_RADIUS_KM
    circuity_factor: float = CIRCUITY_FACTOR
    access_distance_km: float = ACCESS_DISTANCE_KM
    average_speed_kmh: float = AVERAGE_SPEED_KMH
    mileage_rate_eur: float = MILEAGE_RATE_EUR
    local_trip_km: int = LOCAL_TRIP_KM
    local_trip_minutes: int = LOCAL_TRIP_MINUTES


DEFAULT_TRAVEL = TravelPolicy()


# ---------------------------------------------------------------------------
# Centroïdes approximatifs des départements (lat, lon)
#
# Table simplifiée pour l'estimation ; "20" = Corse agrégée.
# ---------------------------------------------------------------------------

DEPARTMENT_CENTROIDS: Dict[str, Tuple[float, float]] = {
    "01": (46.10, 5.24), "02": (49.56, 3.62), "03": (46.34, 3.33),
    "04": (44.09, 6.24), "05": (44.56, 6.08), "06": (43.70, 7.27),
    "07": (44.75, 4.59), "08": (49.76, 4.72), "09": (42.96, 1.60),
    "10": (48.30, 4.08), "11": (43.21, 2.35), "12": (44.35, 2.57),
    "13": (43.45, 5.40), "14": (49.18, -0.37), "15": (44.93, 2.44),
    "16": (45.65, 0.16), "17": (45.75, -0.63), "18": (47.08, 2.40),
    "19": (45.27, 1.77), "21": (47.32, 5.04), "22": (48.51, -2.76),
    "23": (46.17, 1.87), "24": (45.18, 0.72), "25": (47.24, 6.02),
    "26": (44.93, 4.89), "27": (49.02, 1.15), "28": (48.45, 1.49),
    "29": (48.40, -4.10), "2A": (41.93, 8.74), "2B": (42.69, 9.45),
    "30": (43.84, 4.36), "31": (43.60, 1.44), "32": (43.65, 0.58),
    "33": (44.84, -0.58), "34": (43.61, 3.88), "35": (48.11, -1.68),
    "36": (46.81, 1.69), "37": (47.39, 0.69), "38": (45.19, 5.72),
    "39": (46.67, 5.55), "40": (43.89, -0.50), "41": (47.59, 1.33),
    "42": (45.44, 4.39), "43": (45.04, 3.88), "44": (47.22, -1.55),
    "45": (47.90, 1.91), "46": (44.45, 1.44), "47": (44.20, 0.62),
    "48": (44.52, 3.50), "49": (47.47, -0.55), "50": (49.12, -1.09),
    "51": (48.96, 4.37), "52": (48.11, 5.14), "53": (48.07, -0.77),
    "54": (48.69, 6.18), "55": (48.77, 5.16), "56": (47.66, -2.76),
    "57": (49.12, 6.18), "58": (47.00, 3.16), "59": (50.63, 3.06),
    "60": (49.43, 2.08), "61": (48.43, 0.09), "62": (50.48, 2.44),
    "63": (45.78, 3.08), "64": (43.30, -0.37), "65": (43.23, 0.08),
    "66": (42.69, 2.89), "67": (48.58, 7.75), "68": (47.75, 7.34),
    "69": (45.76, 4.83), "70": (47.62, 6.16), "71": (46.78, 4.83),
    "72": (48.01, 0.20), "73": (45.57, 5.92), "74": (45.90, 6.13),
    "75": (48.86, 2.35), "76": (49.44, 1.10), "77": (48.54, 2.65),
    "78": (48.81, 2.13), "79": (46.33, -0.47), "80": (49.90, 2.30),
    "81": (43.93, 2.15), "82": (44.02, 1.35), "83": (43.13, 5.93),
    "84": (43.95, 4.81), "85": (46.67, -1.43), "86": (46.58, 0.34),
    "87": (45.83, 1.26), "88": (48.17, 6.45), "89": (47.80, 3.57),
    "90": (47.64, 6.86), "91": (48.51, 2.24), "92": (48.89, 2.23),
    "93": (48.91, 2.45), "94": (48.79, 2.45), "95": (49.04, 2.06),
    "20": (42.00, 9.00),
}
