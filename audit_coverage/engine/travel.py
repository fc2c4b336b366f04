"""Estimation des déplacements routiers entre départements.

Distance à vol d'oiseau (haversine) entre centroïdes, corrigée d'un facteur
de détour (1.3) et d'un forfait d'accès (10 km). Pas de calcul d'itinéraire :
vitesse moyenne fixe (75 km/h) et indemnité kilométrique fixe (0.42 €/km).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from audit_coverage.config import (
    DEFAULT_TRAVEL,
    DEPARTMENT_CENTROIDS,
    EARTH_RADIUS_KM,
    TravelPolicy,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TravelInfo:
    """Trajet estimé (aller simple)."""
    distance_km: int
    time_minutes: int
    cost_eur: Optional[float]  # None si frais pris en charge ou géographie inconnue

    @property
    def is_available(self) -> bool:
        return self.distance_km > 0


# Résultat dégradé : géographie inconnue
UNKNOWN_TRAVEL = TravelInfo(distance_km=0, time_minutes=0, cost_eur=None)


def _round_half_up(x: float) -> int:
    """Arrondi « commercial » (0.5 → 1) pour des valeurs positives."""
    return int(math.floor(x + 0.5))


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Distance orthodromique entre deux points (degrés décimaux)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return radius_km * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class TravelEstimator:
    """Estimateur de trajets à partir d'une table de centroïdes départementaux."""

    def __init__(
        self,
        centroids: Optional[Mapping[str, Tuple[float, float]]] = None,
        policy: TravelPolicy = DEFAULT_TRAVEL,
    ):
        self.centroids = dict(DEPARTMENT_CENTROIDS if centroids is None else centroids)
        self.policy = policy

    def _cost(self, distance_km: float, is_employee_billing: bool) -> Optional[float]:
        if is_employee_billing:
            return None
        return round(distance_km * self.policy.mileage_rate_eur, 2)

    def road_distance_km(self, crow_km: float) -> int:
        """Distance routière estimée à partir de la distance à vol d'oiseau."""
        return _round_half_up(crow_km * self.policy.circuity_factor + self.policy.access_distance_km)

    def duration_minutes(self, distance_km: float) -> int:
        return _round_half_up(distance_km / self.policy.average_speed_kmh * 60)

    def estimate(self, from_dept: str, to_dept: str, is_employee_billing: bool) -> TravelInfo:
        """Estime un trajet entre deux départements.

        Args:
            from_dept: département de départ (résidence de l'auditeur).
            to_dept: département de destination.
            is_employee_billing: True si les frais sont absorbés par l'employeur.

        Returns:
            TravelInfo ; forfait local si même département,
            ``UNKNOWN_TRAVEL`` si l'un des codes est absent de la table.
        """
        if from_dept == to_dept:
            return TravelInfo(
                distance_km=self.policy.local_trip_km,
                time_minutes=self.policy.local_trip_minutes,
                cost_eur=self._cost(self.policy.local_trip_km, is_employee_billing),
            )

        origin = self.centroids.get(from_dept)
        destination = self.centroids.get(to_dept)
        if origin is None or destination is None:
            logger.debug("Centroïde inconnu pour %s → %s", from_dept, to_dept)
            return UNKNOWN_TRAVEL

        crow = haversine_km(
            origin[0], origin[1], destination[0], destination[1],
            radius_km=self.policy.earth_radius_km,
        )
        road = self.road_distance_km(crow)
        return TravelInfo(
            distance_km=road,
            time_minutes=self.duration_minutes(road),
            cost_eur=self._cost(road, is_employee_billing),
        )

    def distance_matrix(self, codes: Sequence[str]) -> pd.DataFrame:
        """Matrice des distances routières (km) entre départements.

        Même convention que ``estimate`` : forfait local sur la diagonale,
        0 pour un code inconnu.

        Returns:
            DataFrame carré indexé par les codes (lignes = départ).
        """
        codes = list(codes)
        known = np.array([c in self.centroids for c in codes], dtype=bool)
        coords = np.array(
            [self.centroids.get(c, (0.0, 0.0)) for c in codes], dtype=float,
        ).reshape(-1, 2)
        lat = np.radians(coords[:, 0])
        lon = np.radians(coords[:, 1])

        d_lat = lat[None, :] - lat[:, None]
        d_lon = lon[None, :] - lon[:, None]
        a = (
            np.sin(d_lat / 2) ** 2
            + np.cos(lat[:, None]) * np.cos(lat[None, :]) * np.sin(d_lon / 2) ** 2
        )
        crow = self.policy.earth_radius_km * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
        road = np.floor(crow * self.policy.circuity_factor + self.policy.access_distance_km + 0.5)

        road[~known, :] = 0
        road[:, ~known] = 0
        same = np.array([[a == b for b in codes] for a in codes], dtype=bool)
        road[same.reshape(road.shape)] = self.policy.local_trip_km

        return pd.DataFrame(road.astype(int), index=codes, columns=codes)


_DEFAULT_ESTIMATOR = TravelEstimator()


def estimate_travel(from_dept: str, to_dept: str, is_employee_billing: bool) -> TravelInfo:
    """Raccourci sur l'estimateur par défaut (table de centroïdes intégrée)."""
    return _DEFAULT_ESTIMATOR.estimate(from_dept, to_dept, is_employee_billing)


def format_duration(minutes: int) -> str:
    """Formate une durée : ``1h35`` au-delà d'une heure, sinon ``45min``."""
    if minutes < 0:
        raise ValueError(f"Durée négative : {minutes}")
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h{mins:02d}"
    return f"{mins}min"
