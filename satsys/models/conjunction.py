# satsys/models/conjunction.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from satsys.models.satellite import ManeuverDescriptor


@dataclass(frozen=True)
class ConjunctionEvent:
    """
    Predicted close approach between a tracked satellite and another object.
    tca is a timezone-aware UTC datetime.
    """
    id: str
    satellite_id: str
    object_name: str
    tca: datetime
    miss_distance_km: float
    relative_velocity_km_s: float
    probability: float
    risk: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "satelliteId": self.satellite_id,
            "objectName": self.object_name,
            "tca": self.tca.isoformat(),
            "missDistance": self.miss_distance_km,
            "relativeVelocity": self.relative_velocity_km_s,
            "probability": self.probability,
            "riskLevel": self.risk,
        }


@dataclass(frozen=True)
class SuggestedAction:
    id: str
    type: str
    description: str
    priority: str
    estimated_fuel_cost: float
    time_to_execute_min: int
    success_probability: float
    maneuver: Optional[ManeuverDescriptor] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "priority": self.priority,
            "estimatedFuelCost": self.estimated_fuel_cost,
            "timeToExecute": self.time_to_execute_min,
            "successProbability": self.success_probability,
            "parameters": self.maneuver.as_dict() if self.maneuver else None,
        }


@dataclass(frozen=True)
class Threat:
    type: str
    severity: int
    description: str
    time_to_impact_min: float


@dataclass
class ThreatAssessment:
    satellite_id: str
    threat_level: str
    assessed_at: datetime
    threats: List[Threat] = field(default_factory=list)
    recommended_actions: List[SuggestedAction] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "satelliteId": self.satellite_id,
            "threatLevel": self.threat_level,
            "threats": [
                {
                    "type": t.type,
                    "severity": t.severity,
                    "description": t.description,
                    "timeToImpact": t.time_to_impact_min,
                }
                for t in self.threats
            ],
            "recommendedActions": [a.as_dict() for a in self.recommended_actions],
            "lastAssessment": self.assessed_at.isoformat(),
        }
