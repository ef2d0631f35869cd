"""
Decision Engine for harvesting-system selection.
Uses a human-parsible decision tree over the sub-scores and raw site inputs.
"""

import logging
from dataclasses import dataclass
from typing import List

from core.models import ScoreBreakdown, SiteInput, SystemArchetype

log = logging.getLogger(__name__)


SYSTEM_REASONS = {
    SystemArchetype.RECHARGE_PIT_WITH_STORAGE: "Combines immediate storage with long-term groundwater recharge",
    SystemArchetype.INJECTION_WELL_SYSTEM: "Direct groundwater recharge maximizes aquifer replenishment",
    SystemArchetype.LARGE_UNDERGROUND_TANK: "Large storage capacity meets high water demand",
    SystemArchetype.MODULAR_TANK_SYSTEM: "Scalable design allows future expansion",
    SystemArchetype.OVERHEAD_TANK_SYSTEM: "Space-efficient solution with gravity-fed distribution",
    SystemArchetype.HYBRID_STORAGE_RECHARGE: "Optimal balance of storage and recharge benefits",
    SystemArchetype.STANDARD_UNDERGROUND_TANK: "Reliable storage solution for consistent water supply",
}


@dataclass(frozen=True)
class Selection:
    """Outcome of the decision tree."""
    primary: SystemArchetype
    alternatives: List[SystemArchetype]
    reasoning: List[str]


def _fmt(value: float) -> str:
    """Render a measurement without a trailing .0"""
    return f"{value:g}"


class SystemSelector:
    """
    The 'Brain' that picks one of the seven harvesting archetypes.

    Branches are evaluated top to bottom and the first match wins:
        1. Good groundwater, water table within 20 m -> recharge
        2. Plenty of space                          -> large / modular storage
        3. Little space                             -> overhead tank
        4. Strong rain on a good roof               -> hybrid
        5. Otherwise                                -> standard underground tank
    """

    def select(self, site: SiteInput, scores: ScoreBreakdown) -> Selection:
        primary = self.determine_system(site, scores)
        log.debug(f"Selected {primary.value} for {site.location!r}")
        return Selection(
            primary=primary,
            alternatives=self.alternatives(primary),
            reasoning=self.generate_reasoning(site, scores, primary),
        )

    def determine_system(self, site: SiteInput, scores: ScoreBreakdown) -> SystemArchetype:
        if scores.groundwater_conditions >= 70 and site.groundwater_depth_m <= 20:
            if site.available_space_m2 >= site.roof_area_m2 * 0.2:
                return SystemArchetype.RECHARGE_PIT_WITH_STORAGE
            return SystemArchetype.INJECTION_WELL_SYSTEM

        if scores.space_availability >= 80:
            if site.annual_rainfall_mm >= 1200:
                return SystemArchetype.LARGE_UNDERGROUND_TANK
            return SystemArchetype.MODULAR_TANK_SYSTEM

        if scores.space_availability <= 40:
            return SystemArchetype.OVERHEAD_TANK_SYSTEM

        if scores.rainfall >= 80 and scores.roof_suitability >= 70:
            return SystemArchetype.HYBRID_STORAGE_RECHARGE

        return SystemArchetype.STANDARD_UNDERGROUND_TANK

    @staticmethod
    def alternatives(primary: SystemArchetype) -> List[SystemArchetype]:
        """The first two other archetypes, in declaration order (not ranked)."""
        return [system for system in SystemArchetype if system is not primary][:2]

    def generate_reasoning(self, site: SiteInput, scores: ScoreBreakdown,
                           primary: SystemArchetype) -> List[str]:
        trace = []

        # Rainfall
        rain = _fmt(site.annual_rainfall_mm)
        if scores.rainfall >= 80:
            trace.append(f"Excellent rainfall ({rain}mm) provides strong harvesting potential")
        elif scores.rainfall >= 60:
            trace.append(f"Moderate rainfall ({rain}mm) supports viable harvesting")
        else:
            trace.append(f"Limited rainfall ({rain}mm) requires efficient collection systems")

        # Roof
        if scores.roof_suitability >= 80:
            trace.append(
                f"Large roof area ({_fmt(site.roof_area_m2)}m²) with suitable {site.roof_type} material"
            )
        elif scores.roof_suitability >= 60:
            trace.append("Adequate roof conditions for water collection")
        else:
            trace.append("Roof conditions may limit collection efficiency")

        # Space
        if scores.space_availability >= 80:
            trace.append(
                f"Ample space ({_fmt(site.available_space_m2)}m²) allows for optimal system design"
            )
        elif scores.space_availability >= 60:
            trace.append("Sufficient space for standard installation")
        else:
            trace.append("Limited space requires compact system design")

        # Groundwater
        if scores.groundwater_conditions >= 70:
            trace.append(
                f"Favorable groundwater conditions ({_fmt(site.groundwater_depth_m)}m depth) for recharge"
            )
        elif scores.groundwater_conditions >= 50:
            trace.append("Moderate groundwater conditions support some recharge potential")
        else:
            trace.append("Groundwater conditions favor storage over direct recharge")

        trace.append(SYSTEM_REASONS[primary])
        return trace


def get_system_selector() -> SystemSelector:
    """Factory function for the system selector."""
    return SystemSelector()
