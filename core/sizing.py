"""
Structure Sizing and Cost Engine.

Turns a chosen archetype into a sized, priced structure:
capacity -> dimensions -> materials -> cost -> maintenance.
"""

import math
import logging
from dataclasses import dataclass
from typing import Dict, Any, List

from core.models import (
    Dimensions,
    SiteInput,
    StructureSpecs,
    SystemArchetype,
    round_half_up,
)
from core.scoring import COLLECTION_EFFICIENCY

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# CATALOGUE
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class StructureTemplate:
    """Static facts about one archetype."""
    display_name: str
    materials: List[str]
    installation_days: int
    material_multiplier: float


CATALOGUE: Dict[SystemArchetype, StructureTemplate] = {
    SystemArchetype.RECHARGE_PIT_WITH_STORAGE: StructureTemplate(
        display_name="Recharge Pit with Storage Tank",
        materials=["RCC Concrete", "Gravel Filter Media", "Geotextile", "PVC Pipes", "Pump System"],
        installation_days=15,
        material_multiplier=1.4,
    ),
    SystemArchetype.INJECTION_WELL_SYSTEM: StructureTemplate(
        display_name="Injection Well System",
        materials=["Borewell Casing", "Submersible Pump", "Filter Media", "Control Panel"],
        installation_days=10,
        material_multiplier=1.8,
    ),
    SystemArchetype.LARGE_UNDERGROUND_TANK: StructureTemplate(
        display_name="Large Underground Storage Tank",
        materials=["RCC Concrete", "Waterproof Membrane", "Pump System", "Filtration Unit"],
        installation_days=18,
        material_multiplier=1.2,
    ),
    SystemArchetype.MODULAR_TANK_SYSTEM: StructureTemplate(
        display_name="Modular Tank System",
        materials=["Modular Concrete Blocks", "HDPE Lining", "Automated Controls", "Multi-stage Filter"],
        installation_days=12,
        material_multiplier=1.6,
    ),
    SystemArchetype.OVERHEAD_TANK_SYSTEM: StructureTemplate(
        display_name="Overhead Tank System",
        materials=["Reinforced Plastic Tank", "Steel Support Structure", "Pump System", "PVC Pipes"],
        installation_days=8,
        material_multiplier=0.9,
    ),
    SystemArchetype.HYBRID_STORAGE_RECHARGE: StructureTemplate(
        display_name="Hybrid Storage & Recharge System",
        materials=["Underground Tank", "Recharge Well", "Filtration System", "Control Valves"],
        installation_days=20,
        material_multiplier=1.7,
    ),
    SystemArchetype.STANDARD_UNDERGROUND_TANK: StructureTemplate(
        display_name="Standard Underground Tank",
        materials=["RCC Concrete", "Waterproof Coating", "First Flush Diverter", "Pump System"],
        installation_days=12,
        material_multiplier=1.0,
    ),
}


# ═══════════════════════════════════════════════════════════════════════════
# ASSUMPTIONS
# ═══════════════════════════════════════════════════════════════════════════
MIN_STORAGE_MONTHS = 2
MAX_STORAGE_MONTHS = 6

OVERHEAD_TANK_HEIGHT_M = 2.5
INJECTION_WELL_PAD_M = 1.5
INJECTION_WELL_DEPTH_M = 15.0
INJECTION_WELL_BORE_M = 0.3

MIN_TANK_DEPTH_M = 2.0
MAX_TANK_DEPTH_M = 3.5
USABLE_SPACE_FRACTION = 0.8
TANK_ASPECT_RATIO = 1.2

COST_PER_LITER = 12  # ₹ per liter of capacity
INSTALLATION_SURCHARGE = 0.3
AUXILIARY_COST_PER_M2 = 200  # pipes, filters, gutters
AUXILIARY_COST_CAP = 50000
MAINTENANCE_RATE = 0.05


@dataclass
class CostBreakdown:
    """Components of the estimated cost, before rounding."""
    material_cost: float
    installation_cost: float
    auxiliary_cost: float

    @property
    def total(self) -> int:
        return round_half_up(self.material_cost + self.installation_cost + self.auxiliary_cost)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material_cost": round(self.material_cost, 2),
            "installation_cost": round(self.installation_cost, 2),
            "auxiliary_cost": round(self.auxiliary_cost, 2),
            "total": self.total,
        }


def storage_months(harvest_liters: float, daily_demand_liters: float) -> float:
    """Months of demand the tank should hold, clamped to [2, 6]."""
    months = harvest_liters / (daily_demand_liters * 30)
    return min(MAX_STORAGE_MONTHS, max(MIN_STORAGE_MONTHS, months))


def _r2(value: float) -> float:
    return round_half_up(value * 100) / 100


# ═══════════════════════════════════════════════════════════════════════════
# SIZER
# ═══════════════════════════════════════════════════════════════════════════
class StructureSizer:
    """Engine for sizing and pricing harvesting structures."""

    def required_capacity(self, site: SiteInput) -> int:
        """Target storage in liters, driven by harvest potential and demand."""
        harvest_liters = site.roof_area_m2 * site.annual_rainfall_mm * COLLECTION_EFFICIENCY
        daily_demand = site.daily_demand_liters
        months = storage_months(harvest_liters, daily_demand)
        return round_half_up(daily_demand * months * 30)

    def dimensions(self, archetype: SystemArchetype, capacity: int, available_space_m2: float) -> Dimensions:
        volume = capacity / 1000  # m³

        if archetype is SystemArchetype.OVERHEAD_TANK_SYSTEM:
            diameter = _r2(math.sqrt(volume / (math.pi * OVERHEAD_TANK_HEIGHT_M)) * 2)
            return Dimensions(
                length=diameter,
                width=diameter,
                height=OVERHEAD_TANK_HEIGHT_M,
                diameter=diameter,
            )

        if archetype is SystemArchetype.INJECTION_WELL_SYSTEM:
            # Well geometry is fixed; capacity does not change it
            return Dimensions(
                length=INJECTION_WELL_PAD_M,
                width=INJECTION_WELL_PAD_M,
                height=INJECTION_WELL_DEPTH_M,
                diameter=INJECTION_WELL_BORE_M,
            )

        # Underground tanks
        max_area = available_space_m2 * USABLE_SPACE_FRACTION
        if max_area > 0:
            depth = min(MAX_TANK_DEPTH_M, max(MIN_TANK_DEPTH_M, volume / max_area))
        else:
            depth = MAX_TANK_DEPTH_M
        area = volume / depth
        length = math.sqrt(area * TANK_ASPECT_RATIO)
        width = area / length

        return Dimensions(length=_r2(length), width=_r2(width), height=_r2(depth))

    def size(self, site: SiteInput, archetype: SystemArchetype) -> StructureSpecs:
        """Size a structure; cost fields are left at zero."""
        template = CATALOGUE[archetype]
        capacity = self.required_capacity(site)

        return StructureSpecs(
            type=template.display_name,
            capacity=capacity,
            dimensions=self.dimensions(archetype, capacity, site.available_space_m2),
            materials=list(template.materials),
            installation_time=template.installation_days,
        )

    def cost_breakdown(self, archetype: SystemArchetype, capacity: int, roof_area_m2: float) -> CostBreakdown:
        material = capacity * COST_PER_LITER * CATALOGUE[archetype].material_multiplier
        return CostBreakdown(
            material_cost=material,
            installation_cost=material * INSTALLATION_SURCHARGE,
            auxiliary_cost=min(AUXILIARY_COST_CAP, roof_area_m2 * AUXILIARY_COST_PER_M2),
        )

    def price(self, specs: StructureSpecs, archetype: SystemArchetype, roof_area_m2: float) -> StructureSpecs:
        """Fill in estimated and maintenance cost."""
        specs.estimated_cost = self.cost_breakdown(archetype, specs.capacity, roof_area_m2).total
        specs.maintenance_cost = round_half_up(specs.estimated_cost * MAINTENANCE_RATE)
        log.debug(f"{specs.type}: {specs.capacity} L, ₹{specs.estimated_cost:,}")
        return specs


def get_structure_sizer() -> StructureSizer:
    """Factory function for the structure sizer."""
    return StructureSizer()


# ═══════════════════════════════════════════════════════════════════════════
# COST-BENEFIT
# ═══════════════════════════════════════════════════════════════════════════
DEFAULT_WATER_TARIFF = 0.02  # ₹ per liter
MATERIAL_SHARE = 0.6
CO2_KG_PER_LITER = 0.0003


def _r1(value: float) -> float:
    return round_half_up(value * 10) / 10


@dataclass
class CostBenefit:
    """Financial and environmental summary of one installation."""
    total_cost: int
    material_cost: int
    labor_cost: int
    annual_water_value: float
    maintenance_cost: int
    net_annual_savings: int
    payback_years: float  # inf when the system never pays back
    roi_percent: float
    co2_saved_kg: float

    @property
    def pays_back(self) -> bool:
        return math.isfinite(self.payback_years)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cost": self.total_cost,
            "material_cost": self.material_cost,
            "labor_cost": self.labor_cost,
            "annual_water_value": round(self.annual_water_value, 2),
            "maintenance_cost": self.maintenance_cost,
            "net_annual_savings": self.net_annual_savings,
            "payback_years": self.payback_years if self.pays_back else None,
            "roi_percent": self.roi_percent,
            "co2_saved_kg": round(self.co2_saved_kg, 1),
        }


def cost_benefit(site: SiteInput, specs: StructureSpecs,
                 tariff: float = DEFAULT_WATER_TARIFF) -> CostBenefit:
    """
    Value the harvested water against the installation and upkeep.

    Every liter the roof can collect is valued at `tariff`; upkeep is the
    structure's annual maintenance cost.
    """
    harvest_liters = site.roof_area_m2 * site.annual_rainfall_mm * COLLECTION_EFFICIENCY
    material = round_half_up(specs.estimated_cost * MATERIAL_SHARE)
    labor = specs.estimated_cost - material
    total = material + labor

    water_value = harvest_liters * tariff
    net = round_half_up(water_value - specs.maintenance_cost)

    if net > 0:
        payback = _r1(total / net)
    else:
        payback = math.inf
    roi = _r1(net / total * 100) if total > 0 else 0.0

    return CostBenefit(
        total_cost=total,
        material_cost=material,
        labor_cost=labor,
        annual_water_value=water_value,
        maintenance_cost=specs.maintenance_cost,
        net_annual_savings=net,
        payback_years=payback,
        roi_percent=roi,
        co2_saved_kg=harvest_liters * CO2_KG_PER_LITER,
    )
