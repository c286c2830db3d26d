"""
Synthetic supplier generator with per-industry ranges, light correlations and
configurable missingness.

Generates suppliers across four industries (Apparel, Electronics, Food Retail,
Logistics) plus the matching industry bands, reproducibly from a seed.
"""

import random
import json
import csv
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from loguru import logger

from ethicscore.engine.normalizer import derive_metric_values
from ethicscore.models.metrics import NUMERIC_METRICS, RAW_METRICS
from ethicscore.models.supplier import SupplierRecord


# ────────────────────── Constants ──────────────────────

INDUSTRY_PARAMS = {
    "Apparel": {
        "revenue": (3000, 12000), "emission_intensity": (15, 35), "water_intensity": (3, 12),
        "waste_intensity": (0.5, 3), "renewable_pct": (20, 60), "training_hours": (12, 36),
        "injury_rate": (0.8, 3.2), "wage_ratio": (0.8, 1.15), "diversity_pct": (25, 55),
        "board_diversity": (20, 60), "board_independence": (30, 70), "transparency_score": (45, 85),
        "anti_corruption_prob": 0.75,
        "climate_risk": (0.3, 0.7), "geopolitical_risk": (0.4, 0.8), "labor_dispute_risk": (0.3, 0.7),
    },
    "Electronics": {
        "revenue": (5000, 16000), "emission_intensity": (20, 60), "water_intensity": (5, 20),
        "waste_intensity": (0.8, 4), "renewable_pct": (15, 55), "training_hours": (14, 40),
        "injury_rate": (0.5, 2.5), "wage_ratio": (0.85, 1.2), "diversity_pct": (20, 50),
        "board_diversity": (25, 65), "board_independence": (35, 75), "transparency_score": (50, 90),
        "anti_corruption_prob": 0.85,
        "climate_risk": (0.2, 0.6), "geopolitical_risk": (0.3, 0.7), "labor_dispute_risk": (0.2, 0.5),
    },
    "Food Retail": {
        "revenue": (4000, 14000), "emission_intensity": (25, 80), "water_intensity": (10, 40),
        "waste_intensity": (1, 5), "renewable_pct": (10, 50), "training_hours": (10, 30),
        "injury_rate": (0.7, 3.0), "wage_ratio": (0.8, 1.1), "diversity_pct": (30, 55),
        "board_diversity": (20, 60), "board_independence": (30, 70), "transparency_score": (40, 80),
        "anti_corruption_prob": 0.8,
        "climate_risk": (0.3, 0.7), "geopolitical_risk": (0.2, 0.6), "labor_dispute_risk": (0.2, 0.5),
    },
    "Logistics": {
        "revenue": (3000, 12000), "emission_intensity": (40, 120), "water_intensity": (2, 8),
        "waste_intensity": (0.3, 1.5), "renewable_pct": (10, 40), "training_hours": (10, 28),
        "injury_rate": (0.9, 3.5), "wage_ratio": (0.85, 1.15), "diversity_pct": (20, 50),
        "board_diversity": (20, 55), "board_independence": (30, 70), "transparency_score": (40, 80),
        "anti_corruption_prob": 0.7,
        "climate_risk": (0.4, 0.8), "geopolitical_risk": (0.3, 0.7), "labor_dispute_risk": (0.3, 0.6),
    },
}

COUNTRIES = {
    "Apparel": ["Bangladesh", "Vietnam", "India", "China", "Turkey"],
    "Electronics": ["China", "Taiwan", "South Korea", "Vietnam", "Malaysia", "Mexico"],
    "Food Retail": ["United States", "United Kingdom", "Germany", "France", "Spain", "Brazil"],
    "Logistics": ["United States", "Germany", "Netherlands", "Singapore", "United Arab Emirates", "China"],
}

NAME_PREFIXES = ["Apex", "Blue River", "Cedar", "Delta", "Evergreen", "Harbor", "Lumen", "Northwind", "Summit", "Vertex"]
NAME_SUFFIXES = {
    "Apparel": "Textiles",
    "Electronics": "Components",
    "Food Retail": "Foods",
    "Logistics": "Freight",
}

# Non-critical raw fields subject to missingness (emissions and anti-corruption stay present)
MISSINGNESS_FIELDS = [
    "renewable_pct", "water_usage", "waste_generated", "injury_rate", "training_hours",
    "wage_ratio", "diversity_pct", "board_diversity", "board_independence", "transparency_score",
]

PROFIT_MARGIN_RANGE = (5.0, 35.0)


def derive_bands(records: Sequence[SupplierRecord], version: str = "v1", seed=None) -> dict:
    """Industry bands {min, avg, max} over the disclosed scoring metrics."""
    observed: Dict[str, Dict[str, List[float]]] = {}
    for record in records:
        values, _ = derive_metric_values(record)
        industry = observed.setdefault(record.industry, {})
        for metric in NUMERIC_METRICS:
            if values[metric] is not None:
                industry.setdefault(metric, []).append(values[metric])

    bands = {}
    for industry, metrics in observed.items():
        bands[industry] = {}
        for metric, vals in metrics.items():
            low, high = min(vals), max(vals)
            avg = min(max(sum(vals) / len(vals), low), high)
            bands[industry][metric] = {"min": round(low, 6), "avg": round(avg, 6), "max": round(high, 6)}

    return {
        "version": version,
        "seed": seed,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "bands": bands,
    }


class SyntheticSupplierGenerator:
    """
    Generates reproducible supplier datasets.

    Usage:
        gen = SyntheticSupplierGenerator(num_suppliers=120, missing_rate=0.15, seed=42)
        suppliers = gen.generate_suppliers()
        gen.export_json("./data")
    """

    def __init__(
        self,
        num_suppliers: int = 120,
        missing_rate: float = 0.15,
        seed: int = 42,
        industries: Optional[Sequence[str]] = None,
    ):
        self.num_suppliers = num_suppliers
        self.missing_rate = missing_rate
        self.seed = seed
        self.industries = list(industries or INDUSTRY_PARAMS)
        self.rng = random.Random(seed)
        self.suppliers: List[SupplierRecord] = []

    def _uniform(self, bounds) -> float:
        return self.rng.uniform(*bounds)

    def _correlated(self, bounds, driver: float, strength: float = 0.3) -> float:
        """Value within bounds, pulled lower as ``driver`` (0..1) rises."""
        position = self.rng.gauss(0.55 - strength * driver, 0.15)
        position = min(max(position, 0.0), 1.0)
        low, high = bounds
        return low + (high - low) * position

    def _supplier(self, index: int) -> SupplierRecord:
        industry = self.industries[index % len(self.industries)]
        p = INDUSTRY_PARAMS[industry]

        revenue = round(self._uniform(p["revenue"]), 1)
        renewable = self._uniform(p["renewable_pct"])
        renewable_share = (renewable - p["renewable_pct"][0]) / (p["renewable_pct"][1] - p["renewable_pct"][0])
        training = self._uniform(p["training_hours"])
        training_share = (training - p["training_hours"][0]) / (p["training_hours"][1] - p["training_hours"][0])

        metrics = {
            "emissions": round(self._correlated(p["emission_intensity"], renewable_share) * revenue, 2),
            "water_usage": round(self._uniform(p["water_intensity"]) * revenue, 2),
            "waste_generated": round(self._uniform(p["waste_intensity"]) * revenue, 2),
            "renewable_pct": round(renewable, 1),
            "injury_rate": round(self._correlated(p["injury_rate"], training_share), 2),
            "training_hours": round(training, 1),
            "wage_ratio": round(self._uniform(p["wage_ratio"]), 3),
            "diversity_pct": round(self._uniform(p["diversity_pct"]), 1),
            "board_diversity": round(self._uniform(p["board_diversity"]), 1),
            "board_independence": round(self._uniform(p["board_independence"]), 1),
            "transparency_score": round(self._uniform(p["transparency_score"]), 1),
            "anti_corruption": self.rng.random() < p["anti_corruption_prob"],
            "climate_risk": round(self._uniform(p["climate_risk"]), 3),
            "geopolitical_risk": round(self._uniform(p["geopolitical_risk"]), 3),
            "labor_dispute_risk": round(self._uniform(p["labor_dispute_risk"]), 3),
        }
        for field in MISSINGNESS_FIELDS:
            if self.rng.random() < self.missing_rate:
                metrics.pop(field)

        name = f"{self.rng.choice(NAME_PREFIXES)} {NAME_SUFFIXES.get(industry, 'Supply')} {index + 1:03d}"
        return SupplierRecord(
            id=f"SUP-{index + 1:04d}",
            name=name,
            country=self.rng.choice(COUNTRIES.get(industry, ["Unknown"])),
            industry=industry,
            revenue=revenue,
            profit_margin=round(self._uniform(PROFIT_MARGIN_RANGE), 1),
            metrics=metrics,
        )

    def generate_suppliers(self) -> List[SupplierRecord]:
        self.suppliers = [self._supplier(i) for i in range(self.num_suppliers)]
        logger.info(
            f"Generated {len(self.suppliers)} suppliers across {len(self.industries)} industries (seed={self.seed})"
        )
        return self.suppliers

    def generate_all(self) -> dict:
        suppliers = self.suppliers or self.generate_suppliers()
        return {
            "suppliers": suppliers,
            "bands": derive_bands(suppliers, seed=self.seed),
        }

    def export_json(self, output_dir: str = "./data") -> Dict[str, str]:
        """Write suppliers.json and bands_v1.json; returns the written paths."""
        os.makedirs(output_dir, exist_ok=True)
        data = self.generate_all()

        paths = {
            "suppliers": os.path.join(output_dir, "suppliers.json"),
            "bands": os.path.join(output_dir, "bands_v1.json"),
        }
        with open(paths["suppliers"], "w", encoding="utf-8") as f:
            json.dump({
                "version": f"synthetic-seed-{self.seed}",
                "suppliers": [s.model_dump() for s in data["suppliers"]],
            }, f, indent=2)
        with open(paths["bands"], "w", encoding="utf-8") as f:
            json.dump(data["bands"], f, indent=2)
        logger.info(f"Exported {len(data['suppliers'])} suppliers and bands to {output_dir}")
        return paths

    def export_csv(self, output_dir: str = "./data") -> str:
        """Flat CSV of suppliers, one column per raw metric (blank = not disclosed)."""
        os.makedirs(output_dir, exist_ok=True)
        suppliers = self.suppliers or self.generate_suppliers()
        filepath = os.path.join(output_dir, "suppliers.csv")
        fieldnames = ["id", "name", "country", "industry", "revenue", "profit_margin", *RAW_METRICS]

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for s in suppliers:
                row = {k: getattr(s, k) for k in fieldnames[:6]}
                row.update({m: s.metrics.get(m, "") for m in RAW_METRICS})
                writer.writerow(row)
        logger.info(f"Exported {len(suppliers)} suppliers to {filepath}")
        return filepath
