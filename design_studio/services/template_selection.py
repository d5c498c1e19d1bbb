from __future__ import annotations

import logging
import re
from typing import Optional

from design_studio.domain.taxonomy import DesignStyleEnum, SectorEnum, TimeframeEnum
from design_studio.errors import TemplateNotFoundError
from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.schemas.selection import (
    BrandDirection,
    ColorDirection,
    LogoDirection,
    PhotoDirection,
    ScoreBreakdown,
    SmartSelectionResult,
    TemplateScore,
)
from design_studio.schemas.templates import Template
from design_studio.services.catalog import TemplateCatalog, load_catalog
from design_studio.services.colors import round_half_up
from design_studio.services.customization import CustomizationGenerator

logger = logging.getLogger(__name__)

STYLE_WEIGHT = 0.30
BUDGET_WEIGHT = 0.25
FEATURES_WEIGHT = 0.25
PERFORMANCE_WEIGHT = 0.20

# Asymmetric: STYLE_COMPATIBILITY[template_style][preferred_style].
STYLE_COMPATIBILITY: dict[str, dict[str, float]] = {
    "luxury": {"premium": 0.8, "elegant": 0.7, "professional": 0.5, "modern": 0.3},
    "premium": {"luxury": 0.8, "professional": 0.9, "elegant": 0.6, "modern": 0.4},
    "modern": {"professional": 0.7, "elegant": 0.5, "premium": 0.4, "luxury": 0.3},
    "elegant": {"luxury": 0.7, "premium": 0.6, "professional": 0.5, "modern": 0.5},
    "professional": {"premium": 0.9, "modern": 0.7, "elegant": 0.5, "luxury": 0.5},
}

BUDGET_STYLES: dict[str, frozenset[str]] = {
    "standard": frozenset({"modern", "professional"}),
    "premium": frozenset({"premium", "elegant", "professional"}),
    "luxury": frozenset({"luxury", "premium", "elegant"}),
}

SUBTYPE_FEATURES: dict[str, dict[str, tuple[str, ...]]] = {
    "restaurant": {
        "bistrot": ("menu", "réservation", "galerie"),
        "pizzeria": ("commande", "livraison", "configurateur"),
        "gastronomique": ("dégustation", "chef", "événements"),
    },
    "beaute": {
        "salon coiffure": ("booking", "galerie", "équipe"),
        "institut": ("spa", "soins", "wellness"),
        "barbier": ("réservation", "produits", "techniques"),
    },
    "artisan": {
        "menuiserie": ("portfolio", "devis", "matériaux"),
        "ferronnerie": ("créations", "forge", "architectural"),
        "céramique": ("oeuvres", "ateliers", "expositions"),
    },
    "medical": {
        "généraliste": ("rdv", "téléconsultation", "équipe"),
        "dentiste": ("soins", "imagerie", "esthétique"),
        "kiné": ("thérapies", "rééducation", "suivi"),
    },
}

GOAL_FEATURES: dict[str, tuple[str, ...]] = {
    "augmenter-visibilite": ("seo", "réseaux", "blog"),
    "generer-leads": ("contact", "devis", "formulaire"),
    "vendre-en-ligne": ("boutique", "paiement", "commande"),
    "fideliser-clients": ("fidélité", "newsletter", "avis"),
}

BASE_QUICK_OPTIMIZATIONS = (
    "Boutons d'action optimisés couleur et placement",
    "Formulaires simplifiés 3 champs max",
    "Témoignages clients en évidence",
    "Garanties et certifications visibles",
)

SECTOR_QUICK_OPTIMIZATIONS: dict[str, tuple[str, ...]] = {
    "restaurant": (
        "Menu avec prix et photos appétissantes",
        "Bouton réservation fixe en mobile",
        "Avis Google intégrés temps réel",
        "Click-to-call pour commandes",
    ),
    "beaute": (
        "Galerie avant/après prominente",
        "Booking en ligne simplifié",
        "Tarifs transparents affichés",
        "Équipe avec photos et spécialités",
    ),
    "artisan": (
        "Portfolio réalisations en hero",
        "Devis gratuit en 1 clic",
        "Certifications et labels qualité",
        "Zone d'intervention claire",
    ),
    "medical": (
        "Prise RDV ultra-simplifiée",
        "Informations rassurantes RGPD",
        "Urgences contact évident",
        "Spécialités et équipe médicale",
    ),
}

TIMEFRAME_HOURS = {"express": 8, "standard": 24, "custom": 72}
STYLE_COMPLEXITY = {"luxury": 1.5, "premium": 1.3, "modern": 1.0, "elegant": 1.2, "professional": 1.1}

SECTOR_BRAND_COLORS = {
    "restaurant": ("#D2691E", "#8B4513"),
    "beaute": ("#FF69B4", "#DDA0DD"),
    "artisan": ("#8B4513", "#D2691E"),
    "medical": ("#008B8B", "#20B2AA"),
}
STYLE_BRAND_SECONDARY = {
    "luxury": "#D4AF37",
    "premium": "#4169E1",
    "modern": "#32CD32",
    "elegant": "#9370DB",
    "professional": "#2F4F4F",
}
LOGO_ELEMENTS = {
    "restaurant": ("fourchette", "assiette", "chef hat", "étoile"),
    "beaute": ("ciseaux", "miroir", "fleur", "papillon"),
    "artisan": ("outils", "mains", "engrenage", "marteau"),
    "medical": ("croix", "stéthoscope", "caducée", "coeur"),
}
LOGO_STYLES = {
    "luxury": "emblème doré",
    "modern": "minimaliste géométrique",
    "elegant": "calligraphie raffinée",
}
PHOTO_CATEGORIES = {
    "restaurant": ("plats signature", "ambiance restaurant", "équipe cuisine"),
    "beaute": ("transformations avant/après", "salon moderne", "équipe stylistes"),
    "artisan": ("réalisations portfolio", "atelier travail", "artisan action"),
    "medical": ("cabinet moderne", "équipe médicale", "équipements"),
}
PHOTO_MOODS = {
    "luxury": "sophistiqué premium",
    "modern": "contemporain dynamique",
    "elegant": "raffiné chaleureux",
}

_NUMBER_RE = re.compile(r"-?\d+(?:[.,]\d+)?")


def parse_number(text: str, default: float = 0.0) -> float:
    """First number found in a stats string: "+45%" -> 45.0, "0.7s" -> 0.7."""
    match = _NUMBER_RE.search(text or "")
    if not match:
        return default
    return float(match.group(0).replace(",", "."))


def parse_conversion_rate(text: str) -> float:
    return parse_number(text)


def required_features(requirements: BusinessRequirements) -> list[str]:
    features: list[str] = []
    subtypes = SUBTYPE_FEATURES.get(requirements.sector.value, {})
    features.extend(subtypes.get(requirements.business_type, ()))
    for goal in requirements.business_goals:
        features.extend(GOAL_FEATURES.get(goal, ()))
    return features


def style_score(template_style: str, preferred_style: str) -> float:
    if template_style == preferred_style:
        return 1.0
    return STYLE_COMPATIBILITY.get(template_style, {}).get(preferred_style, 0.0)


def budget_score(template_style: str, budget: str) -> float:
    return 1.0 if template_style in BUDGET_STYLES.get(budget, frozenset()) else 0.5


def feature_score(template: Template, features: list[str]) -> float:
    if not features:
        return 0.5
    labels = [label.lower() for label in template.features]
    matched = sum(1 for feature in features if any(feature.lower() in label for label in labels))
    return matched / len(features)


def _load_time_score(seconds: float) -> float:
    if seconds <= 0.5:
        return 1.0
    if seconds <= 0.7:
        return 0.8
    if seconds <= 1.0:
        return 0.6
    return 0.4


def _conversion_score(rate: float) -> float:
    if rate >= 60:
        return 1.0
    if rate >= 50:
        return 0.9
    if rate >= 40:
        return 0.8
    if rate >= 30:
        return 0.6
    return 0.4


def performance_score(template: Template) -> float:
    lighthouse = template.stats.lighthouse / 100
    load_time = _load_time_score(parse_number(template.stats.load_time, default=float("inf")))
    conversion = _conversion_score(parse_conversion_rate(template.stats.conversion_rate))
    return (lighthouse + load_time + conversion) / 3


def score_template(template: Template, requirements: BusinessRequirements) -> TemplateScore:
    breakdown = ScoreBreakdown(
        style=style_score(template.design_style.value, requirements.preferred_style.value),
        budget=budget_score(template.design_style.value, requirements.budget.value),
        features=feature_score(template, required_features(requirements)),
        performance=performance_score(template),
    )
    total = (
        breakdown.style * STYLE_WEIGHT
        + breakdown.budget * BUDGET_WEIGHT
        + breakdown.features * FEATURES_WEIGHT
        + breakdown.performance * PERFORMANCE_WEIGHT
    )
    score = max(0, min(100, round_half_up(total * 100)))
    return TemplateScore(template_id=template.id, score=score, breakdown=breakdown)


def estimate_delivery(timeframe: TimeframeEnum | str, style: DesignStyleEnum | str) -> str:
    timeframe_key = timeframe.value if isinstance(timeframe, TimeframeEnum) else str(timeframe)
    style_key = style.value if isinstance(style, DesignStyleEnum) else str(style)
    hours = TIMEFRAME_HOURS.get(timeframe_key, TIMEFRAME_HOURS["standard"]) * STYLE_COMPLEXITY.get(style_key, 1.0)
    if hours <= 12:
        return f"{round_half_up(hours)}h"
    days = round_half_up(hours / 24)
    if hours <= 48:
        return f"{days} jour{'s' if hours > 24 else ''}"
    return f"{days} jours"


def quick_optimizations(sector: SectorEnum | str) -> list[str]:
    sector_key = sector.value if isinstance(sector, SectorEnum) else str(sector)
    return [*BASE_QUICK_OPTIMIZATIONS, *SECTOR_QUICK_OPTIMIZATIONS.get(sector_key, ())]


def brand_direction(requirements: BusinessRequirements) -> BrandDirection:
    sector = requirements.sector.value
    style = requirements.preferred_style.value
    primary, accent = SECTOR_BRAND_COLORS.get(sector, SECTOR_BRAND_COLORS["medical"])
    return BrandDirection(
        colors=ColorDirection(
            primary=primary,
            secondary=STYLE_BRAND_SECONDARY.get(style, STYLE_BRAND_SECONDARY["professional"]),
            accent=accent,
            reasoning=f"Palette {sector} adaptée au style {style} pour inspirer confiance et conversion",
        ),
        logo=LogoDirection(
            style=LOGO_STYLES.get(style, "professionnel équilibré"),
            elements=LOGO_ELEMENTS.get(sector, ()),
            reasoning=f"Logo {style} intégrant les codes visuels du secteur {sector}",
        ),
        photos=PhotoDirection(
            categories=PHOTO_CATEGORIES.get(sector, ()),
            mood=PHOTO_MOODS.get(style, "professionnel rassurant"),
            reasoning=f"Photos authentiques valorisant l'expertise {sector}",
        ),
    )


def neutral_business_info(requirements: BusinessRequirements) -> BusinessInfo:
    return BusinessInfo(name=requirements.business_type, sector=requirements.sector, city="France", description="")


class TemplateSelector:
    """Ranks sector templates against requirements and builds the selection result."""

    def __init__(
        self,
        catalog: Optional[TemplateCatalog] = None,
        customization_generator: Optional[CustomizationGenerator] = None,
    ) -> None:
        self._catalog = catalog or load_catalog()
        self._customization = customization_generator or CustomizationGenerator()

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    def rank(self, requirements: BusinessRequirements) -> list[tuple[Template, TemplateScore]]:
        candidates = self._catalog.by_sector(requirements.sector)
        if not candidates:
            raise TemplateNotFoundError(requirements.sector.value)
        scored = [(template, score_template(template, requirements)) for template in candidates]
        scored.sort(key=lambda pair: (-pair[1].score, pair[0].id))
        return scored

    def select_optimal_template(
        self,
        requirements: BusinessRequirements,
        business_info: Optional[BusinessInfo] = None,
    ) -> SmartSelectionResult:
        ranked = self.rank(requirements)
        primary, primary_score = ranked[0]
        alternatives = tuple(template for template, _ in ranked[1:4])

        info = business_info or neutral_business_info(requirements)
        customization = self._customization.generate_customization(
            info, requirements.preferred_style, requirements.target_audience
        )
        delivery = estimate_delivery(requirements.timeframe, requirements.preferred_style)
        reasoning = (
            f"Template '{primary.name}' sélectionné avec un score de {primary_score.score}/100 "
            f"pour le secteur {requirements.sector.value} en style {requirements.preferred_style.value}. "
            f"Performance Lighthouse {primary.stats.lighthouse}/100, conversion {primary.stats.conversion_rate}. "
            f"Livraison estimée: {delivery}."
        )
        logger.info(
            "template_selection.selected",
            extra={
                "sector": requirements.sector.value,
                "template_id": primary.id,
                "match_score": primary_score.score,
                "candidates": len(ranked),
            },
        )
        return SmartSelectionResult(
            primary_template=primary,
            alternative_templates=alternatives,
            match_score=primary_score.score,
            customization=customization,
            conversion_optimizations=tuple(quick_optimizations(requirements.sector)),
            estimated_delivery=delivery,
            reasoning=reasoning,
            ranking=tuple(score for _, score in ranked),
            brand_direction=brand_direction(requirements),
        )
