from __future__ import annotations

import logging
from typing import Any

from design_studio.domain.taxonomy import IMPACT_WEIGHTS, SectorEnum
from design_studio.schemas.business import BusinessInfo
from design_studio.schemas.optimization import (
    ConversionOptimization,
    HeroOptimization,
    OptimizationReport,
    PerformanceOptimization,
)
from design_studio.schemas.templates import Template
from design_studio.services.colors import round_half_up
from design_studio.services.template_selection import parse_conversion_rate

logger = logging.getLogger(__name__)

ALL_SECTORS = tuple(sector.value for sector in SectorEnum)

_GENERIC_OPTIMIZATIONS: tuple[dict[str, Any], ...] = (
    {
        "id": "hero-cta-optimization",
        "type": "cta",
        "title": "Optimisation CTA Principal",
        "description": "CTA hero avec contraste élevé, action claire et placement optimal",
        "impact": "critical",
        "implementation": "Bouton 40% plus large, couleur contrastée, texte orienté action",
        "expected_gain": "+25% clics",
        "priority": 10,
        "sectors": ALL_SECTORS,
    },
    {
        "id": "mobile-first-design",
        "type": "layout",
        "title": "Design Mobile-First",
        "description": "Interface optimisée pour mobile avec navigation tactile",
        "impact": "critical",
        "implementation": "Navigation bottom bar, boutons touch-friendly, contenu priorisé",
        "expected_gain": "+35% conversion mobile",
        "priority": 9,
        "sectors": ALL_SECTORS,
    },
    {
        "id": "social-proof-integration",
        "type": "trust",
        "title": "Preuves Sociales Intégrées",
        "description": "Avis, témoignages et statistiques en évidence",
        "impact": "high",
        "implementation": "Widget avis temps réel, compteur clients, témoignages rotatifs",
        "expected_gain": "+18% confiance",
        "priority": 8,
        "sectors": ALL_SECTORS,
    },
)

_SECTOR_OPTIMIZATIONS: dict[str, tuple[dict[str, Any], ...]] = {
    "restaurant": (
        {
            "id": "menu-visual-optimization",
            "type": "content",
            "title": "Menu Visuel Optimisé",
            "description": "Photos plats HD avec prix et descriptions appétissantes",
            "impact": "high",
            "implementation": "Photos professionnelles, descriptions sensorielles, prix visibles",
            "expected_gain": "+30% commandes",
            "priority": 9,
        },
        {
            "id": "reservation-widget",
            "type": "form",
            "title": "Widget Réservation Simplifié",
            "description": "Booking en 2 clics avec disponibilités temps réel",
            "impact": "critical",
            "implementation": "Calendrier interactif, confirmation immédiate, rappels SMS",
            "expected_gain": "+45% réservations",
            "priority": 10,
        },
    ),
    "beaute": (
        {
            "id": "before-after-gallery",
            "type": "content",
            "title": "Galerie Avant/Après",
            "description": "Transformations clientes en slider interactif",
            "impact": "high",
            "implementation": "Slider comparaison, filtres par service, zoom HD",
            "expected_gain": "+28% prises RDV",
            "priority": 9,
        },
        {
            "id": "online-booking-beauty",
            "type": "form",
            "title": "Réservation Beauté Intelligente",
            "description": "Booking avec sélection service, durée et styliste",
            "impact": "critical",
            "implementation": "Configurateur service, agenda styliste, tarifs dynamiques",
            "expected_gain": "+40% bookings",
            "priority": 10,
        },
    ),
    "artisan": (
        {
            "id": "portfolio-showcase",
            "type": "content",
            "title": "Portfolio Showcase 3D",
            "description": "Réalisations en galerie interactive avec détails projet",
            "impact": "high",
            "implementation": "Galerie 3D, filtres matériaux, temps réalisation, tarifs",
            "expected_gain": "+35% demandes devis",
            "priority": 9,
        },
        {
            "id": "instant-quote-form",
            "type": "form",
            "title": "Devis Express Intelligent",
            "description": "Formulaire devis avec estimation prix temps réel",
            "impact": "critical",
            "implementation": "Configurateur projet, calcul automatique, rendez-vous intégré",
            "expected_gain": "+50% demandes devis",
            "priority": 10,
        },
    ),
    "medical": (
        {
            "id": "medical-appointment-system",
            "type": "form",
            "title": "Système RDV Médical Sécurisé",
            "description": "Prise RDV conforme RGPD avec téléconsultation",
            "impact": "critical",
            "implementation": "Agenda médical, conformité RGPD, téléconsultation intégrée",
            "expected_gain": "+60% prises RDV",
            "priority": 10,
        },
        {
            "id": "medical-trust-signals",
            "type": "trust",
            "title": "Signaux Confiance Médicaux",
            "description": "Diplômes, certifications et affiliations en évidence",
            "impact": "high",
            "implementation": "Certificats numériques, affiliations ordres, spécialités",
            "expected_gain": "+25% confiance patients",
            "priority": 8,
        },
    ),
}

_STYLE_OPTIMIZATIONS: dict[str, tuple[dict[str, Any], ...]] = {
    "luxury": (
        {
            "id": "luxury-exclusivity",
            "type": "content",
            "title": "Messages Exclusivité Premium",
            "description": "Contenus VIP et expérience haut de gamme",
            "impact": "high",
            "implementation": "Sections VIP, services exclusifs, tarification premium",
            "expected_gain": "+20% clients premium",
            "priority": 7,
        },
    ),
    "modern": (
        {
            "id": "modern-interactivity",
            "type": "layout",
            "title": "Éléments Interactifs Modernes",
            "description": "Animations et micro-interactions engageantes",
            "impact": "medium",
            "implementation": "Hover effects, transitions fluides, feedback visuel",
            "expected_gain": "+15% engagement",
            "priority": 6,
        },
    ),
}

_SECTOR_PSYCHOLOGY: dict[str, tuple[tuple[str, ...], str]] = {
    "restaurant": (("appétit", "convivialité", "tradition"), "Réservez maintenant, places limitées"),
    "beaute": (("transformation", "confiance", "bien-être"), "Offre limitée ce mois-ci"),
    "artisan": (("savoir-faire", "authentique", "sur-mesure"), "Devis gratuit sous 24h"),
    "medical": (("confiance", "expertise", "soin"), "Consultations disponibles cette semaine"),
}
_AUDIENCE_PSYCHOLOGY = ("local", "proximité")

_TITLE_TEMPLATES = {
    "restaurant": "{name} - {hook} {city}",
    "beaute": "{name} - Votre {hook} à {city}",
    "artisan": "{name} - {hook} artisanal {city}",
    "medical": "{name} - Soins {hook} {city}",
}

_SECTOR_BENEFITS = {
    "restaurant": ("Cuisine authentique", "Ambiance chaleureuse", "Produits frais"),
    "beaute": ("Équipe experte", "Produits premium", "Résultats garantis"),
    "artisan": ("Travail sur mesure", "Matériaux nobles", "Expertise reconnue"),
    "medical": ("Soins personnalisés", "Équipe qualifiée", "Matériel moderne"),
}

PRIMARY_CTA = {
    "restaurant": "Réserver une table",
    "beaute": "Prendre rendez-vous",
    "artisan": "Demander un devis",
    "medical": "Prendre rendez-vous",
}

_BACKGROUND_STRATEGIES = {
    "luxury": "video-premium",
    "premium": "image-overlay",
    "modern": "gradient-dynamic",
    "elegant": "image-subtle",
    "professional": "solid-clean",
}

_PERFORMANCE_OPTIMIZATIONS = (
    PerformanceOptimization(
        type="loading",
        description="Lazy loading images et compression optimisée",
        implementation="WebP images, lazy loading, critical CSS",
        impact="+40% vitesse chargement",
    ),
    PerformanceOptimization(
        type="seo",
        description="Optimisation SEO technique complète",
        implementation="Schema markup, meta optimisées, sitemap",
        impact="+60% visibilité Google",
    ),
)


def sort_optimizations(optimizations: list[ConversionOptimization]) -> list[ConversionOptimization]:
    # sorted() is stable, so equal (impact, priority) pairs keep generation order.
    return sorted(optimizations, key=lambda opt: (-IMPACT_WEIGHTS[opt.impact], -opt.priority))


def compute_quality_score(template: Template, optimizations: list[ConversionOptimization]) -> int:
    base = parse_conversion_rate(template.stats.conversion_rate)
    bonus = sum(IMPACT_WEIGHTS[opt.impact] for opt in optimizations)
    return max(0, min(100, round_half_up(base + bonus)))


class ConversionOptimizer:
    """Builds the prioritized conversion recommendations for a chosen template."""

    def optimize_template(
        self,
        template: Template,
        business_info: BusinessInfo,
        audience: str = "",
    ) -> OptimizationReport:
        candidates = [
            *self._generic_optimizations(),
            *self._sector_optimizations(business_info),
            *self._style_optimizations(template),
            *self._business_optimizations(business_info),
        ]
        optimizations = sort_optimizations(candidates)
        quality_score = compute_quality_score(template, optimizations)
        logger.debug(
            "conversion_optimizer.optimized",
            extra={
                "template_id": template.id,
                "optimization_count": len(optimizations),
                "quality_score": quality_score,
            },
        )
        return OptimizationReport(
            optimizations=tuple(optimizations),
            quality_score=quality_score,
            hero=self._optimize_hero(template, business_info, audience),
            performance_optimizations=_PERFORMANCE_OPTIMIZATIONS,
        )

    def _generic_optimizations(self) -> list[ConversionOptimization]:
        return [ConversionOptimization(**entry) for entry in _GENERIC_OPTIMIZATIONS]

    def _sector_optimizations(self, business_info: BusinessInfo) -> list[ConversionOptimization]:
        sector = business_info.sector.value
        return [
            ConversionOptimization(**entry, sectors=(sector,))
            for entry in _SECTOR_OPTIMIZATIONS.get(sector, ())
        ]

    def _style_optimizations(self, template: Template) -> list[ConversionOptimization]:
        return [
            ConversionOptimization(**entry, sectors=(template.sector.value,))
            for entry in _STYLE_OPTIMIZATIONS.get(template.design_style.value, ())
        ]

    def _business_optimizations(self, business_info: BusinessInfo) -> list[ConversionOptimization]:
        city = business_info.city
        return [
            ConversionOptimization(
                id="local-seo-optimization",
                type="seo",
                title=f"Optimisation SEO Local {city}",
                description="Référencement local optimisé pour votre ville",
                impact="high",
                implementation=f"Schema local business, mots-clés {city}, Google My Business",
                expected_gain="+40% visibilité locale",
                priority=8,
                sectors=(business_info.sector.value,),
            )
        ]

    def _optimize_hero(self, template: Template, business_info: BusinessInfo, audience: str) -> HeroOptimization:
        sector = business_info.sector.value
        hooks, urgency = _SECTOR_PSYCHOLOGY.get(sector, _SECTOR_PSYCHOLOGY["medical"])
        title = _TITLE_TEMPLATES.get(sector, _TITLE_TEMPLATES["medical"]).format(
            name=business_info.name, hook=hooks[0], city=business_info.city
        )
        subtitle = business_info.description or f"Découvrez notre expertise {hooks[0]} à {business_info.city}"
        return HeroOptimization(
            title_template=title,
            title_psychology=(*hooks, *_AUDIENCE_PSYCHOLOGY),
            subtitle=subtitle,
            benefits=_SECTOR_BENEFITS.get(sector, ()),
            urgency=urgency,
            cta_text=PRIMARY_CTA.get(sector, "Nous contacter"),
            cta_color=template.colors.primary,
            background_strategy=_BACKGROUND_STRATEGIES.get(
                template.design_style.value, _BACKGROUND_STRATEGIES["professional"]
            ),
        )
