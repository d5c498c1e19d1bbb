import pytest

from design_studio.errors import TemplateNotFoundError
from design_studio.schemas.business import BusinessInfo, BusinessRequirements
from design_studio.schemas.templates import Template
from design_studio.services.catalog import TemplateCatalog
from design_studio.services.template_selection import (
    TemplateSelector,
    budget_score,
    estimate_delivery,
    feature_score,
    neutral_business_info,
    parse_conversion_rate,
    performance_score,
    required_features,
    style_score,
)


def _template(template_id: str, **overrides) -> Template:
    data = {
        "id": template_id,
        "name": template_id.replace("-", " ").title(),
        "sector": "restaurant",
        "designType": "modern",
        "features": ["Menu interactif", "Réservation en ligne", "Avis clients"],
        "colors": {"primary": "#111111", "secondary": "#222222", "accent": "#333333"},
        "stats": {"loadTime": "0.4s", "lighthouse": 100, "conversionRate": "+73%"},
    }
    data.update(overrides)
    return Template.model_validate(data)


def test_selection_only_returns_requested_sector(catalog, requirements):
    result = TemplateSelector(catalog).select_optimal_template(requirements)

    assert result.primary_template.sector == requirements.sector
    assert all(template.sector == requirements.sector for template in result.alternative_templates)
    assert isinstance(result.match_score, int)
    assert 0 <= result.match_score <= 100


def test_ranking_is_non_increasing_and_primary_is_first(catalog, requirements):
    result = TemplateSelector(catalog).select_optimal_template(requirements)
    scores = [entry.score for entry in result.ranking]

    assert scores == sorted(scores, reverse=True)
    assert result.ranking[0].template_id == result.primary_template.id
    assert result.match_score == scores[0]
    assert [t.id for t in result.alternative_templates] == [entry.template_id for entry in result.ranking[1:4]]
    assert len(result.ranking) == len(catalog.by_sector("restaurant"))


def test_restaurant_modern_premium_prefers_compatible_styles(catalog):
    requirements = BusinessRequirements(
        sector="restaurant",
        business_type="restaurant",
        preferred_style="modern",
        budget="premium",
        timeframe="standard",
    )
    result = TemplateSelector(catalog).select_optimal_template(requirements)
    best_style_score = max(
        style_score(template.design_style.value, "modern") for template in catalog.by_sector("restaurant")
    )

    assert best_style_score == 1.0
    assert result.ranking[0].breakdown.style >= 0.7
    assert isinstance(result.match_score, int)


def test_ties_are_broken_by_template_id():
    catalog = TemplateCatalog([_template("zeta-bistro"), _template("alpha-bistro")])
    requirements = BusinessRequirements(
        sector="restaurant",
        business_type="bistrot",
        preferred_style="modern",
        budget="standard",
        timeframe="standard",
    )

    result = TemplateSelector(catalog).select_optimal_template(requirements)

    assert result.ranking[0].score == result.ranking[1].score
    assert result.primary_template.id == "alpha-bistro"


def test_unknown_sector_subset_raises_not_found():
    catalog = TemplateCatalog([_template("only-restaurant")])
    requirements = BusinessRequirements(
        sector="medical",
        business_type="dentiste",
        preferred_style="professional",
        budget="standard",
        timeframe="standard",
    )

    with pytest.raises(TemplateNotFoundError) as excinfo:
        TemplateSelector(catalog).select_optimal_template(requirements)

    assert excinfo.value.sector == "medical"


def test_sub_scores():
    assert style_score("luxury", "luxury") == 1.0
    assert style_score("luxury", "premium") == 0.8
    assert style_score("professional", "premium") == 0.9
    assert budget_score("modern", "standard") == 1.0
    assert budget_score("luxury", "standard") == 0.5


def test_feature_alignment_uses_case_insensitive_substrings():
    template = _template("bistro")
    requirements = BusinessRequirements(
        sector="restaurant",
        business_type="Bistrot",
        preferred_style="modern",
        budget="standard",
        timeframe="standard",
    )

    features = required_features(requirements)

    assert features == ["menu", "réservation", "galerie"]
    assert feature_score(template, features) == pytest.approx(2 / 3)
    assert feature_score(template, []) == 0.5


def test_required_features_include_goals():
    requirements = BusinessRequirements(
        sector="artisan",
        business_type="menuiserie",
        business_goals=["vendre-en-ligne", "vendre-en-ligne"],
        preferred_style="professional",
        budget="standard",
        timeframe="standard",
    )

    assert required_features(requirements) == ["portfolio", "devis", "matériaux", "boutique", "paiement", "commande"]


def test_performance_score_steps():
    assert performance_score(_template("fast")) == pytest.approx(1.0)
    slow = _template("slow", stats={"loadTime": "1.4s", "lighthouse": 70, "conversionRate": "+20%"})
    assert performance_score(slow) == pytest.approx((0.7 + 0.4 + 0.4) / 3)


@pytest.mark.parametrize("raw", ["+45%", "45%", "45"])
def test_conversion_rate_parsing(raw):
    assert parse_conversion_rate(raw) == 45


@pytest.mark.parametrize(
    ("timeframe", "style", "expected"),
    [
        ("express", "modern", "8h"),
        ("express", "luxury", "12h"),
        ("standard", "modern", "1 jour"),
        ("standard", "luxury", "2 jours"),
        ("custom", "modern", "3 jours"),
    ],
)
def test_estimated_delivery(timeframe, style, expected):
    assert estimate_delivery(timeframe, style) == expected


def test_selection_carries_quick_list_brand_direction_and_customization(catalog, requirements, business_info):
    result = TemplateSelector(catalog).select_optimal_template(requirements, business_info)

    assert result.conversion_optimizations[0] == "Boutons d'action optimisés couleur et placement"
    assert "Bouton réservation fixe en mobile" in result.conversion_optimizations
    assert len(result.conversion_optimizations) == 8
    assert result.brand_direction.logo.style == "minimaliste géométrique"
    assert "fourchette" in result.brand_direction.logo.elements
    assert result.brand_direction.colors.primary == "#D2691E"
    assert "Lyon" in result.customization.photos.hero.keywords
    assert result.primary_template.name in result.reasoning
    assert result.estimated_delivery == "1 jour"


def test_selection_without_business_info_uses_neutral_profile(catalog, requirements):
    result = TemplateSelector(catalog).select_optimal_template(requirements)

    assert result.customization.layout.header == "sticky"
    assert "bistrot" not in result.customization.photos.hero.keywords


def test_neutral_profile_name_comes_from_business_type(requirements):
    info = neutral_business_info(requirements)

    assert isinstance(info, BusinessInfo)
    assert info.name == "bistrot"
    assert info.sector == requirements.sector
