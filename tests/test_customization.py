import re

import pytest

from design_studio.schemas.business import BusinessInfo
from design_studio.services import colors
from design_studio.services.customization import CustomizationGenerator, extract_description_keywords, find_color_keyword

HEX_PATTERN = re.compile(r"^#[0-9A-F]{6}$")


def _info(**overrides) -> BusinessInfo:
    data = {"name": "Chez Marcel", "sector": "restaurant", "city": "Lyon", "description": ""}
    data.update(overrides)
    return BusinessInfo(**data)


def test_generation_is_deterministic(business_info):
    generator = CustomizationGenerator()

    first = generator.generate_customization(business_info, "modern", "familles")
    second = generator.generate_customization(business_info, "modern", "familles")

    assert first.model_dump_json() == second.model_dump_json()


def test_color_keyword_overrides_blend():
    palette = CustomizationGenerator().generate_customization(
        _info(name="Le Comptoir", description="je veux du bleu partout"), "luxury"
    ).colors

    assert palette.primary == "#2563EB"
    assert palette.secondary == "#60A5FA"
    assert palette.accent == "#93C5FD"


def test_keyword_in_name_wins_in_table_order():
    palette = CustomizationGenerator().generate_customization(
        _info(name="Le Rouge et le Vert"), "modern"
    ).colors

    assert palette.primary == "#DC2626"


def test_keywords_match_whole_words_only():
    assert find_color_keyword("Boulangerie dorée du coin") is None
    assert find_color_keyword("Atelier Or et Argent") == ("#D97706", "#FBBF24", "#FCD34D")
    assert find_color_keyword("GREEN garden") == ("#059669", "#34D399", "#6EE7B7")
    assert find_color_keyword("Ouvert pour vous") is None


@pytest.mark.parametrize(
    ("description", "primary"),
    [
        ("la maison bleue", "#2563EB"),
        ("des volets rouges", "#DC2626"),
        ("une façade verte", "#059669"),
        ("jardins verts et volets bleus", "#2563EB"),
    ],
)
def test_inflected_color_keywords_override_blend(description, primary):
    palette = CustomizationGenerator().generate_customization(
        _info(name="Le Comptoir", description=description), "luxury"
    ).colors

    assert palette.primary == primary


def test_blend_is_seventy_thirty_and_rotations_differ():
    palette = CustomizationGenerator().generate_customization(_info(), "modern").colors

    assert palette.primary == "#A28724"
    assert palette.secondary != palette.primary
    assert palette.accent != palette.primary
    assert palette.secondary != palette.accent
    for value in (palette.primary, palette.secondary, palette.accent, palette.neutral):
        assert HEX_PATTERN.match(value)


def test_palette_shades_follow_style():
    generator = CustomizationGenerator()
    luxury = generator.generate_customization(_info(), "luxury").colors
    modern = generator.generate_customization(_info(), "modern").colors

    assert luxury.text.primary == "#1A1A1A"
    assert luxury.background.secondary == "#FAFAFA"
    assert luxury.neutral == "#8B8B8B"
    assert modern.text.primary == "#111827"
    assert modern.background.secondary == "#F9FAFB"
    assert (modern.success, modern.warning, modern.error) == ("#10B981", "#F59E0B", "#EF4444")


def test_fonts_fall_back_to_professional_entry():
    generator = CustomizationGenerator()

    medical = generator.generate_customization(_info(sector="medical"), "premium").fonts
    restaurant = generator.generate_customization(_info(), "premium").fonts
    luxury = generator.generate_customization(_info(), "luxury").fonts

    assert (medical.primary, medical.secondary, medical.accent) == ("Helvetica", "Arial", "Helvetica Light")
    assert restaurant.primary == "Roboto Slab"
    assert luxury.primary == "Playfair Display"


def test_spacing_animation_and_layout_profiles():
    result = CustomizationGenerator().generate_customization(_info(sector="beaute"), "luxury")

    assert result.spacing.sections == "6rem"
    assert result.animations.type == "elegant"
    assert result.animations.speed == "slow"
    assert "gold-shimmer" in result.animations.effects
    assert result.layout.header == "fixed"
    assert result.layout.sections[0] == "hero"
    assert "booking" in result.layout.sections


def test_photo_configuration(business_info):
    photos = CustomizationGenerator().generate_customization(business_info, "modern").photos

    assert photos.hero.category == "food-dining"
    assert photos.hero.mood == "appetizing-dynamic"
    assert photos.hero.style == "contemporary"
    assert photos.hero.keywords[:6] == ("restaurant", "cuisine", "plat", "ambiance", "Lyon", "modern")
    assert photos.hero.keywords[6:] == ("bistrot", "familial", "cuisine", "maison", "produits")
    assert photos.gallery.count == 8
    assert photos.team.setting == "kitchen-dining"
    assert photos.products.lighting == "natural-warm"


def test_description_keywords_skip_short_and_stop_words():
    assert extract_description_keywords("Tout pour vous dans notre salon avec amour") == ["vous", "notre", "salon", "amour"]


def test_color_helpers():
    assert colors.mix("#FFFFFF", "#000000", 0.7) == "#B3B3B3"
    assert colors.rotate_hue("#ff0000", 120) == "#00FF00"
    assert colors.rotate_hue("#808080", 30) == "#808080"
    assert colors.is_achromatic("#808080")
    assert colors.normalize_hex("abcdef") == "#ABCDEF"
    with pytest.raises(ValueError):
        colors.hex_to_rgb("#12345")
