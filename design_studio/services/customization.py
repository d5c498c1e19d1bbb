from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from design_studio.domain.taxonomy import DesignStyleEnum, SectorEnum
from design_studio.schemas.business import BusinessInfo
from design_studio.schemas.customization import (
    AnimationProfile,
    BackgroundShades,
    ColorPalette,
    CustomizationResult,
    FontSystem,
    GalleryPhotoConfig,
    HeroPhotoConfig,
    LayoutProfile,
    PhotoConfiguration,
    ProductPhotoConfig,
    SpacingProfile,
    TeamPhotoConfig,
    TextShades,
)
from design_studio.services import colors

logger = logging.getLogger(__name__)

_SECTOR_BASE_PRIMARY = {
    "restaurant": "#D2691E",
    "beaute": "#FF69B4",
    "artisan": "#8B4513",
    "medical": "#008B8B",
}

# primary / secondary / accent
_STYLE_ADJUSTMENTS = {
    "luxury": ("#1A1A1A", "#D4AF37", "#8B0000"),
    "premium": ("#4169E1", "#87CEEB", "#00BFFF"),
    "modern": ("#32CD32", "#90EE90", "#228B22"),
    "elegant": ("#9370DB", "#DDA0DD", "#BA55D3"),
    "professional": ("#2F4F4F", "#708090", "#B22222"),
}

# Checked in order; first match wins. Inflected forms (bleue, rouges, vertes) count, "or" stays whole-word.
_COLOR_KEYWORDS: tuple[tuple[re.Pattern[str], tuple[str, str, str]], ...] = (
    (re.compile(r"\b(?:rouge|red)s?\b"), ("#DC2626", "#F87171", "#FCA5A5")),
    (re.compile(r"\b(?:bleu|blue)(?:e|s|es)?\b"), ("#2563EB", "#60A5FA", "#93C5FD")),
    (re.compile(r"\b(?:vert|green)(?:e|s|es)?\b"), ("#059669", "#34D399", "#6EE7B7")),
    (re.compile(r"\b(?:or|gold)\b"), ("#D97706", "#FBBF24", "#FCD34D")),
)

_NEUTRALS = {
    "luxury": "#8B8B8B",
    "premium": "#6B7280",
    "modern": "#9CA3AF",
    "elegant": "#6B7280",
    "professional": "#4B5563",
}

_FONTS: dict[str, dict[str, tuple[str, str, str]]] = {
    "restaurant": {
        "luxury": ("Playfair Display", "Lato", "Dancing Script"),
        "elegant": ("Crimson Text", "Source Sans Pro", "Italianno"),
        "modern": ("Montserrat", "Open Sans", "Pacifico"),
        "professional": ("Roboto Slab", "Roboto", "Kalam"),
    },
    "beaute": {
        "luxury": ("Bodoni Moda", "Lato", "Great Vibes"),
        "elegant": ("Cormorant Garamond", "Lato", "Alex Brush"),
        "modern": ("Poppins", "Inter", "Sacramento"),
        "professional": ("Source Serif Pro", "Source Sans Pro", "Parisienne"),
    },
    "artisan": {
        "luxury": ("Trajan Pro", "Avenir", "Brush Script MT"),
        "elegant": ("Minion Pro", "Myriad Pro", "Brush Script MT"),
        "modern": ("Helvetica Neue", "Helvetica", "Marker Felt"),
        "professional": ("Times New Roman", "Arial", "Courier New"),
    },
    "medical": {
        "luxury": ("Optima", "Avenir", "Avenir Light"),
        "professional": ("Helvetica", "Arial", "Helvetica Light"),
        "modern": ("San Francisco", "SF Pro Display", "SF Pro Text"),
        "elegant": ("Georgia", "Verdana", "Georgia Italic"),
    },
}
_DEFAULT_FONTS = ("Inter", "Inter", "Inter")

_STYLE_SPACING = {
    "luxury": ("6rem", "2rem", "8rem"),
    "premium": ("5rem", "1.5rem", "6rem"),
    "modern": ("4rem", "1rem", "4rem"),
    "elegant": ("5rem", "1.5rem", "6rem"),
    "professional": ("4rem", "1.25rem", "5rem"),
}
# Spacing varies by style only; every sector shares the style table.
_SPACING = {sector: dict(_STYLE_SPACING) for sector in _SECTOR_BASE_PRIMARY}
_DEFAULT_SPACING = ("4rem", "1.5rem", "5rem")

_STYLE_ANIMATIONS: dict[str, tuple[str, str, tuple[str, ...]]] = {
    "luxury": ("elegant", "slow", ("fade-in", "slide-up", "parallax", "gold-shimmer")),
    "premium": ("modern", "normal", ("fade-in", "slide-up", "scale", "blur-to-focus")),
    "modern": ("dynamic", "fast", ("slide-in", "bounce", "rotate", "color-shift")),
    "elegant": ("subtle", "slow", ("fade-in", "slide-up", "opacity-change")),
    "professional": ("subtle", "normal", ("fade-in", "slide-up")),
}
_ANIMATIONS = {sector: dict(_STYLE_ANIMATIONS) for sector in _SECTOR_BASE_PRIMARY}
_DEFAULT_ANIMATION = ("subtle", "normal", ("fade-in",))

# Layouts depend on the sector only, so each is stored under the sector's professional entry.
_LAYOUTS: dict[str, dict[str, tuple[str, str, tuple[str, ...]]]] = {
    "restaurant": {
        "professional": (
            "sticky",
            "contact-focused",
            ("hero", "menu-preview", "about", "gallery", "reservations", "contact"),
        )
    },
    "beaute": {
        "professional": ("fixed", "detailed", ("hero", "services", "gallery", "team", "booking", "contact"))
    },
    "artisan": {
        "professional": (
            "static",
            "minimal",
            ("hero", "portfolio", "services", "about", "testimonials", "contact"),
        )
    },
    "medical": {
        "professional": ("fixed", "contact-focused", ("hero", "services", "team", "appointments", "info", "contact"))
    },
}
_DEFAULT_LAYOUT = ("fixed", "minimal", ("hero", "services", "about", "contact"))

_SECTOR_PHOTO_RULES: dict[str, dict[str, Any]] = {
    "restaurant": {
        "hero": ("food-dining", "appetizing", ("restaurant", "cuisine", "plat", "ambiance")),
        "gallery": ("food-close-up", "restaurant-interior", "chef-action"),
        "team": ("professional-friendly", "kitchen-dining"),
        "products": ("natural-warm", "neutral-wood"),
    },
    "beaute": {
        "hero": ("beauty-salon", "elegant-relaxing", ("salon", "beauté", "soins", "détente")),
        "gallery": ("before-after", "salon-interior", "beauty-products"),
        "team": ("professional-caring", "salon-modern"),
        "products": ("soft-even", "clean-white"),
    },
    "artisan": {
        "hero": ("craftsmanship", "authentic-skilled", ("artisan", "création", "savoir-faire", "atelier")),
        "gallery": ("work-portfolio", "workshop-action", "finished-products"),
        "team": ("skilled-authentic", "workshop-traditional"),
        "products": ("natural-dramatic", "wood-texture"),
    },
    "medical": {
        "hero": ("healthcare", "professional-reassuring", ("médical", "soins", "santé", "cabinet")),
        "gallery": ("medical-equipment", "office-interior", "team-consultation"),
        "team": ("professional-trustworthy", "medical-office"),
        "products": ("clinical-clean", "medical-white"),
    },
}

# style, mood, team, products
_STYLE_PHOTO_RULES = {
    "luxury": ("high-end", "sophisticated", "executive", "premium"),
    "premium": ("professional", "polished", "business", "quality"),
    "modern": ("contemporary", "dynamic", "casual-pro", "sleek"),
    "elegant": ("refined", "graceful", "classic", "tasteful"),
    "professional": ("corporate", "reliable", "formal", "standard"),
}

_GALLERY_COUNTS = {"restaurant": 8, "beaute": 6, "artisan": 10, "medical": 4}
_DEFAULT_GALLERY_COUNT = 6

_STOP_WORDS = frozenset({"dans", "avec", "pour", "plus", "mais", "sont", "tout"})


def _value(tag: SectorEnum | DesignStyleEnum | str) -> str:
    return tag.value if hasattr(tag, "value") else str(tag)


def lookup_with_fallback(table: Mapping[str, Mapping[str, Any]], sector: str, style: str, default: Any) -> Any:
    """Resolve (sector, style): exact entry, then the sector's professional entry, then `default`."""
    sector_table = table.get(sector)
    if not sector_table:
        return default
    if style in sector_table:
        return sector_table[style]
    return sector_table.get("professional", default)


def find_color_keyword(text: str) -> tuple[str, str, str] | None:
    lowered = text.lower()
    for pattern, triple in _COLOR_KEYWORDS:
        if pattern.search(lowered):
            return triple
    return None


def extract_description_keywords(description: str, limit: int = 5) -> list[str]:
    words = [word for word in description.lower().split() if len(word) > 3 and word not in _STOP_WORDS]
    return words[:limit]


class CustomizationGenerator:
    """Turns business info plus a design style into a deterministic CustomizationResult."""

    def generate_customization(
        self,
        business_info: BusinessInfo,
        style: DesignStyleEnum | str,
        audience: str = "",
    ) -> CustomizationResult:
        sector = _value(business_info.sector)
        style_key = _value(style)
        result = CustomizationResult(
            colors=self._generate_colors(business_info, sector, style_key),
            photos=self._generate_photos(business_info, sector, style_key),
            fonts=self._generate_fonts(sector, style_key),
            spacing=self._generate_spacing(sector, style_key),
            animations=self._generate_animations(sector, style_key),
            layout=self._generate_layout(sector, style_key),
        )
        logger.debug(
            "customization.generated",
            extra={"sector": sector, "style": style_key, "primary": result.colors.primary, "audience": audience},
        )
        return result

    def _generate_colors(self, business_info: BusinessInfo, sector: str, style: str) -> ColorPalette:
        style_primary, style_secondary, style_accent = _STYLE_ADJUSTMENTS.get(
            style, _STYLE_ADJUSTMENTS["professional"]
        )
        override = find_color_keyword(f"{business_info.name} {business_info.description}")
        if override is not None:
            primary, secondary, accent = override
        else:
            sector_primary = _SECTOR_BASE_PRIMARY.get(sector, _SECTOR_BASE_PRIMARY["medical"])
            primary = colors.mix(sector_primary, style_primary, 0.7)
            secondary = colors.rotate_hue(primary, 30)
            accent = colors.rotate_hue(primary, 60)
            if colors.is_achromatic(primary) or primary in (secondary, accent):
                secondary = colors.normalize_hex(style_secondary)
                accent = colors.normalize_hex(style_accent)

        is_luxury = style == DesignStyleEnum.luxury.value
        return ColorPalette(
            primary=colors.normalize_hex(primary),
            secondary=colors.normalize_hex(secondary),
            accent=colors.normalize_hex(accent),
            neutral=_NEUTRALS.get(style, _NEUTRALS["professional"]),
            success="#10B981",
            warning="#F59E0B",
            error="#EF4444",
            text=TextShades(
                primary="#1A1A1A" if is_luxury else "#111827",
                secondary="#6B7280",
                muted="#9CA3AF",
            ),
            background=BackgroundShades(
                primary="#FFFFFF",
                secondary="#FAFAFA" if is_luxury else "#F9FAFB",
                tertiary="#F3F4F6",
            ),
        )

    def _generate_photos(self, business_info: BusinessInfo, sector: str, style: str) -> PhotoConfiguration:
        sector_rules = _SECTOR_PHOTO_RULES.get(sector, _SECTOR_PHOTO_RULES["medical"])
        photo_style, photo_mood, team_style, product_style = _STYLE_PHOTO_RULES.get(
            style, _STYLE_PHOTO_RULES["professional"]
        )
        hero_category, hero_mood, hero_keywords = sector_rules["hero"]
        keywords = [*hero_keywords]
        if business_info.city:
            keywords.append(business_info.city)
        keywords.append(style)
        keywords.extend(extract_description_keywords(business_info.description))

        team_mood, team_setting = sector_rules["team"]
        lighting, background = sector_rules["products"]
        return PhotoConfiguration(
            hero=HeroPhotoConfig(
                category=hero_category,
                mood=f"{hero_mood}-{photo_mood}",
                style=photo_style,
                keywords=tuple(keywords),
            ),
            gallery=GalleryPhotoConfig(
                categories=sector_rules["gallery"],
                count=_GALLERY_COUNTS.get(sector, _DEFAULT_GALLERY_COUNT),
                style=photo_style,
            ),
            team=TeamPhotoConfig(style=team_style, mood=team_mood, setting=team_setting),
            products=ProductPhotoConfig(style=product_style, lighting=lighting, background=background),
        )

    def _generate_fonts(self, sector: str, style: str) -> FontSystem:
        primary, secondary, accent = lookup_with_fallback(_FONTS, sector, style, _DEFAULT_FONTS)
        return FontSystem(primary=primary, secondary=secondary, accent=accent)

    def _generate_spacing(self, sector: str, style: str) -> SpacingProfile:
        sections, elements, containers = lookup_with_fallback(_SPACING, sector, style, _DEFAULT_SPACING)
        return SpacingProfile(sections=sections, elements=elements, containers=containers)

    def _generate_animations(self, sector: str, style: str) -> AnimationProfile:
        kind, speed, effects = lookup_with_fallback(_ANIMATIONS, sector, style, _DEFAULT_ANIMATION)
        return AnimationProfile(type=kind, speed=speed, effects=effects)

    def _generate_layout(self, sector: str, style: str) -> LayoutProfile:
        header, footer, sections = lookup_with_fallback(_LAYOUTS, sector, style, _DEFAULT_LAYOUT)
        return LayoutProfile(header=header, footer=footer, sections=sections)
