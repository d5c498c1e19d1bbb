from __future__ import annotations

from typing import Literal

from design_studio.schemas.base import FrozenApiModel


class TextShades(FrozenApiModel):
    primary: str
    secondary: str
    muted: str


class BackgroundShades(FrozenApiModel):
    primary: str
    secondary: str
    tertiary: str


class ColorPalette(FrozenApiModel):
    primary: str
    secondary: str
    accent: str
    neutral: str
    success: str
    warning: str
    error: str
    text: TextShades
    background: BackgroundShades


class HeroPhotoConfig(FrozenApiModel):
    category: str
    mood: str
    style: str
    keywords: tuple[str, ...]


class GalleryPhotoConfig(FrozenApiModel):
    categories: tuple[str, ...]
    count: int
    style: str


class TeamPhotoConfig(FrozenApiModel):
    style: str
    mood: str
    setting: str


class ProductPhotoConfig(FrozenApiModel):
    style: str
    lighting: str
    background: str


class PhotoConfiguration(FrozenApiModel):
    hero: HeroPhotoConfig
    gallery: GalleryPhotoConfig
    team: TeamPhotoConfig
    products: ProductPhotoConfig


class FontSystem(FrozenApiModel):
    primary: str
    secondary: str
    accent: str


class SpacingProfile(FrozenApiModel):
    sections: str
    elements: str
    containers: str


class AnimationProfile(FrozenApiModel):
    type: Literal["subtle", "modern", "dynamic", "elegant"]
    speed: Literal["slow", "normal", "fast"]
    effects: tuple[str, ...]


class LayoutProfile(FrozenApiModel):
    header: Literal["fixed", "sticky", "static"]
    footer: Literal["minimal", "detailed", "contact-focused"]
    sections: tuple[str, ...]


class CustomizationResult(FrozenApiModel):
    colors: ColorPalette
    photos: PhotoConfiguration
    fonts: FontSystem
    spacing: SpacingProfile
    animations: AnimationProfile
    layout: LayoutProfile
