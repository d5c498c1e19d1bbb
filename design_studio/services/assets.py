from __future__ import annotations

import re
import unicodedata
from typing import Optional, Protocol

from design_studio.config import settings
from design_studio.schemas.business import BusinessInfo
from design_studio.schemas.customization import CustomizationResult
from design_studio.schemas.missions import ContentPack, Deliverables, GeneratedAssets
from design_studio.schemas.selection import SmartSelectionResult


def slugify(value: str) -> str:
    value = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    value = value.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = re.sub(r"-{2,}", "-", value).strip("-")
    return value or "business"


class AssetProvider(Protocol):
    async def generate_assets(
        self,
        business_info: BusinessInfo,
        selection: SmartSelectionResult,
        customization: CustomizationResult,
    ) -> GeneratedAssets: ...

    def build_deliverables(self, mission_id: str, template_id: str) -> Deliverables: ...


class PlaceholderAssetProvider:
    """
    Produces opaque asset identifiers and deliverable locators.

    Nothing is rendered here; the identifiers name files a rendering service
    is expected to produce later.
    """

    def __init__(self, base_url: Optional[str] = None) -> None:
        self._base_url = (base_url or settings.PUBLIC_APP_URL).rstrip("/")

    async def generate_assets(
        self,
        business_info: BusinessInfo,
        selection: SmartSelectionResult,
        customization: CustomizationResult,
    ) -> GeneratedAssets:
        slug = slugify(business_info.name)
        sector = business_info.sector.value
        quick_list = selection.conversion_optimizations
        return GeneratedAssets(
            logo=f"logo-{slug}.svg",
            hero_image=f"hero-{sector}-{slug}.jpg",
            color_palette=customization.colors,
            content_pack=ContentPack(
                title=f"{business_info.name} - {business_info.city}",
                subtitle=business_info.description,
                cta=quick_list[0] if quick_list else "",
                sections=selection.primary_template.features,
            ),
        )

    def build_deliverables(self, mission_id: str, template_id: str) -> Deliverables:
        base = self._base_url
        return Deliverables(
            preview_url=f"{base}/preview/{template_id}?mission={mission_id}",
            download_url=f"{base}/api/download/mission/{mission_id}",
            deploy_url=f"{base}/api/deploy/mission/{mission_id}",
        )
