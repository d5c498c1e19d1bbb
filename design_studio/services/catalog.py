from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError

from design_studio.config import settings
from design_studio.domain.taxonomy import SectorEnum
from design_studio.schemas.templates import Template

logger = logging.getLogger(__name__)


class CatalogLoadError(RuntimeError):
    pass


def _default_catalog_path() -> Path:
    # design_studio/services -> design_studio/templates
    return Path(__file__).resolve().parents[1] / "templates" / "catalog.json"


class TemplateCatalog:
    """Read-only, ordered collection of templates. Iteration order is file order."""

    def __init__(self, templates: Iterable[Template]) -> None:
        ordered: list[Template] = []
        seen: set[str] = set()
        for template in templates:
            if template.id in seen:
                raise CatalogLoadError(f"Duplicate template id in catalog: {template.id}")
            seen.add(template.id)
            ordered.append(template)
        self._templates: tuple[Template, ...] = tuple(ordered)
        self._by_id = {template.id: template for template in self._templates}

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, template_id: str) -> Optional[Template]:
        return self._by_id.get(template_id)

    def by_sector(self, sector: SectorEnum | str) -> list[Template]:
        sector_value = sector.value if isinstance(sector, SectorEnum) else str(sector)
        return [template for template in self._templates if template.sector.value == sector_value]

    def sectors(self) -> list[str]:
        found: list[str] = []
        for template in self._templates:
            if template.sector.value not in found:
                found.append(template.sector.value)
        return found


def load_catalog_file(path: Path) -> TemplateCatalog:
    if not path.exists():
        raise CatalogLoadError(f"Template catalog not found at {path}.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Template catalog {path} is not valid JSON: {exc}") from exc

    raw_templates = data.get("templates") if isinstance(data, dict) else data
    if not isinstance(raw_templates, list):
        raise CatalogLoadError(f"Template catalog {path} must contain a 'templates' list.")

    templates: list[Template] = []
    for index, raw in enumerate(raw_templates):
        try:
            templates.append(Template.model_validate(raw))
        except ValidationError as exc:
            raise CatalogLoadError(f"Template #{index} in {path} is invalid: {exc}") from exc

    catalog = TemplateCatalog(templates)
    logger.info("Template catalog loaded", extra={"path": str(path), "template_count": len(catalog)})
    return catalog


@lru_cache(maxsize=4)
def _load_catalog_cached(path: str) -> TemplateCatalog:
    return load_catalog_file(Path(path))


def load_catalog(path: str | Path | None = None) -> TemplateCatalog:
    """Load a catalog once per path. Defaults to TEMPLATE_CATALOG_PATH, then the packaged file."""
    resolved = path or settings.TEMPLATE_CATALOG_PATH or _default_catalog_path()
    return _load_catalog_cached(str(Path(resolved).resolve()))
