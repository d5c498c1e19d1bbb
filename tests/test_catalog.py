import json

import pytest

from design_studio.domain.taxonomy import SectorEnum
from design_studio.services.catalog import CatalogLoadError, TemplateCatalog, load_catalog, load_catalog_file


def test_packaged_catalog_covers_every_sector(catalog):
    assert len(catalog) == 25
    assert set(catalog.sectors()) == {sector.value for sector in SectorEnum}


def test_by_sector_keeps_file_order(catalog):
    restaurant_ids = [template.id for template in catalog.by_sector("restaurant")]

    assert restaurant_ids[:3] == ["bistrot-excellence", "brasserie-parisienne", "pizzeria-authentique"]
    assert all(template.sector == SectorEnum.restaurant for template in catalog.by_sector(SectorEnum.restaurant))


def test_templates_parse_design_type_and_stats(catalog):
    template = catalog.get("pizzeria-authentique")

    assert template is not None
    assert template.design_style.value == "modern"
    assert template.stats.lighthouse == 99
    assert template.stats.conversion_rate == "+52%"


def test_load_catalog_is_cached(catalog):
    assert load_catalog() is catalog


def test_invalid_entry_is_rejected(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"templates": [{"id": "broken", "sector": "restaurant"}]}), encoding="utf-8")

    with pytest.raises(CatalogLoadError, match="Template #0"):
        load_catalog_file(path)


def test_missing_file_is_rejected(tmp_path):
    with pytest.raises(CatalogLoadError, match="not found"):
        load_catalog_file(tmp_path / "missing.json")


def test_duplicate_ids_are_rejected(catalog):
    template = catalog.get("medical-confiance")

    with pytest.raises(CatalogLoadError, match="Duplicate"):
        TemplateCatalog([template, template])
