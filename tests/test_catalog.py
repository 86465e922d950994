import json

import pytest

from catalog import CATALOG_ENV_VAR, custom_pallet, ensure_templates, load_catalog


def test_builtin_catalog_lookups(monkeypatch):
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)
    catalog = load_catalog()

    eur = catalog.pallet("eur1")
    assert (eur.length, eur.width, eur.max_weight, eur.length_unit) == (120, 80, 1500, "cm")
    assert catalog.location("nyc").currency_code == "USD"
    assert catalog.category("fragile").base_rate == 1.5
    assert catalog.defaults["cost_type"] == "weight"


def test_custom_pallet_is_reserved():
    catalog = load_catalog()
    pallet = catalog.pallet("custom")
    assert pallet.is_custom
    assert pallet == custom_pallet()
    assert (pallet.length, pallet.width, pallet.height, pallet.max_weight) == (0, 0, 0, 0)


def test_unknown_ids_raise_key_error():
    catalog = load_catalog()
    with pytest.raises(KeyError):
        catalog.pallet("nope")
    with pytest.raises(KeyError):
        catalog.location("nope")


def test_catalog_file_from_env_overrides_lists(tmp_path, monkeypatch):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            {
                "palletSizes": [
                    {"id": "p1", "name": "Pallet One", "length": 1000, "width": 1000, "height": 100, "maxWeight": 900, "lengthUnit": "mm"}
                ],
                "locations": [
                    {"id": "a", "name": "A", "country": "US", "zipCode": "1", "taxRate": 5, "currencyCode": "USD"}
                ],
                "defaults": {"currency": "EUR"},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(CATALOG_ENV_VAR, str(path))
    catalog = load_catalog()

    assert [p.id for p in catalog.pallet_sizes] == ["p1"]
    assert catalog.pallet("p1").max_weight == 900
    assert catalog.pallet("p1").length_unit == "mm"
    assert catalog.location("a").tax_rate == 5
    assert len(catalog.product_categories) == 4
    assert catalog.defaults["currency"] == "EUR"
    assert catalog.defaults["length_unit"] == "cm"


def test_ensure_templates_writes_package_template(tmp_path):
    written = ensure_templates(tmp_path / "templates")
    assert [p.name for p in written] == ["packages_template.csv"]
    lines = written[0].read_text(encoding="utf-8").splitlines()
    assert lines[0] == "length,width,height,weight,quantity,length_unit,weight_unit"
    assert lines[1] == "40,30,25,12.5,10,cm,kg"
