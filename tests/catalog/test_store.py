import pytest

from skyhop.catalog.store import CatalogStore, dso_group, paginate


def test_lookup_is_case_insensitive(sample_store):
    assert sample_store.lookup_star("VEGA").name == "Vega"
    assert sample_store.lookup_star("  sheliak ").magnitude == pytest.approx(3.52)
    assert sample_store.lookup_dso("ngc224").common_name == "Andromeda Galaxy"
    assert sample_store.lookup_star("Betelgeuse") is None


def test_star_and_dso_namespaces_are_separate(sample_store):
    assert sample_store.lookup_star("vega").object_type == "Star"
    assert sample_store.lookup_dso("vega").object_type == "Decoy"


def test_first_alias_registration_wins(sample_store):
    assert sample_store.resolve_alias("Andromeda Galaxy") == "ngc224"
    assert sample_store.resolve_alias("Unknown Nebula") is None
    assert sample_store.alias_count == 1


def test_designation_is_registered_as_second_key(sample_store):
    polaris = sample_store.lookup_star("alpha umi")
    assert polaris.name == "Polaris"
    assert polaris.key == "polaris"
    assert sample_store.star_count == 4


def test_designation_does_not_replace_existing_star(make_star):
    store = CatalogStore.from_records(
        stars=[
            make_star("Alpha Test", 1.0, 10.0, 2.0),
            make_star("Proper", 2.0, 20.0, 3.0, designation="Alpha Test"),
        ]
    )
    assert store.lookup_star("alpha test").name == "Alpha Test"
    assert store.lookup_star("proper").name == "Proper"


def test_dso_group():
    assert dso_group("m31") == "messier"
    assert dso_group("ic434") == "ic"
    assert dso_group("ngc7000") == "ngc"
    assert dso_group("mel20") == "other"
    assert dso_group("vega") == "other"


def test_paginate():
    names = ["a", "b", "c", "d"]
    assert paginate(names, 0, None) == names
    assert paginate(names, 1, 2) == ["b", "c"]
    assert paginate(names, 3, None) == names
    assert paginate(names, 10, 2) == []


def test_list_all_categories_in_order(sample_store):
    pages = sample_store.list_by_category()
    assert [p.category for p in pages] == [
        "Stars",
        "Messier Objects",
        "IC Objects",
        "NGC Objects",
        "Other Deep Sky Objects",
    ]
    stars, messier, ic, ngc, other = pages
    assert stars.names == ["Polaris", "Sheliak", "Vega"]
    assert stars.total == 3
    assert messier.names == ["M31"]
    assert ic.names == ["IC434"]
    assert ngc.names == ["NGC224"]
    assert other.names == ["Vega"]


def test_list_sorts_numbered_groups_by_catalog_number(make_dso):
    store = CatalogStore.from_records(
        dsos=[make_dso("NGC10", 1.0, 1.0), make_dso("NGC9", 1.0, 1.0), make_dso("NGC100", 1.0, 1.0)]
    )
    (page,) = store.list_by_category("ngc")
    assert page.names == ["NGC9", "NGC10", "NGC100"]


def test_list_pagination(sample_store):
    (page,) = sample_store.list_by_category("stars", limit=1, offset=1)
    assert page.names == ["Sheliak"]
    assert page.total == 3
    assert page.limit == 1
    assert page.offset == 1
    assert page.object_count == 1


def test_list_non_positive_limit_means_everything(sample_store):
    (page,) = sample_store.list_by_category("stars", limit=0)
    assert page.limit == 3
    assert len(page.names) == 3


def test_list_filters(sample_store):
    (bright,) = sample_store.list_by_category("stars", min_magnitude=1.0)
    assert bright.names == ["Vega"]

    (lyra,) = sample_store.list_by_category("stars", constellation="lyr")
    assert lyra.names == ["Sheliak", "Vega"]

    pages = sample_store.list_by_category("dso", min_magnitude=20.0)
    assert [p.names for p in pages] == [["M31"], ["IC434"], ["NGC224"], ["Vega"]]


def test_magnitude_filter_drops_objects_without_magnitude(make_dso):
    store = CatalogStore.from_records(
        dsos=[make_dso("NGC1", 1.0, 1.0, 12.0), make_dso("NGC2", 1.0, 1.0)]
    )
    (page,) = store.list_by_category("ngc", min_magnitude=20.0)
    assert page.names == ["NGC1"]


def test_list_dso_only(sample_store):
    pages = sample_store.list_by_category("dso")
    assert len(pages) == 4
    assert "Stars" not in [p.category for p in pages]


def test_list_unknown_category(sample_store):
    with pytest.raises(ValueError, match="Unknown category"):
        sample_store.list_by_category("comets")
