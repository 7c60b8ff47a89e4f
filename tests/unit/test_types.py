"""Tests for the domain dataclasses: identity, ordering and rendering."""

import pytest

from pdokapis.core.types import (
    AddressRecord,
    BoundingBox,
    Building,
    BuildingObjectRecord,
    Lot,
    ResolvedPand,
    SuggestDoc,
)


def _pand(pand_id, **overrides):
    fields = dict(
        footprint_area=100, floor_area=50, construction_year="2008", building_status="Pand in gebruik",
        object_status="Verblijfsobject in gebruik", usage_purpose="woonfunctie",
    )
    fields.update(overrides)
    return ResolvedPand(id=pand_id, **fields)


class TestIdentity:
    def test_lots_equal_by_id_only(self):
        assert Lot(id="1", section="M", area=10.0) == Lot(id="1", section="N", area=99.0)
        assert Lot(id="1") != Lot(id="2")

    def test_buildings_equal_by_id_only(self):
        assert Building(id="p1", construction_year="2008") == Building(id="p1", construction_year="1910")

    def test_resolved_panden_equal_by_id_only(self):
        assert _pand("p1") == _pand("p1", footprint_area=999, usage_purpose="winkelfunctie")
        assert hash(_pand("p1")) == hash(_pand("p1", floor_area=1))

    def test_addresses_equal_by_id_only(self):
        assert AddressRecord(id="adr-1", street_name="A") == AddressRecord(id="adr-1", street_name="B")

    def test_ordering_by_id(self):
        lots = [Lot(id="c", area=1.0), Lot(id="a", area=3.0), Lot(id="b", area=2.0)]
        assert [lot.id for lot in sorted(lots)] == ["a", "b", "c"]
        assert sorted([_pand("p2", footprint_area=1), _pand("p1", footprint_area=2)])[0].id == "p1"

    def test_set_deduplicates_on_id(self):
        assert len({Building(id="p1", status="a"), Building(id="p1", status="b")}) == 1

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Lot(id="1").section = "X"


class TestRendering:
    def test_resolved_pand_to_dict(self):
        rendered = _pand("0268100000085678", footprint_area=196).to_dict()
        assert rendered == {
            "identificatiecode": "0268100000085678",
            "pandvlak": "196",
            "vloeroppervlak": "50",
            "bouwjaar": "2008",
            "pandstatus": "Pand in gebruik",
            "objectstatus": "Verblijfsobject in gebruik",
            "gebruiksdoel": "woonfunctie",
            "geometry": {},
        }

    def test_suggest_doc_to_dict(self):
        doc = SuggestDoc("adr-1", "adres", "Straat 1, Plaats", 3.5)
        assert doc.to_dict()["weergavenaam"] == "Straat 1, Plaats"

    def test_lot_to_dict(self):
        assert Lot(id="1", section="M", parcel_number=5038).to_dict()["perceelnummer"] == 5038

    def test_address_to_dict_lists_lots(self):
        record = AddressRecord(id="adr-1", lot_ids=("HTT02-M-5038", "HTT02-M-5039"))
        assert record.to_dict()["gekoppeld_perceel"] == ["HTT02-M-5038", "HTT02-M-5039"]

    def test_usage_purpose_single(self):
        assert BuildingObjectRecord("s", 1, ("woonfunctie",), ()).usage_purpose == "woonfunctie"

    def test_usage_purpose_none(self):
        assert BuildingObjectRecord("s", 1, (), ()).usage_purpose == ""


class TestBoundingBox:
    def test_dimensions(self):
        box = BoundingBox(0, 0, 4, 2)
        assert box.width == 4
        assert box.height == 2
        assert box.center == (2, 1)
        assert box.to_tuple() == (0, 0, 4, 2)
