"""
Unit tests for the listings CSV reader.
"""

import pytest

from zoning.data_sources.listings import (
    ListingsReader,
    infer_zoning_from_acreage,
    read_listings,
)
from zoning.exceptions import ListingParseError

ZILLOW_CSV = """Address,List Price,Lot Size,Zoning,Square Feet,Beds,Baths,Year Built
"4512 Oak Hollow Dr, Austin, TX 78759","$450,000","14,500",sf-3,"1,850",3,2,1968
"901 Small Ln, Austin, TX 78745",300000,5000 sqft,SF-2,1200,2,1,1955
"77 Unknown Price Rd, Austin, TX 78704",,9000,SF-3,1500,3,2,1990
"""


class TestReadCsv:
    """Tests for generic CSV exports."""

    def test_parses_rows(self):
        properties = read_listings(ZILLOW_CSV)

        assert len(properties) == 2
        prop = properties[0]
        assert prop.address == "4512 Oak Hollow Dr, Austin, TX 78759"
        assert prop.price == 450_000
        assert prop.lot_area == 14_500
        assert prop.zoning_code == "SF-3"
        assert prop.livable_area == 1_850
        assert prop.bedrooms == 3
        assert prop.year_built == 1968
        assert prop.data_source == "csv"

    def test_unit_suffix_stripped(self):
        """Test "5000 sqft" parses as a number."""
        properties = read_listings(ZILLOW_CSV)
        assert properties[1].lot_area == 5_000

    def test_row_missing_price_dropped(self):
        properties = read_listings(ZILLOW_CSV)
        assert "77 Unknown Price Rd" not in " ".join(p.address for p in properties)

    def test_asking_price_fallback(self):
        """Test an alternate price column is used when Price is absent."""
        text = "Street Address,Asking Price,Lot Area\n12 Elm St,325000,8000\n"
        prop = read_listings(text)[0]
        assert prop.address == "12 Elm St"
        assert prop.price == 325_000
        assert prop.zoning_code == "SF-3"

    def test_width_and_depth_columns(self):
        text = "Address,Price,Lot Size,Lot Width,Lot Depth\n12 Elm St,325000,14000,140,100\n"
        prop = read_listings(text)[0]
        assert prop.lot_dimensions.width == 140
        assert prop.lot_dimensions.depth == 100
        assert prop.lot_dimensions.provenance == "explicit"

    def test_description_carried(self):
        text = 'Address,Price,Lot Size,Remarks\n12 Elm St,325000,7200,"Level 60x120 lot, mature trees"\n'
        prop = read_listings(text)[0]
        assert prop.lot_dimensions is None
        assert "60x120" in prop.description

    def test_mismatched_row_skipped(self):
        text = "Address,Price,Lot Size\n12 Elm St,325000\n14 Elm St,410000,9000\n"
        properties = read_listings(text)
        assert [p.address for p in properties] == ["14 Elm St"]

    def test_multiline_remarks_preserved(self):
        """Test a quoted remark spanning a blank line keeps its full text."""
        text = (
            "Address,Price,Lot Size,Remarks\n"
            "\n"
            '12 Elm St,325000,7200,"Level 60x120 lot.\n\nSeller will consider terms."\n'
            "\n"
            "14 Elm St,410000,9000,\n"
        )
        properties = read_listings(text)

        assert [p.address for p in properties] == ["12 Elm St", "14 Elm St"]
        assert properties[0].description == "Level 60x120 lot.\n\nSeller will consider terms."

    @pytest.mark.parametrize("text", ["", "Address,Price,Lot Size\n", "\n\n"])
    def test_no_data_rows_raises(self, text):
        with pytest.raises(ListingParseError):
            read_listings(text)


class TestReadMls:
    """Tests for MLS exports with acreage lot sizes."""

    def test_acreage_converted_and_zoning_inferred(self):
        text = "Address,List Price,Acres\n500 Ranch Rd,600000,0.4\n"
        prop = ListingsReader(mls=True).read(text)[0]
        assert prop.lot_area == pytest.approx(17_424)
        assert prop.zoning_code == "SF-3"
        assert prop.data_source == "mls"

    def test_explicit_zoning_wins(self):
        text = "Address,List Price,Acres,Zoning\n500 Ranch Rd,600000,0.4,SF-2\n"
        prop = ListingsReader(mls=True).read(text)[0]
        assert prop.zoning_code == "SF-2"

    def test_acreage_ignored_outside_mls(self):
        """Test plain CSVs need a square-foot lot size."""
        text = "Address,List Price,Acres\n500 Ranch Rd,600000,0.4\n"
        assert read_listings(text) == []


class TestInferZoning:
    """Tests for acreage-based zoning inference."""

    @pytest.mark.parametrize("acres,code", [
        (0.1, "SF-2"),
        (0.25, "SF-3"),
        (0.49, "SF-3"),
        (0.5, "SF-5"),
        (0.99, "SF-5"),
        (1.0, "SF-6"),
        (5.0, "SF-6"),
    ])
    def test_bands(self, acres, code):
        assert infer_zoning_from_acreage(acres) == code
