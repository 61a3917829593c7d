"""
Tests for label field extraction.
"""

import pytest

from savemywines.services.field_extractor import (
    VARIETALS,
    ExtractedWineFields,
    extract,
    extract_name_and_producer,
    extract_varietal,
    extract_vintage,
)


class TestVintage:
    """Tests for vintage year extraction."""

    def test_year_inside_text(self):
        assert extract("Produced 2015 Reserve", []).vintage == 2015

    def test_no_year(self):
        assert extract("No year here", []).vintage is None

    def test_1800s_not_matched(self):
        assert extract("1899 vintage", []).vintage is None

    @pytest.mark.parametrize("text,expected", [
        ("1901", 1901),
        ("2099", 2099),
        ("1900", 1900),
    ])
    def test_boundaries(self, text, expected):
        assert extract_vintage(text) == expected

    def test_first_match_wins(self):
        text = "Estate founded 1952\nVintage 2016"
        assert extract_vintage(text) == 1952

    def test_year_must_be_whole_word(self):
        assert extract_vintage("Lot 120155") is None
        assert extract_vintage("Cuvée20190") is None

    def test_returns_int(self):
        assert isinstance(extract_vintage("2018"), int)


class TestVarietal:
    """Tests for varietal matching."""

    def test_text_match_is_case_insensitive(self):
        assert extract_varietal("Estate PINOT NOIR Reserve") == "pinot noir"

    def test_text_beats_labels(self):
        result = extract("Cabernet Sauvignon\nNapa Valley", ["merlot"])
        assert result.varietal == "cabernet sauvignon"

    def test_vocabulary_order_beats_text_position(self):
        # merlot appears first in the text but cabernet sauvignon is
        # earlier in the vocabulary
        assert extract_varietal("Merlot / Cabernet Sauvignon blend") == "cabernet sauvignon"

    def test_label_fallback(self):
        assert extract("Some Estate", ["wine", "malbec"]).varietal == "malbec"

    def test_label_match_must_be_exact(self):
        assert extract_varietal("", ["red malbec wine"]) == ""

    def test_no_match_is_empty(self):
        assert extract("Bordeaux Supérieur", ["wine", "bottle"]).varietal == ""

    def test_result_always_in_vocabulary(self):
        for text in ["Shiraz", "sauvignon blanc", "Pinotage 2012", "Riesling Kabinett"]:
            varietal = extract(text, []).varietal
            assert varietal in VARIETALS

    def test_substring_inside_word_counts(self):
        # "syrah" inside "petite syrah" is still a vocabulary hit
        assert extract_varietal("Petite Syrah") == "syrah"


class TestNameAndProducer:
    """Tests for the name/producer line heuristic."""

    def test_skip_rules(self):
        text = "Cabernet Sauvignon\nChâteau Test\n2018\nProducer Name"
        result = extract(text, [])
        assert result.name == "Château Test"
        assert result.producer == "Producer Name"

    def test_single_candidate_leaves_producer_empty(self):
        name, producer = extract_name_and_producer("Domaine Example\nPinot Noir\n2019")
        assert name == "Domaine Example"
        assert producer == ""

    def test_short_lines_skipped(self):
        name, producer = extract_name_and_producer("AB\n  \nXY\nLa Crema\nSonoma Coast")
        assert name == "La Crema"
        assert producer == "Sonoma Coast"

    def test_three_char_line_kept(self):
        name, _ = extract_name_and_producer("ABC")
        assert name == "ABC"

    def test_duplicate_of_name_is_not_producer(self):
        text = "Opus One\nOpus One\nOakville"
        assert extract_name_and_producer(text) == ("Opus One", "Oakville")

    def test_lines_trimmed(self):
        assert extract_name_and_producer("   Kanonkop   \r\n  Stellenbosch ") == ("Kanonkop", "Stellenbosch")

    def test_stops_after_producer(self):
        text = "First Line\nSecond Line\nThird Line"
        assert extract_name_and_producer(text) == ("First Line", "Second Line")

    def test_line_with_year_skipped(self):
        text = "Vintage 2005\nBodega Norton"
        assert extract_name_and_producer(text) == ("Bodega Norton", "")


class TestExtractIsTotal:
    """extract() never raises and always returns a complete result."""

    @pytest.mark.parametrize("text,labels", [
        ("", []),
        ("\n\n\r\n", []),
        ("a\nb\nc", ["x"]),
        (None, None),
        ("2019", ()),
        ("🍷🍷🍷\n∅", ["wine"]),
    ])
    def test_degenerate_inputs(self, text, labels):
        result = extract(text, labels)
        assert isinstance(result, ExtractedWineFields)
        assert isinstance(result.name, str)
        assert isinstance(result.producer, str)
        assert isinstance(result.varietal, str)
        assert result.vintage is None or isinstance(result.vintage, int)

    def test_empty_input_gives_empty_fields(self):
        assert extract("", []) == ExtractedWineFields()

    def test_full_label(self):
        text = "Château Test\nGrand Vin de Bordeaux\nCabernet Sauvignon\n2018\n750ml"
        result = extract(text, ["wine"])
        assert result == ExtractedWineFields(
            name="Château Test",
            producer="Grand Vin de Bordeaux",
            varietal="cabernet sauvignon",
            vintage=2018,
        )
