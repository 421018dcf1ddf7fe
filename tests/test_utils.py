import json

import pytest

from maps_places.models import FailedQuery, Place
from maps_places.utils import (
    clean_review_text,
    extract_stars_value,
    first_two_words_match,
    format_search_url,
    get_lat_lon,
    get_stars_value,
    is_place_url,
    is_search_url,
    output_results,
    parse_float,
    parse_int,
    print_summary,
)


def test_parse_int_strips_grouping_commas() -> None:
    assert parse_int("1,234") == 1234
    assert parse_int("1,234,567") == 1234567
    assert parse_int("42") == 42
    assert parse_int("-7") == -7


@pytest.mark.parametrize("value", ["", None, "abc", "12a", "1.5", " 12 ", "1_000", ","])
def test_parse_int_invalid_returns_zero(value) -> None:
    assert parse_int(value) == 0


def test_parse_float_valid_and_invalid() -> None:
    assert parse_float("4.8") == 4.8
    assert parse_float("5") == 5.0
    assert parse_float("-0.25") == -0.25
    assert parse_float(".5") == 0.5
    for value in ["", None, "four", "4,8", "nan", "inf", "4.8 stars"]:
        assert parse_float(value) == 0.0


def test_extract_stars_value_isolates_rating() -> None:
    assert extract_stars_value("4.8 stars ") == 4.8
    assert extract_stars_value("Rated 5 stars") == 5.0
    assert extract_stars_value("") == 0.0
    assert extract_stars_value("no rating") == 0.0


def test_get_stars_value_reads_third_field() -> None:
    assert get_stars_value("5 stars, 1,234 reviews") == 1234
    assert get_stars_value("1 star, 3 reviews") == 3
    assert get_stars_value("") == 0
    assert get_stars_value("5 stars,") == 0
    assert get_stars_value("5 stars, many reviews") == 0


def test_get_lat_lon() -> None:
    url = "https://www.google.com/maps/place/Laba/@12.34,-56.78,15z/data=!3m1"
    assert get_lat_lon(url) == "12.34,-56.78"
    assert get_lat_lon("https://www.google.com/maps/place/Laba/data=!3m1") == ""
    assert get_lat_lon("https://www.google.com/maps/place/Laba@12.34,-56.78,15z") == ""
    assert get_lat_lon("https://www.google.com/maps/place/@12.34/") == ""
    assert get_lat_lon("") == ""


def test_format_search_url() -> None:
    assert (
        format_search_url("Laba africa expeditions")
        == "https://www.google.com/maps/search/Laba+africa+expeditions/?hl=en"
    )
    assert format_search_url("cafe centro", language="pt") == "https://www.google.com/maps/search/cafe+centro/?hl=pt"


def test_first_two_words_match() -> None:
    assert first_two_words_match("Laba Africa Expeditions", "laba africa tours") is True
    assert first_two_words_match("A", "A B") is False
    assert first_two_words_match("Zed Tours", "Zed Zebra") is False
    assert first_two_words_match("  LABA   africa ", "laba AFRICA") is True
    assert first_two_words_match("", "") is False


def test_url_kind_checks() -> None:
    assert is_search_url("https://www.google.com/maps/search/x/?hl=en")
    assert not is_search_url("https://www.google.com/maps/place/x")
    assert is_place_url("https://www.google.com/maps/place/x")
    assert not is_place_url(None)


def test_clean_review_text() -> None:
    assert clean_review_text("  Great trip & guides \n") == "Great trip  guides"
    assert clean_review_text(None) == ""


def test_output_results_writes_json_array_with_fixed_keys(tmp_path) -> None:
    path = tmp_path / "places.json"
    path.write_text("stale", encoding="utf-8")
    place = Place(name="Café Zanzibar", category="Cafe", five_stars=3, one_star=1, reviews=["Ótimo"])

    output_results([place], str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data[0].keys()) == [
        "name", "category", "address", "website", "phone", "review_count", "stars",
        "5_stars", "4_stars", "3_stars", "2_stars", "1_star", "reviews", "latlon",
    ]
    assert data[0]["name"] == "Café Zanzibar"
    assert data[0]["5_stars"] == 3
    assert Place.model_validate(data[0]) == place
    assert list(tmp_path.iterdir()) == [path]


def test_output_results_empty_list(tmp_path) -> None:
    path = tmp_path / "places.json"
    output_results([], str(path))
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_output_results_propagates_write_errors(tmp_path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(OSError):
        output_results([Place(name="x")], str(blocker / "places.json"))


def test_print_summary_lists_each_failure(capsys) -> None:
    failed = [
        FailedQuery(query="Zed Tours", reason="timeout"),
        FailedQuery(query="Zed Tours", reason="page closed"),
    ]

    print_summary(["Nowhere"], failed)

    err = capsys.readouterr().err
    assert "  - Nowhere" in err
    assert "Buscas com erro (2):" in err
    assert "  - Zed Tours: timeout" in err
    assert "  - Zed Tours: page closed" in err
