from __future__ import annotations

from healthtranslate.languages import language_name, language_options, pick_default, primary_subtag


def test_language_name_from_tag() -> None:
    assert language_name("es-ES") == "Spanish"
    assert language_name("es_MX") == "Spanish"
    assert language_name("fil-PH") == "Filipino"
    assert language_name("xx-YY") == "xx-YY"


def test_primary_subtag_handles_empty() -> None:
    assert primary_subtag("") == ""
    assert primary_subtag("EN-us") == "en"


def test_language_options_are_unique_and_sorted_by_label() -> None:
    opts = language_options(["es-ES", "en-US", "es-ES", "", "zz-ZZ"])
    assert opts == [
        ("en-US", "English (en-US)"),
        ("es-ES", "Spanish (es-ES)"),
        ("zz-ZZ", "zz-ZZ"),
    ]


def test_pick_default() -> None:
    tags = ["de-DE", "en-GB", "en-US"]
    assert pick_default(tags, "en-US", "en") == "en-US"
    assert pick_default(tags, "en-AU", "en") == "en-GB"
    assert pick_default(tags, "fr-FR", "es") == "de-DE"
    assert pick_default([], "en-US", "en") == "en-US"
