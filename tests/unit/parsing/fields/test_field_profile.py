"""Unit тесты загрузки профилей полей и фабрики стратегий."""

import pytest
from pydantic import ValidationError

from contracts.d1_capture_dto import TextFragment
from src.parsing.domain.exceptions import FieldProfileError
from src.parsing.fields import (
    FieldProfile, FieldProfileLoader, FieldSpec, FirstMatchStrategy, StrategyFactory,
)


def test_bundled_profile_matches_default():
    profile = FieldProfileLoader().load("id_card")
    assert profile == FieldProfile.default()


def test_available_profiles():
    assert "id_card" in FieldProfileLoader().available()


def test_missing_profile(tmp_path):
    with pytest.raises(FieldProfileError, match="не найден"):
        FieldProfileLoader(tmp_path).load("passport")


def test_invalid_regex_in_yaml(tmp_path):
    (tmp_path / "broken.yaml").write_text(
        "name: broken\n"
        "fields:\n"
        "  - name: expiry_date\n"
        "    keyword: expiry date\n"
        "    pattern: '(\\d{2}'\n",
        encoding="utf-8"
    )
    with pytest.raises(FieldProfileError) as exc_info:
        FieldProfileLoader(tmp_path).load("broken")
    assert isinstance(exc_info.value.original_error, ValidationError)


def test_duplicate_field_names():
    spec = FieldSpec(name="a", keyword="a", pattern=r"\d")
    with pytest.raises(ValidationError):
        FieldProfile(name="dup", fields=[spec, spec])


def test_keyword_is_lowercased():
    assert FieldSpec(name="x", keyword="  Issuing Date ", pattern=r"\d").keyword == "issuing date"


class TestStrategyFactory:

    def test_default(self):
        assert isinstance(StrategyFactory().get(), FirstMatchStrategy)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Неизвестная стратегия"):
            StrategyFactory().get("nearest_box")

    def test_register(self):
        class LastMatch(FirstMatchStrategy):
            @property
            def name(self):
                return "last_match"

            def select(self, fragments, keyword):
                return super().select(list(reversed(fragments)), keyword)

        factory = StrategyFactory()
        factory.register("Last_Match", LastMatch())
        strategy = factory.get("last_match")

        frags = [TextFragment(text="id number 1"), TextFragment(text="id number 2")]
        assert strategy.select(frags, "ID Number").text == "id number 2"
