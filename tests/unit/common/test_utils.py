"""Tests for common.utils module."""

from common.utils import get_value


class TestGetValue:
    def test_dict_access(self) -> None:
        assert get_value({"title": "Headline"}, "title") == "Headline"

    def test_dataclass_attribute_access(self) -> None:
        story = type("Story", (), {"member_ids": ["a1", "a2"]})()
        assert get_value(story, "member_ids") == ["a1", "a2"]

    def test_missing_key_returns_default(self) -> None:
        assert get_value({}, "missing") is None
        assert get_value({}, "missing", "fallback") == "fallback"

    def test_missing_attribute_returns_default(self) -> None:
        assert get_value(object(), "missing", 0) == 0
