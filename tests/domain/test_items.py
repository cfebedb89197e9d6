import pytest

from mentionkit.core.errors import InvalidMentionItem
from mentionkit.domain.types import (
    ComboboxItem,
    ComboboxItemType,
    MentionItem,
    MentionToken,
    MenuItem,
    normalize_item,
    normalize_items,
)


def test_normalize_bare_string() -> None:
    assert normalize_item("Alice") == MentionItem(value="Alice")


def test_normalize_mapping_keeps_metadata() -> None:
    item = normalize_item({"value": "Bob", "email": "bob@example.com", "admin": True, "age": 42})

    assert item.value == "Bob"
    assert item.data == {"email": "bob@example.com", "admin": True, "age": 42}


def test_normalize_mapping_without_value() -> None:
    with pytest.raises(InvalidMentionItem):
        normalize_item({"name": "Bob"})


def test_normalize_rejects_nested_metadata() -> None:
    with pytest.raises(InvalidMentionItem):
        normalize_item({"value": "Bob", "tags": ["a", "b"]})


def test_normalize_rejects_unsupported_type() -> None:
    with pytest.raises(InvalidMentionItem):
        normalize_item(42)  # type: ignore[arg-type]


def test_normalize_items_preserves_order() -> None:
    values = [item.value for item in normalize_items(["c", "a", {"value": "b"}])]

    assert values == ["c", "a", "b"]


def test_menu_item_display_value_defaults_to_value() -> None:
    item = MenuItem(trigger="@", value="Alice")

    assert item.display_value == "Alice"
    assert item.creatable is False


def test_combobox_item_display_value_defaults_to_value() -> None:
    item = ComboboxItem(item_type=ComboboxItemType.TRIGGER, value="#")

    assert item.display_value == "#"


def test_mention_token_text_form() -> None:
    token = MentionToken(trigger="@", value="John Doe")

    assert token.key == "@John Doe"
    assert token.as_text() == "@John Doe"
    assert token.as_text(('"', '"')) == '@"John Doe"'
    assert MentionToken(trigger="@", value="Jon").as_text(("[", "]")) == "@Jon"
