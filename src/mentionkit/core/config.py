"""Mention engine configuration.

Parses and validates the option surface of the engine. Options may be given
in nested form (``mode={"kind": "combobox", ...}``) or flat, the way they
are written in JSON files (``combobox=true``, ``insert_on_blur=false``).
"""

import json
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from mentionkit.core.errors import ConfigurationConflict, InvalidBoundaryConfiguration
from mentionkit.domain.types import Metadata, PresentationMode, RawItem
from mentionkit.logger import get_logger

logger = get_logger("mentions.config")

DEFAULT_PUNCTUATION = ".,*?$|#{}()^[]\\/!%'\"~=<>_:;"
"""Characters that end a query and may precede a trigger."""

LENGTH_LIMIT = 75
"""Maximum number of characters in a query."""

DEFAULT_CREATABLE_TEMPLATE = "Add '{{name}}'"
DEFAULT_MENU_ITEM_LIMIT = 5
DEFAULT_SEARCH_DELAY = 250

MENU_OPTION_KEYS = frozenset({"insert_on_blur"})
COMBOBOX_OPTION_KEYS = frozenset({"combobox", "combobox_open", "combobox_additional_items"})


class ComboboxAdditionalItem(BaseModel):
    """Fixed row appended to the combobox regardless of the query."""

    value: str = Field(..., description="Value reported when the row is selected")
    display_value: Optional[str] = Field(None, description="Text shown for the row")
    data: Optional[Metadata] = Field(None, description="Metadata carried with the row")

    class Config:
        """Pydantic configuration."""

        frozen = True


class MenuOptions(BaseModel):
    """Options of the anchored menu mode."""

    kind: Literal["menu"] = "menu"
    insert_on_blur: bool = Field(default=True, description="Insert the highlighted item on blur")

    class Config:
        """Pydantic configuration."""

        frozen = True


class ComboboxOptions(BaseModel):
    """Options of the detached combobox mode."""

    kind: Literal["combobox"] = "combobox"
    open: bool = Field(default=False, description="Open the combobox when the engine starts")
    additional_items: list[ComboboxAdditionalItem] = Field(
        default_factory=list, description="Rows appended after the mention rows"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True


class MentionsConfig(BaseModel):
    """Configuration of a mention engine instance."""

    triggers: list[str] = Field(default_factory=list, description="Strings that open the menu")
    punctuation: str = Field(default=DEFAULT_PUNCTUATION, description="Boundary characters")
    allow_spaces: bool = Field(default=True, description="Allow whitespace inside queries")
    mention_enclosure: Optional[str] = Field(
        None, description="One char (open and close) or two chars (open, close)"
    )
    creatable: Union[bool, str, dict[str, Union[bool, str]]] = Field(
        default=False, description="Offer a synthetic 'create' entry"
    )
    menu_item_limit: Union[bool, int, dict[str, Union[bool, int]]] = Field(
        default=DEFAULT_MENU_ITEM_LIMIT, description="Maximum number of rows per trigger"
    )
    reserve_creatable_slot: bool = Field(
        default=False, description="Keep the creatable entry even when the limit is saturated"
    )
    show_mentions_on_delete: bool = False
    show_current_mentions_as_suggestions: bool = True
    search_delay: int = Field(default=DEFAULT_SEARCH_DELAY, ge=0, description="Debounce in ms")
    mode: Union[MenuOptions, ComboboxOptions] = Field(
        default_factory=MenuOptions, discriminator="kind"
    )

    class Config:
        """Pydantic configuration."""

        frozen = True

    @model_validator(mode="before")
    @classmethod
    def fold_mode_options(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        # ``combobox: false`` is the same as not asking for the combobox
        if data.get("combobox") is False:
            data.pop("combobox")

        menu_keys = sorted(MENU_OPTION_KEYS & data.keys())
        combobox_keys = sorted(COMBOBOX_OPTION_KEYS & data.keys())

        if menu_keys and combobox_keys:
            raise ConfigurationConflict(
                f"Menu options {menu_keys} cannot be combined with combobox options {combobox_keys}"
            )
        if (menu_keys or combobox_keys) and "mode" in data:
            raise ConfigurationConflict("Flat mode options cannot be combined with an explicit 'mode'")

        if menu_keys:
            data["mode"] = {"kind": "menu", "insert_on_blur": data.pop("insert_on_blur")}
        elif combobox_keys:
            data.pop("combobox", None)
            data["mode"] = {
                "kind": "combobox",
                "open": data.pop("combobox_open", False),
                "additional_items": data.pop("combobox_additional_items", []),
            }
        return data

    @field_validator("menu_item_limit")
    @classmethod
    def reject_true_limit(cls, value: Any) -> Any:
        limits = value.values() if isinstance(value, dict) else [value]
        if any(limit is True for limit in limits):
            raise ValueError("menu_item_limit accepts an integer or false, not true")
        return value

    @model_validator(mode="after")
    def validate_boundaries(self) -> "MentionsConfig":
        if self.mention_enclosure is not None and len(self.mention_enclosure) not in (1, 2):
            raise InvalidBoundaryConfiguration(
                f"mention_enclosure must be one or two characters, got {self.mention_enclosure!r}"
            )

        if self.enclosure is not None and "punctuation" in self.model_fields_set:
            overlap = set(self.enclosure) & set(self.punctuation)
            if overlap:
                raise InvalidBoundaryConfiguration(
                    f"Enclosure characters {sorted(overlap)} overlap the punctuation set"
                )

        if self.triggers:
            validate_triggers(self.triggers)

        if self.enclosure is not None and not self.allow_spaces:
            logger.warning("mention_enclosure is ignored because allow_spaces is false")
        return self

    @classmethod
    def from_options(cls, **options: Any) -> "MentionsConfig":
        """Build a configuration from flat keyword options."""
        return cls.model_validate(options)

    @property
    def presentation_mode(self) -> PresentationMode:
        if isinstance(self.mode, ComboboxOptions):
            return PresentationMode.COMBOBOX
        return PresentationMode.MENU

    @property
    def enclosure(self) -> Optional[tuple[str, str]]:
        """Opening and closing enclosure characters, if configured."""
        if not self.mention_enclosure:
            return None
        if len(self.mention_enclosure) == 1:
            return (self.mention_enclosure, self.mention_enclosure)
        return (self.mention_enclosure[0], self.mention_enclosure[1])

    @property
    def effective_punctuation(self) -> str:
        """Punctuation with enclosure characters removed from the default set."""
        if self.enclosure is None:
            return self.punctuation
        return "".join(ch for ch in self.punctuation if ch not in self.enclosure)

    @property
    def search_delay_seconds(self) -> float:
        return self.search_delay / 1000

    def creatable_template(self, trigger: str) -> Optional[str]:
        """
        Label template of the creatable entry for a trigger.

        Returns:
            The template containing ``{{name}}``, or None when creation is disabled
        """
        setting = self.creatable
        if isinstance(setting, dict):
            setting = setting.get(trigger, False)
        if setting is True:
            return DEFAULT_CREATABLE_TEMPLATE
        if isinstance(setting, str):
            return setting
        return None

    def item_limit(self, trigger: str) -> Optional[int]:
        """
        Row limit for a trigger.

        Returns:
            The limit, or None for unlimited (false, negative or unmapped trigger)
        """
        limit = self.menu_item_limit
        if isinstance(limit, dict):
            limit = limit.get(trigger, False)
        if limit is False or limit < 0:
            return None
        return int(limit)


def validate_triggers(triggers: list[str]) -> None:
    """
    Check that triggers can be scanned unambiguously.

    Raises:
        InvalidBoundaryConfiguration: On empty lists, empty or whitespace
            triggers, or duplicates
    """
    if not triggers:
        raise InvalidBoundaryConfiguration("At least one trigger is required")
    seen: set[str] = set()
    for trigger in triggers:
        if not trigger:
            raise InvalidBoundaryConfiguration("Triggers cannot be empty strings")
        if any(ch.isspace() for ch in trigger):
            raise InvalidBoundaryConfiguration(f"Trigger {trigger!r} contains whitespace")
        if trigger in seen:
            raise InvalidBoundaryConfiguration(f"Trigger {trigger!r} is declared twice")
        seen.add(trigger)


def load_mentions_config(config_path: Union[str, Path]) -> MentionsConfig:
    """
    Load engine configuration from a JSON file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        MentionsConfig: Parsed configuration object

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If the configuration structure is invalid
        ConfigurationError: If options conflict or boundaries are invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        error_msg = f"Mentions configuration file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loading mentions configuration from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration file {config_path}: {e}")
        raise

    try:
        config = MentionsConfig.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid configuration structure in {config_path}: {e}")
        raise

    logger.info(
        f"Loaded {config.presentation_mode.value} configuration with triggers {config.triggers}"
    )
    return config


def load_items(items_path: Union[str, Path]) -> dict[str, list[RawItem]]:
    """
    Load a static ``trigger -> items`` mapping from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        TypeError: If the top-level value is not an object of lists
    """
    items_path = Path(items_path)
    if not items_path.exists():
        error_msg = f"Items file not found: {items_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    with open(items_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        raise TypeError(f"Items file {items_path} must map triggers to lists of items")

    logger.info(f"Loaded items for {len(data)} trigger(s) from {items_path}")
    return data
