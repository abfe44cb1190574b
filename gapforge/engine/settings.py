"""
Gap generation settings and difficulty presets.

A difficulty other than ``custom`` is a named bundle: applying it replaces the
count mode, node-type switches and exclusions together.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .types import GapCategory


class CountMode(str, Enum):
    AUTO = "auto"
    FIXED = "fixed"
    RANGE = "range"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    CUSTOM = "custom"


class LiteralSwitches(BaseModel):
    model_config = ConfigDict(frozen=True)

    strings: bool = False
    numbers: bool = False
    booleans: bool = False
    null_undefined: bool = False

    def any_enabled(self) -> bool:
        return self.strings or self.numbers or self.booleans or self.null_undefined


class NodeTypeSwitches(BaseModel):
    """Which syntactic categories may become gaps."""

    model_config = ConfigDict(frozen=True)

    properties: bool = True
    functions: bool = True
    operators: bool = False
    literals: LiteralSwitches = Field(default_factory=LiteralSwitches)
    variables: bool = False
    keywords: bool = False
    object_keys: bool = False
    array_elements: bool = False

    def any_enabled(self) -> bool:
        return (
            self.properties
            or self.functions
            or self.operators
            or self.literals.any_enabled()
            or self.variables
            or self.keywords
            or self.object_keys
            or self.array_elements
        )

    def enabled_categories(self) -> set[GapCategory]:
        switches = {
            GapCategory.PROPERTY: self.properties,
            GapCategory.FUNCTION: self.functions,
            GapCategory.OPERATOR: self.operators,
            GapCategory.STRING: self.literals.strings,
            GapCategory.NUMBER: self.literals.numbers,
            GapCategory.BOOLEAN: self.literals.booleans,
            GapCategory.NULLISH: self.literals.null_undefined,
            GapCategory.VARIABLE: self.variables,
            GapCategory.KEYWORD: self.keywords,
            GapCategory.OBJECT_KEY: self.object_keys,
            GapCategory.ARRAY_ELEMENT: self.array_elements,
        }
        return {category for category, enabled in switches.items() if enabled}


class Exclusions(BaseModel):
    model_config = ConfigDict(frozen=True)

    common_names: bool = False
    built_ins: bool = False
    single_letter_vars: bool = False
    custom_list: tuple[str, ...] = ()


class GapSettings(BaseModel):
    """Complete gap generation configuration."""

    model_config = ConfigDict(frozen=True)

    count_mode: CountMode | None = CountMode.AUTO
    fixed_count: int | None = Field(default=None, ge=0)
    min_count: int | None = Field(default=None, ge=0)
    max_count: int | None = Field(default=None, ge=0)

    node_types: NodeTypeSwitches = Field(default_factory=NodeTypeSwitches)
    difficulty: Difficulty = Difficulty.MEDIUM
    exclusions: Exclusions = Field(default_factory=Exclusions)

    # Categories the caller explicitly asked for; spacing keeps one of each.
    required_categories: frozenset[GapCategory] = frozenset()


DEFAULT_GAP_SETTINGS = GapSettings()


_PRESETS: dict[Difficulty, dict] = {
    Difficulty.EASY: {
        "count_mode": CountMode.RANGE,
        "min_count": 2,
        "max_count": 4,
        "node_types": NodeTypeSwitches(properties=True, functions=False),
        "exclusions": Exclusions(common_names=True),
    },
    Difficulty.MEDIUM: {
        "count_mode": CountMode.AUTO,
        "node_types": NodeTypeSwitches(properties=True, functions=True),
        "exclusions": Exclusions(),
    },
    Difficulty.HARD: {
        "count_mode": CountMode.RANGE,
        "min_count": 8,
        "max_count": 12,
        "node_types": NodeTypeSwitches(
            properties=True,
            functions=True,
            operators=True,
            literals=LiteralSwitches(strings=True, numbers=True, booleans=True),
            variables=True,
            keywords=True,
            object_keys=True,
            array_elements=False,
        ),
        "exclusions": Exclusions(),
    },
}


def apply_difficulty_preset(difficulty: Difficulty | str, settings: GapSettings) -> GapSettings:
    """Return ``settings`` with the named preset applied. ``custom`` is a no-op."""
    difficulty = Difficulty(difficulty)
    if difficulty is Difficulty.CUSTOM:
        return settings

    update = dict(_PRESETS[difficulty])
    update["difficulty"] = difficulty
    return settings.model_copy(update=update)

