"""
Widget descriptors produced by the form renderer.

Descriptors are immutable records of what to show; the host screen decides
how to materialize them. Each class carries a ``widget_type`` tag used by
the host for dispatch.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import ClassVar, Iterator, Optional, Tuple, Union

from .rich_text import RichText, StyleKind
from .schema_models import FieldType

# Share of the viewport width used by section images
IMAGE_WIDTH_RATIO = 0.5

DEFAULT_TOOLBAR = (StyleKind.BOLD, StyleKind.ITALIC, StyleKind.UNDERLINE, StyleKind.LINK)


class InputMode(str, Enum):
    """Keyboard/input behaviour of a single-line text input."""
    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    NUMBER = "number"
    DATE = "date"


def format_picked_date(year: int, month_index: int, day: int) -> str:
    """
    Format a picked date as D/M/YYYY without zero padding.

    Args:
        year: Four digit year
        month_index: 0-based month (0 is January)
        day: Day of month

    Returns:
        Display text such as "5/1/2025"

    Raises:
        ValueError: If the values do not form a real calendar date
    """
    picked = date(year, month_index + 1, day)
    return f"{picked.day}/{picked.month}/{picked.year}"


@dataclass(frozen=True)
class PrefixLabel:
    """Container label shown in front of a text input."""
    widget_type: ClassVar[str] = "prefix_label"
    text: str


@dataclass(frozen=True)
class TextInput:
    """Single-line text input."""
    widget_type: ClassVar[str] = "text_input"
    hint: str
    mode: InputMode = InputMode.TEXT
    masked: bool = False
    read_only: bool = False
    error: Optional[str] = None
    text: str = ""

    def pick_date(self, year: int, month_index: int, day: int) -> "TextInput":
        """Return a copy showing the picked date; only valid for date inputs."""
        if self.mode is not InputMode.DATE:
            raise ValueError(f"Cannot pick a date on a {self.mode.value} input")
        return replace(self, text=format_picked_date(year, month_index, day))


@dataclass(frozen=True)
class Label:
    """Plain text label above a choice widget."""
    widget_type: ClassVar[str] = "label"
    text: str


@dataclass(frozen=True)
class ErrorSlot:
    """
    Inline error message area.

    hide_on_change marks slots that are cleared whenever the related
    selection changes.
    """
    widget_type: ClassVar[str] = "error_slot"
    text: Optional[str] = None
    visible: bool = False
    hide_on_change: bool = False


@dataclass(frozen=True)
class RadioGroup:
    """Exclusive choice over option labels."""
    widget_type: ClassVar[str] = "radio_group"
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Toggle:
    """One checkbox; tag holds the option value."""
    widget_type: ClassVar[str] = "toggle"
    label: str
    tag: str


@dataclass(frozen=True)
class CheckboxGroup:
    """Header, one toggle per option and an optional error below them."""
    widget_type: ClassVar[str] = "checkbox_group"
    header: str
    toggles: Tuple[Toggle, ...] = ()
    error: Optional[ErrorSlot] = None


@dataclass(frozen=True)
class Dropdown:
    """Closed single-choice list; only option labels are carried."""
    widget_type: ClassVar[str] = "dropdown"
    choices: Tuple[str, ...] = ()
    prompt: Optional[str] = None


@dataclass(frozen=True)
class RichTextEditor:
    """Multi-line rich text block with a formatting toolbar."""
    widget_type: ClassVar[str] = "rich_text_editor"
    content: RichText
    toolbar: Tuple[StyleKind, ...] = DEFAULT_TOOLBAR


@dataclass(frozen=True)
class Heading:
    widget_type: ClassVar[str] = "heading"
    text: str


@dataclass(frozen=True)
class Paragraph:
    widget_type: ClassVar[str] = "paragraph"
    text: str


@dataclass(frozen=True)
class Image:
    """Section image: centered, aspect preserved, sized relative to the viewport."""
    widget_type: ClassVar[str] = "image"
    src: str
    width_ratio: float = IMAGE_WIDTH_RATIO
    keep_aspect: bool = True
    align: str = "center"

    def width_for(self, viewport_width: int) -> int:
        return int(viewport_width * self.width_ratio)


Block = Union[Heading, Paragraph, Image]
Widget = Union[PrefixLabel, TextInput, Label, ErrorSlot, RadioGroup, CheckboxGroup, Dropdown, RichTextEditor]


@dataclass(frozen=True)
class FieldCluster:
    """Ordered widgets produced for a single field."""
    key: str
    field_name: str
    field_uuid: str
    field_type: FieldType
    widgets: Tuple[Widget, ...]


@dataclass(frozen=True)
class RenderedSection:
    index: int
    uuid: str
    header: Tuple[Block, ...] = ()
    clusters: Tuple[FieldCluster, ...] = ()


@dataclass(frozen=True)
class RenderedForm:
    """Complete descriptor tree for one render pass."""
    title: str = ""
    sections: Tuple[RenderedSection, ...] = ()

    @classmethod
    def empty(cls) -> "RenderedForm":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def clusters(self) -> Tuple[FieldCluster, ...]:
        return tuple(cluster for section in self.sections for cluster in section.clusters)

    def widgets(self) -> Iterator[Union[Block, Widget]]:
        """Yield header blocks and field widgets in display order."""
        for section in self.sections:
            yield from section.header
            for cluster in section.clusters:
                yield from cluster.widgets
