"""
Field-to-widget dispatcher for DinaForms.
Maps each field specification to the ordered widgets that represent it.
"""

from typing import Callable, Dict, Optional, Tuple
import logging

from .descriptors import (
    CheckboxGroup,
    Dropdown,
    ErrorSlot,
    FieldCluster,
    InputMode,
    Label,
    PrefixLabel,
    RadioGroup,
    RichTextEditor,
    TextInput,
    Toggle,
    Widget,
)
from .rich_text import RichText
from .schema_models import FieldSpec, FieldType

logger = logging.getLogger(__name__)

# Input modes of the single-line text family
TEXT_INPUT_MODES = {
    FieldType.TEXT: InputMode.TEXT,
    FieldType.EMAIL: InputMode.EMAIL,
    FieldType.PASSWORD: InputMode.PASSWORD,
    FieldType.NUMBER: InputMode.NUMBER,
    FieldType.DATE: InputMode.DATE,
}


def required_message(label: str) -> str:
    return f"{label} is required"


class FieldWidgetBuilder:
    """Builds widget descriptors for a single field."""

    @staticmethod
    def _build_text_input(field: FieldSpec, mode: InputMode) -> Tuple[Widget, ...]:
        """Prefix label followed by the input; required fields carry their error up front."""
        text_input = TextInput(
            hint=field.label,
            mode=mode,
            masked=mode is InputMode.PASSWORD,
            read_only=mode is InputMode.DATE,
            error=required_message(field.label) if field.required else None,
        )
        return (PrefixLabel(field.label), text_input)

    @staticmethod
    def _build_radio(field: FieldSpec) -> Tuple[Widget, ...]:
        """
        Label, radio group and an error slot.

        The slot starts hidden and is only ever hidden again on selection
        change, so a missing required choice is never displayed.
        """
        options = tuple(option.label for option in field.options or ())
        return (
            Label(field.label),
            RadioGroup(options),
            ErrorSlot(visible=False, hide_on_change=field.required),
        )

    @staticmethod
    def _build_checkbox(field: FieldSpec) -> Tuple[Widget, ...]:
        toggles = tuple(Toggle(option.label, option.value) for option in field.options or ())
        error = ErrorSlot(required_message(field.label), visible=True) if field.required else None
        return (CheckboxGroup(field.label, toggles, error),)

    @staticmethod
    def _build_dropdown(field: FieldSpec) -> Tuple[Widget, ...]:
        # option values are not carried
        choices = tuple(option.label for option in field.options or ())
        prompt = required_message(field.label) if field.required else None
        return (Label(field.label), Dropdown(choices, prompt))

    @staticmethod
    def _build_description(field: FieldSpec) -> Tuple[Widget, ...]:
        return (RichTextEditor(RichText.from_html(field.label)),)

    @staticmethod
    def build_widgets(field: FieldSpec) -> Tuple[Widget, ...]:
        """
        Dispatch a field to its type-specific builder.

        Args:
            field: Field specification

        Returns:
            Widgets in display order
        """
        field_type = field.field_type

        if field_type in TEXT_INPUT_MODES:
            return FieldWidgetBuilder._build_text_input(field, TEXT_INPUT_MODES[field_type])

        builders: Dict[FieldType, Callable[[FieldSpec], Tuple[Widget, ...]]] = {
            FieldType.RADIO: FieldWidgetBuilder._build_radio,
            FieldType.CHECKBOX: FieldWidgetBuilder._build_checkbox,
            FieldType.DROPDOWN: FieldWidgetBuilder._build_dropdown,
            FieldType.DESCRIPTION: FieldWidgetBuilder._build_description,
        }
        builder = builders.get(field_type)
        if builder is None:
            logger.debug(f"Unknown field type '{field.type}' for '{field.name}', using text input")
            return FieldWidgetBuilder._build_text_input(field, InputMode.TEXT)

        return builder(field)


def build_field(field: FieldSpec, key: Optional[str] = None) -> FieldCluster:
    """
    Build the widget cluster for one field.

    Args:
        field: Field specification
        key: Widget key for the host; defaults to the field uuid or name

    Returns:
        FieldCluster with the field's widgets
    """
    return FieldCluster(
        key=key or f"field_{field.uuid or field.name}",
        field_name=field.name,
        field_uuid=field.uuid,
        field_type=field.field_type,
        widgets=FieldWidgetBuilder.build_widgets(field),
    )
