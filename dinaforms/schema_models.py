"""
Pydantic models for DinaForms schemas.
Decodes the JSON form description into immutable typed objects.
"""

from enum import Enum
from typing import Any, Optional, Tuple
import logging

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, model_validator

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Field type tags understood by the renderer."""
    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    NUMBER = "number"
    DATE = "date"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    DESCRIPTION = "description"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: Any) -> "FieldType":
        """Resolve a raw type tag, mapping anything unrecognized to UNKNOWN."""
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


# Types whose widgets are built from the field's options
OPTION_FIELD_TYPES = frozenset({FieldType.RADIO, FieldType.CHECKBOX, FieldType.DROPDOWN})


class _SchemaModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore', populate_by_name=True)


class OptionSpec(_SchemaModel):
    """A selectable option: label is displayed, value is stored."""
    label: StrictStr = ""
    value: StrictStr = ""


class FieldSpec(_SchemaModel):
    """One input element of the form."""
    type: StrictStr
    label: StrictStr = ""
    name: StrictStr = ""
    required: StrictBool = False
    uuid: StrictStr = ""
    options: Optional[Tuple[OptionSpec, ...]] = None

    @model_validator(mode='before')
    @classmethod
    def _drop_unused_options(cls, data: Any) -> Any:
        # options only survive on radio, checkbox and dropdown fields
        if isinstance(data, dict) and data.get('options') is not None:
            if FieldType.from_tag(data.get('type')) not in OPTION_FIELD_TYPES:
                logger.debug(f"Ignoring options on field of type {data.get('type')!r}")
                data = {**data, 'options': None}
        return data

    @property
    def field_type(self) -> FieldType:
        return FieldType.from_tag(self.type)


class SectionSpec(_SchemaModel):
    """
    A titled group of fields.

    The closed range [from, to] is over 0-based positions in the schema's
    field sequence. A section whose start is past its end covers nothing.
    """
    title: StrictStr = ""
    from_: StrictInt = Field(alias='from')
    to: StrictInt
    index: StrictInt
    uuid: StrictStr = ""

    def contains(self, position: int) -> bool:
        """Check whether a field position falls inside this section."""
        return self.from_ <= position <= self.to


class FormSchema(_SchemaModel):
    """Parsed form: title plus ordered fields and sections."""
    title: StrictStr = ""
    fields: Tuple[FieldSpec, ...] = ()
    sections: Tuple[SectionSpec, ...] = ()
