"""
Form renderer for DinaForms.
Groups schema fields into sections and builds the descriptor tree.
"""

from typing import Dict, List, Optional, Sequence, Tuple
import logging

from .descriptors import FieldCluster, RenderedForm, RenderedSection
from .exceptions import ParseError, handle_form_error
from .field_builders import build_field
from .schema_loader import load
from .schema_models import FieldSpec, FormSchema, SectionSpec
from .section_header import parse_section_header

logger = logging.getLogger(__name__)


class FormRenderer:
    """Renders a parsed schema into an immutable RenderedForm."""

    @staticmethod
    def map_fields_to_sections(fields: Sequence[FieldSpec],
                               sections: Sequence[SectionSpec]) -> Dict[int, int]:
        """
        Map each field position to the list position of its section.

        When ranges overlap the first matching section in schema order
        wins. Positions covered by no section are left out.

        Args:
            fields: Schema fields
            sections: Schema sections

        Returns:
            Dictionary of field position -> section position
        """
        mapping: Dict[int, int] = {}
        for section_position, section in enumerate(sections):
            start = max(section.from_, 0)
            stop = min(section.to, len(fields) - 1)
            for field_position in range(start, stop + 1):
                if field_position in mapping:
                    logger.debug(f"Field {field_position} already belongs to section "
                                 f"{sections[mapping[field_position]].index}, "
                                 f"ignoring overlap with section {section.index}")
                    continue
                mapping[field_position] = section_position

        dropped = len(fields) - len(mapping)
        if dropped:
            logger.debug(f"{dropped} field(s) are outside every section and will not be rendered")
        return mapping

    @staticmethod
    def group_fields(schema: FormSchema) -> Dict[int, List[Tuple[int, FieldSpec]]]:
        """Group (position, field) pairs by section list position, in field order."""
        mapping = FormRenderer.map_fields_to_sections(schema.fields, schema.sections)
        grouped: Dict[int, List[Tuple[int, FieldSpec]]] = {}
        for field_position, field in enumerate(schema.fields):
            section_position = mapping.get(field_position)
            if section_position is not None:
                grouped.setdefault(section_position, []).append((field_position, field))
        return grouped

    @staticmethod
    def render_section(section: SectionSpec,
                       fields: Sequence[Tuple[int, FieldSpec]]) -> RenderedSection:
        clusters: Tuple[FieldCluster, ...] = tuple(
            build_field(field, key=f"field_{position}") for position, field in fields
        )
        return RenderedSection(
            index=section.index,
            uuid=section.uuid,
            header=parse_section_header(section.title),
            clusters=clusters,
        )

    @staticmethod
    def render_form(schema: Optional[FormSchema]) -> RenderedForm:
        """
        Render a schema into sections of header blocks and field clusters.

        Sections are ordered by their index (ties keep schema order).

        Args:
            schema: Parsed schema or None

        Returns:
            RenderedForm, empty when there is no schema
        """
        if schema is None:
            return RenderedForm.empty()

        grouped = FormRenderer.group_fields(schema)
        ordered = sorted(enumerate(schema.sections), key=lambda item: item[1].index)

        sections = tuple(
            FormRenderer.render_section(section, grouped.get(section_position, []))
            for section_position, section in ordered
        )

        form = RenderedForm(title=schema.title, sections=sections)
        logger.info(f"Rendered form '{schema.title}': {len(sections)} sections, "
                    f"{len(form.clusters())} of {len(schema.fields)} fields")
        return form


def render_form(schema: Optional[FormSchema]) -> RenderedForm:
    """Convenience function for rendering a parsed schema."""
    return FormRenderer.render_form(schema)


def render_form_from_text(raw_text: Optional[str]) -> RenderedForm:
    """
    Decode schema text and render it; malformed input gives an empty form.

    Args:
        raw_text: JSON schema text

    Returns:
        RenderedForm
    """
    try:
        schema = load(raw_text)
    except ParseError as e:
        handle_form_error(e, "parsing schema text")
        return RenderedForm.empty()
    return FormRenderer.render_form(schema)
