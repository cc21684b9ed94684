"""
Unit tests for form_renderer module.
"""

import json
import pytest
from unittest.mock import patch

from dinaforms.descriptors import Heading, Paragraph, RenderedForm, TextInput
from dinaforms.form_renderer import FormRenderer, render_form, render_form_from_text
from dinaforms.schema_loader import load
from dinaforms.schema_models import FieldSpec, FormSchema, SectionSpec


def make_schema(field_count, sections, title="Form"):
    """Schema with text fields f0..fN and the given (from, to, index) sections."""
    return FormSchema(
        title=title,
        fields=tuple(FieldSpec(type="text", label=f"F{i}", name=f"f{i}", uuid=f"u{i}")
                     for i in range(field_count)),
        sections=tuple(SectionSpec(title=f"<h1>S{index}</h1>", from_=start, to=end, index=index,
                                   uuid=f"s{position}")
                       for position, (start, end, index) in enumerate(sections)),
    )


def field_names(section):
    return [cluster.field_name for cluster in section.clusters]


class TestMapFieldsToSections:
    """Test assignment of field positions to sections."""

    def test_simple_partition(self):
        schema = make_schema(4, [(0, 1, 0), (2, 3, 1)])

        assert FormRenderer.map_fields_to_sections(schema.fields, schema.sections) == {
            0: 0, 1: 0, 2: 1, 3: 1
        }

    def test_overlap_first_section_wins(self):
        schema = make_schema(4, [(0, 2, 0), (1, 3, 1)])

        mapping = FormRenderer.map_fields_to_sections(schema.fields, schema.sections)

        assert mapping == {0: 0, 1: 0, 2: 0, 3: 1}

    def test_range_clipped_to_field_count(self):
        schema = make_schema(2, [(-3, 10, 0)])

        assert FormRenderer.map_fields_to_sections(schema.fields, schema.sections) == {0: 0, 1: 0}

    def test_uncovered_fields_left_out(self):
        schema = make_schema(5, [(1, 2, 0)])

        assert FormRenderer.map_fields_to_sections(schema.fields, schema.sections) == {1: 0, 2: 0}

    def test_reversed_range_covers_nothing(self):
        schema = make_schema(3, [(2, 0, 0)])

        assert FormRenderer.map_fields_to_sections(schema.fields, schema.sections) == {}


class TestRenderForm:
    """Test the complete render pass."""

    def test_sections_partition_fields_in_order(self):
        """Test that every covered field lands in exactly one section, in schema order."""
        schema = make_schema(6, [(0, 2, 0), (3, 5, 1)])

        form = render_form(schema)

        assert [field_names(s) for s in form.sections] == [["f0", "f1", "f2"], ["f3", "f4", "f5"]]
        assert [c.key for c in form.clusters()] == [f"field_{i}" for i in range(6)]

    def test_sections_ordered_by_index(self):
        schema = make_schema(4, [(2, 3, 1), (0, 1, 0)])

        form = render_form(schema)

        assert [s.index for s in form.sections] == [0, 1]
        assert field_names(form.sections[0]) == ["f0", "f1"]
        assert field_names(form.sections[1]) == ["f2", "f3"]

    def test_equal_index_keeps_schema_order(self):
        schema = make_schema(2, [(1, 1, 0), (0, 0, 0)])

        form = render_form(schema)

        assert [s.uuid for s in form.sections] == ["s0", "s1"]

    def test_dropped_fields_not_rendered(self):
        schema = make_schema(5, [(0, 1, 0), (3, 3, 1)])

        form = render_form(schema)

        assert [c.field_name for c in form.clusters()] == ["f0", "f1", "f3"]

    def test_overlapping_field_rendered_once(self):
        schema = make_schema(3, [(0, 1, 0), (1, 2, 1)])

        form = render_form(schema)

        assert field_names(form.sections[0]) == ["f0", "f1"]
        assert field_names(form.sections[1]) == ["f2"]

    def test_empty_section_keeps_header(self):
        schema = make_schema(2, [(0, 1, 0), (5, 6, 1)])

        form = render_form(schema)

        assert len(form.sections) == 2
        assert form.sections[1].clusters == ()
        assert form.sections[1].header == (Heading("S1"),)

    def test_header_blocks_come_before_fields(self):
        schema = make_schema(1, [(0, 0, 0)])

        form = render_form(schema)
        widgets = list(form.widgets())

        assert widgets[0] == Heading("S0")
        assert isinstance(widgets[2], TextInput)

    def test_section_metadata(self):
        form = render_form(make_schema(1, [(0, 0, 7)], title="My form"))

        assert form.title == "My form"
        assert form.sections[0].index == 7
        assert form.sections[0].uuid == "s0"

    def test_none_schema_renders_empty_form(self):
        form = render_form(None)

        assert form == RenderedForm.empty()
        assert form.is_empty

    def test_schema_without_sections_renders_nothing(self):
        form = render_form(make_schema(3, []))

        assert form.is_empty
        assert form.clusters() == ()

    def test_render_is_pure(self):
        schema = make_schema(4, [(0, 1, 0), (2, 3, 1)])

        assert render_form(schema) == render_form(schema)


class TestRenderFormFromText:
    """Test rendering straight from schema text."""

    def test_valid_text(self):
        raw = json.dumps({
            "title": "T",
            "fields": [{"type": "text", "label": "Name"}],
            "sections": [{"title": "<p>Intro</p>", "from": 0, "to": 0, "index": 0}],
        })

        form = render_form_from_text(raw)

        assert form.sections[0].header == (Paragraph("Intro"),)
        assert len(form.clusters()) == 1

    def test_malformed_text_renders_empty_form(self):
        with patch("dinaforms.form_renderer.handle_form_error") as mock_handle:
            form = render_form_from_text('{"fields": [')

        assert form.is_empty
        mock_handle.assert_called_once()

    @pytest.mark.parametrize("raw", [None, ""])
    def test_missing_text_renders_empty_form(self, raw):
        assert render_form_from_text(raw).is_empty

    def test_matches_render_of_loaded_schema(self):
        raw = json.dumps({
            "fields": [{"type": "dropdown", "label": "City", "options": [{"label": "X", "value": "x"}]}],
            "sections": [{"from": 0, "to": 0, "index": 0}],
        })

        assert render_form_from_text(raw) == render_form(load(raw))
