"""
Streamlit materialization of rendered forms.
Turns widget descriptors into Streamlit widgets on the current page.
"""

import streamlit as st
from typing import Any, Dict, List, Optional
import logging

from .descriptors import (
    CheckboxGroup,
    Dropdown,
    ErrorSlot,
    FieldCluster,
    Image,
    InputMode,
    RadioGroup,
    RenderedForm,
    RichTextEditor,
    TextInput,
)
from .rich_text import RichText, StyleKind

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_WIDTH = 720

TOOLBAR_LABELS = {
    StyleKind.BOLD: "B",
    StyleKind.ITALIC: "I",
    StyleKind.UNDERLINE: "U",
    StyleKind.LINK: "Link",
}


class FormView:
    """Materializes RenderedForm descriptors with Streamlit widgets."""

    @staticmethod
    def render(form: RenderedForm, viewport_width: int = DEFAULT_VIEWPORT_WIDTH) -> Dict[str, Any]:
        """
        Render a form on the current Streamlit page.

        Args:
            form: Rendered descriptor tree
            viewport_width: Page width in pixels used to size images

        Returns:
            Dictionary of cluster key -> current widget values
        """
        values: Dict[str, Any] = {}
        if form.is_empty:
            logger.info("Nothing to render, form is empty")
            return values

        if form.title:
            st.title(form.title)

        for section in form.sections:
            for block in section.header:
                FormView._render_block(block, viewport_width)
            for cluster in section.clusters:
                values[cluster.key] = FormView.render_cluster(cluster)

        logger.debug(f"[FormView.render] Rendered {len(values)} fields")
        return values

    @staticmethod
    def _render_block(block, viewport_width: int) -> None:
        if block.widget_type == 'heading':
            st.header(block.text)
        elif block.widget_type == 'paragraph':
            st.write(block.text)
        elif block.widget_type == 'image':
            FormView._render_image(block, viewport_width)
        else:
            logger.warning(f"Unknown header block type: {block.widget_type}")

    @staticmethod
    def _render_image(image: Image, viewport_width: int) -> None:
        # middle column keeps the image centered
        _, center, _ = st.columns([1, 2, 1])
        with center:
            st.image(image.src, width=image.width_for(viewport_width))

    @staticmethod
    def render_cluster(cluster: FieldCluster) -> Any:
        """Render the widgets of one field and return the field's value."""
        value = None
        for position, widget in enumerate(cluster.widgets):
            key = f"{cluster.key}_{position}"
            widget_type = widget.widget_type

            if widget_type == 'prefix_label':
                st.markdown(f"**{widget.text}**")
            elif widget_type == 'label':
                st.markdown(widget.text)
            elif widget_type == 'text_input':
                value = FormView._render_text_input(widget, key)
            elif widget_type == 'radio_group':
                value = FormView._render_radio_group(widget, key)
            elif widget_type == 'error_slot':
                FormView._render_error_slot(widget)
            elif widget_type == 'checkbox_group':
                value = FormView._render_checkbox_group(widget, key)
            elif widget_type == 'dropdown':
                value = FormView._render_dropdown(widget, key)
            elif widget_type == 'rich_text_editor':
                value = FormView._render_rich_text_editor(widget, key)
            else:
                logger.warning(f"Unknown widget type '{widget_type}' in {cluster.key}")
        return value

    @staticmethod
    def _render_text_input(widget: TextInput, key: str) -> Optional[str]:
        """Render a text-family input; the required error shows while it is empty."""
        if widget.mode is InputMode.DATE:
            value = FormView._render_date_input(widget, key)
        elif widget.mode is InputMode.NUMBER:
            value = st.number_input(widget.hint or key, value=None, key=key,
                                    placeholder=widget.hint, label_visibility="collapsed")
        else:
            value = st.text_input(widget.hint or key, key=key, placeholder=widget.hint,
                                  type="password" if widget.masked else "default",
                                  label_visibility="collapsed")

        if widget.error and value in (None, ""):
            st.error(widget.error)
        return value

    @staticmethod
    def _render_date_input(widget: TextInput, key: str) -> str:
        picked = st.date_input(widget.hint or key, value=None, key=key,
                               format="DD/MM/YYYY", label_visibility="collapsed")
        if picked is None:
            return widget.text

        shown = widget.pick_date(picked.year, picked.month - 1, picked.day)
        st.caption(shown.text)
        return shown.text

    @staticmethod
    def _render_radio_group(widget: RadioGroup, key: str) -> Optional[str]:
        return st.radio(key, options=list(widget.options), index=None, key=key,
                        label_visibility="collapsed")

    @staticmethod
    def _render_error_slot(slot: Optional[ErrorSlot]) -> None:
        if slot is not None and slot.visible and slot.text:
            st.error(slot.text)

    @staticmethod
    def _render_checkbox_group(widget: CheckboxGroup, key: str) -> List[str]:
        """Render toggles and return the tags of the checked ones."""
        st.markdown(f"**{widget.header}**")
        checked = []
        for position, toggle in enumerate(widget.toggles):
            if st.checkbox(toggle.label, key=f"{key}_{position}"):
                checked.append(toggle.tag)
        FormView._render_error_slot(widget.error)
        return checked

    @staticmethod
    def _render_dropdown(widget: Dropdown, key: str) -> Optional[str]:
        return st.selectbox(key, options=list(widget.choices), index=None,
                            placeholder=widget.prompt or "Choose an option", key=key,
                            label_visibility="collapsed")

    @staticmethod
    def _render_rich_text_editor(widget: RichTextEditor, key: str) -> RichText:
        """
        Render the editable text, the formatting toolbar and a styled preview.

        The current content lives in session state so typing and toolbar
        actions accumulate across reruns. It is reseeded whenever the
        descriptor's initial content changes, e.g. after switching schemas.
        """
        content_key = f"{key}_content"
        seed_key = f"{key}_seed"
        text_key = f"{key}_text"
        if content_key not in st.session_state or st.session_state.get(seed_key) != widget.content:
            st.session_state[content_key] = widget.content
            st.session_state[seed_key] = widget.content
            st.session_state.pop(text_key, None)
        content: RichText = st.session_state[content_key]

        text = st.text_area(key, value=content.text, key=text_key, label_visibility="collapsed")
        if text is not None and text != content.text:
            content = content.with_text(text)
            st.session_state[content_key] = content
            # selection bounds refer to the previous text
            st.session_state.pop(f"{key}_selection", None)

        start, end = 0, 0
        if content.text:
            start, end = st.slider("Selection", 0, len(content.text), (0, 0), key=f"{key}_selection")

        columns = st.columns(len(widget.toolbar))
        for column, kind in zip(columns, widget.toolbar):
            with column:
                if st.button(TOOLBAR_LABELS[kind], key=f"{key}_{kind.value}"):
                    if kind is StyleKind.LINK:
                        content = content.insert_link(start, end)
                    else:
                        content = content.apply_style(start, end, kind)
                    st.session_state[content_key] = content

        st.markdown(content.to_html(), unsafe_allow_html=True)
        return content


def render_form_view(form: RenderedForm, viewport_width: int = DEFAULT_VIEWPORT_WIDTH) -> Dict[str, Any]:
    """Convenience function for materializing a rendered form."""
    return FormView.render(form, viewport_width)


def resolve_viewport_width(value: Any) -> int:
    """
    Coerce a configured viewport width to a positive pixel count.

    Args:
        value: Raw setting from config.yaml

    Returns:
        The width, or DEFAULT_VIEWPORT_WIDTH when the setting is unusable
    """
    try:
        width = int(value)
    except (ValueError, TypeError):
        logger.warning(f"Invalid viewport_width {value!r}, using {DEFAULT_VIEWPORT_WIDTH}")
        return DEFAULT_VIEWPORT_WIDTH

    if width <= 0:
        logger.warning(f"viewport_width must be positive, using {DEFAULT_VIEWPORT_WIDTH}")
        return DEFAULT_VIEWPORT_WIDTH
    return width
