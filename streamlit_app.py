"""
Main Streamlit application for DinaForms.
Loads a JSON form schema from the assets directory and renders it as a form.
"""

import streamlit as st
import logging

from dinaforms.config_loader import get_config, get_config_value, get_logging_level, validate_config
from dinaforms.form_renderer import render_form
from dinaforms.form_view import DEFAULT_VIEWPORT_WIDTH, render_form_view, resolve_viewport_width
from dinaforms.schema_loader import get_schema_info, list_available_schemas, load_selected_schema

# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    log_format = get_config_value('logging', 'format', '%(levelname)s - %(message)s')
    logging.basicConfig(level=get_logging_level(log_level_str), format=log_format)
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'DinaForms')
app_version = get_config_value('app', 'version', 'Unknown')
logger.info(f"Starting app version: {app_version}")

# Page configuration
st.set_page_config(
    page_title=page_title,
    page_icon="📝",
    layout="centered"
)


def main():
    """Main application entry point."""
    if not validate_config(get_config()):
        logger.warning("Configuration has invalid settings, defaults are used where they cannot be read")

    schema_name = render_sidebar()
    render_form_screen(schema_name)


def render_sidebar():
    """Render the schema picker and return the selected asset name."""
    assets_dir = get_config_value('schema', 'assets_dir', 'assets')
    primary_schema = get_config_value('schema', 'primary_schema', 'all-fields.json')
    available = list_available_schemas(assets_dir)

    with st.sidebar:
        st.header("Form")
        if not available:
            st.caption(f"No schemas found in {assets_dir}/")
            return primary_schema

        index = available.index(primary_schema) if primary_schema in available else 0
        return st.selectbox("Schema:", options=available, index=index)


def render_form_screen(schema_name):
    """Load, render and materialize the selected schema once per run."""
    schema = load_selected_schema(schema_name, get_config())

    if schema is not None:
        info = get_schema_info(schema)
        logger.debug(f"Schema info: {info}")
        if info['unsectioned_fields']:
            logger.debug(f"Fields outside every section: {info['unsectioned_fields']}")

    viewport_width = resolve_viewport_width(get_config_value('ui', 'viewport_width', DEFAULT_VIEWPORT_WIDTH))
    render_form_view(render_form(schema), viewport_width)


if __name__ == "__main__":
    main()
