"""
Oasis - Streamlit Application

Lets a user check whether an address, or their current location,
lies in a food desert: no food source within one mile.
"""

import logging
from functools import partial

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from api_client import request_food_desert_check
from config import Config, get_settings
from exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    LocationError,
    UnsupportedCapabilityError
)
from form_state import FormModel, FormState, process_submission
from geocoder import geocode_address
from location import GEOLOCATION_COMPONENT_KEY, acquire_location
from utils.logger_config import setup_logging
from utils.map_builder import create_result_map

settings = get_settings()

# Configure logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=Config.APP_TITLE,
    page_icon=Config.APP_ICON,
    layout="centered"
)

# Custom CSS
st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #111827;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #374151;
        margin-bottom: 2rem;
    }
    .verdict-good {
        background-color: #d4edda;
        border-left: 5px solid #28a745;
        padding: 1rem;
        border-radius: 0.5rem;
        margin: 1rem 0;
    }
    .verdict-desert {
        background-color: #f8d7da;
        border-left: 5px solid #dc3545;
        padding: 1rem;
        border-radius: 0.5rem;
        margin: 1rem 0;
    }
    </style>
""", unsafe_allow_html=True)


def initialize_session_state():
    """Initialize session state variables."""
    if 'form' not in st.session_state:
        st.session_state.form = FormModel()
    if 'geolocation_request' not in st.session_state:
        st.session_state.geolocation_request = 0


def get_form() -> FormModel:
    return st.session_state.form


def on_toggle_location():
    """Checkbox callback; runs before the script reruns."""
    enabled = st.session_state.use_location
    try:
        get_form().toggle_location(enabled)
    except InvalidTransitionError as e:
        logger.warning(f"Ignoring location toggle: {e}")
        return
    if enabled:
        st.session_state.geolocation_request += 1


def render_header():
    """Render the application header."""
    st.markdown(f'<div class="main-header">{Config.APP_ICON} Welcome to {Config.APP_TITLE}</div>',
                unsafe_allow_html=True)
    st.markdown(f'<div class="sub-header">{Config.APP_DESCRIPTION}</div>',
                unsafe_allow_html=True)


def update_location(form: FormModel):
    """Collect the browser position while waiting for one."""
    if form.state != FormState.AWAITING_GEOLOCATION:
        return

    key = f"{GEOLOCATION_COMPONENT_KEY}_{st.session_state.geolocation_request}"
    try:
        coordinate = acquire_location(key)
    except (LocationError, UnsupportedCapabilityError) as e:
        form.location_failed(str(e))
        st.rerun()

    if coordinate is not None:
        form.location_acquired(coordinate)
        st.rerun()

    st.info("Waiting for your browser to share its location...")


def render_form(form: FormModel):
    """Render the check-area form."""
    st.subheader("Check Your Area")

    # Keep the checkbox in step with the form, which may have turned it off
    st.session_state.use_location = form.use_location
    st.checkbox(
        "Use my current location",
        key="use_location",
        on_change=on_toggle_location,
        disabled=form.state == FormState.SUBMITTING
    )

    update_location(form)

    with st.form("check_area"):
        address = st.text_input(
            "Address",
            key="address",
            disabled=form.use_location,
            placeholder="e.g., 350 5th Ave, New York, NY"
        )

        submitted = st.form_submit_button(
            "Loading..." if form.state == FormState.SUBMITTING else "Check Area",
            type="primary",
            disabled=form.submit_disabled,
            use_container_width=True
        )

    if form.error:
        st.error(form.error)

    if submitted and not form.submit_disabled:
        if not form.use_location and not address.strip():
            st.error("Address is required")
            return
        form.begin_submit(address)
        st.rerun()


def process_pending_submission(form: FormModel, public_token: str):
    """Run the geocode and evaluator calls for a started submission."""
    if form.state != FormState.SUBMITTING:
        return

    with st.spinner("Checking your area..."):
        process_submission(
            form,
            geocode=partial(
                geocode_address,
                access_token=public_token,
                timeout=settings.request_timeout
            ),
            evaluate=partial(
                request_food_desert_check,
                base_url=settings.evaluator_url,
                timeout=settings.request_timeout
            )
        )

    st.rerun()


def render_result(form: FormModel):
    """Render the verdict and nearby food sources."""
    if form.state != FormState.SHOWING_RESULT or form.result is None:
        return

    result = form.result

    st.subheader("Area Information")

    if result.is_food_desert:
        st.markdown(
            """
            <div class="verdict-desert">
                <h4>🔴 Food Desert</h4>
                <p>No food source was found within one mile of this location.</p>
            </div>
            """,
            unsafe_allow_html=True
        )
    else:
        st.markdown(
            """
            <div class="verdict-good">
                <h4>🟢 Not a Food Desert</h4>
                <p>At least one food source is within one mile of this location.</p>
            </div>
            """,
            unsafe_allow_html=True
        )

    if not result.food_sources:
        st.write("No nearby food sources were returned.")
        return

    rows = [
        {
            'Name': source.name,
            'Category': source.category.replace(',', ', ').title() if source.category else '',
            'Distance (m)': round(source.distance) if source.distance is not None else None,
            'Address': source.address,
        }
        for source in result.food_sources
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


def render_map(form: FormModel, public_token: str):
    """Render the map centred on the resolved location."""
    if not form.show_map:
        return

    m = create_result_map(form.coordinate, public_token, form.result)
    st_folium(m, width=700, height=Config.MAP_HEIGHT, returned_objects=[], key="result_map")


def main():
    """Main application function."""
    initialize_session_state()
    render_header()

    try:
        public_token = settings.require_public_token()
    except ConfigurationError as e:
        logger.error(str(e))
        st.error(str(e))
        st.stop()

    form = get_form()

    render_form(form)
    process_pending_submission(form, public_token)
    render_map(form, public_token)
    render_result(form)


if __name__ == "__main__":
    main()
