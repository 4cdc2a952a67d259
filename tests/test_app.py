from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import api_client
import config
import geocoder
from form_state import FormState

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture()
def sessions(monkeypatch, dummy_session):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    monkeypatch.setenv("MAPBOX_PUBLIC_TOKEN", "pk.test")
    monkeypatch.setenv("EVALUATOR_URL", "http://evaluator.test")
    config.get_settings.cache_clear()

    geocode_session = dummy_session
    evaluator_session = type(dummy_session)()
    monkeypatch.setattr(geocoder, "_SESSION", geocode_session)
    monkeypatch.setattr(api_client, "_SESSION", evaluator_session)

    yield geocode_session, evaluator_session

    config.get_settings.cache_clear()


def submit_address(at, address):
    at.text_input(key="address").set_value(address)
    at.button[0].click()
    return at.run()


def test_page_renders_enabled_form(sessions):
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()

    assert not at.exception
    assert at.checkbox(key="use_location").value is False
    assert at.button[0].label == "Check Area"
    assert at.button[0].disabled is False
    assert at.session_state["form"].state == FormState.IDLE


def test_address_check_shows_verdict(sessions):
    geocode_session, evaluator_session = sessions
    geocode_session.respond(payload={"features": [{"center": [-73.93, 40.73]}]})
    evaluator_session.respond(payload={
        "isFoodDesert": True,
        "foodSources": [{"name": "Far Market", "distance": 2500}],
    })

    at = submit_address(AppTest.from_file(APP_PATH, default_timeout=30).run(), "Main St")

    assert not at.exception
    assert at.session_state["form"].state == FormState.SHOWING_RESULT
    assert len(geocode_session.calls) == 1
    assert evaluator_session.calls[0][1] == {"latitude": 40.73, "longitude": -73.93}
    assert not at.error


def test_unreadable_reply_shows_error_and_keeps_form_editable(sessions):
    geocode_session, evaluator_session = sessions
    geocode_session.respond(status_code=200, payload=None, text="<html>")

    at = submit_address(AppTest.from_file(APP_PATH, default_timeout=30).run(), "Main St")

    assert not at.exception
    assert at.session_state["form"].state == FormState.ERROR
    assert at.error[0].value == "Unexpected response from the geocoding service"
    assert at.button[0].disabled is False
    assert at.checkbox(key="use_location").disabled is False

    # A later rerun does not repeat the request on its own
    at.run()
    assert len(geocode_session.calls) == 1
    assert evaluator_session.calls == []


def test_no_match_reports_unable_to_geocode(sessions):
    geocode_session, evaluator_session = sessions
    geocode_session.respond(payload={"features": []})

    at = submit_address(AppTest.from_file(APP_PATH, default_timeout=30).run(), "Nowhere")

    assert at.error[0].value == "Unable to geocode the provided address"
    assert evaluator_session.calls == []
