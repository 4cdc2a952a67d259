import pytest

from exceptions import InvalidTransitionError, UpstreamError, ValidationError
from form_state import UNABLE_TO_GEOCODE, UNEXPECTED_FAILURE, FormModel, FormState, process_submission, run_check
from models import Coordinate, FoodDesertResult, FoodSource

HOME = Coordinate(latitude=40.73, longitude=-73.93)
RESULT = FoodDesertResult(is_food_desert=False, food_sources=[FoodSource(name="Key Food", distance=500)])


class Recorder:
    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error
        self.calls = []

    def __call__(self, arg):
        self.calls.append(arg)
        if self.error is not None:
            raise self.error
        return self.value


def test_initial_state_is_idle():
    form = FormModel()
    assert form.state == FormState.IDLE
    assert form.submit_disabled is False
    assert form.show_map is False


def test_location_flow_reaches_ready_to_submit():
    form = FormModel()

    form.toggle_location(True)
    assert form.state == FormState.AWAITING_GEOLOCATION
    assert form.submit_disabled is True

    form.location_acquired(HOME)
    assert form.state == FormState.READY_TO_SUBMIT
    assert form.coordinate == HOME
    assert form.show_map is True


def test_location_failure_returns_to_idle_with_message():
    form = FormModel()
    form.toggle_location(True)

    form.location_failed("Error: User denied Geolocation")

    assert form.state == FormState.IDLE
    assert form.use_location is False
    assert form.error == "Error: User denied Geolocation"


def test_toggle_off_clears_coordinate():
    form = FormModel()
    form.toggle_location(True)
    form.location_acquired(HOME)

    form.toggle_location(False)

    assert form.state == FormState.IDLE
    assert form.coordinate is None


def test_address_submission_shows_result():
    geocode = Recorder(value=HOME)
    evaluate = Recorder(value=RESULT)

    form = run_check(FormModel(), "350 5th Ave", geocode, evaluate)

    assert form.state == FormState.SHOWING_RESULT
    assert form.result == RESULT
    assert form.coordinate == HOME
    assert form.error is None
    assert geocode.calls == ["350 5th Ave"]
    assert evaluate.calls == [HOME]


def test_location_submission_skips_geocoding():
    form = FormModel()
    form.toggle_location(True)
    form.location_acquired(HOME)
    geocode = Recorder(value=Coordinate(0, 0))
    evaluate = Recorder(value=RESULT)

    run_check(form, "", geocode, evaluate)

    assert form.state == FormState.SHOWING_RESULT
    assert geocode.calls == []
    assert evaluate.calls == [HOME]


def test_unresolvable_address_never_reaches_evaluator():
    evaluate = Recorder(value=RESULT)

    form = run_check(FormModel(), "zzzz", Recorder(value=None), evaluate)

    assert form.state == FormState.ERROR
    assert form.error == UNABLE_TO_GEOCODE
    assert evaluate.calls == []


def test_evaluator_failure_shows_error_and_allows_retry():
    evaluate = Recorder(error=UpstreamError("Mapbox API responded with status 500"))

    form = run_check(FormModel(), "Main St", Recorder(value=HOME), evaluate)

    assert form.state == FormState.ERROR
    assert "500" in form.error
    assert form.submit_disabled is False

    run_check(form, "Main St", Recorder(value=HOME), Recorder(value=RESULT))
    assert form.state == FormState.SHOWING_RESULT
    assert form.error is None


def test_geocoding_validation_error_is_shown():
    form = run_check(FormModel(), "", Recorder(error=ValidationError("Address is required")), Recorder())

    assert form.state == FormState.ERROR
    assert form.error == "Address is required"


def test_submit_disabled_while_submitting():
    form = FormModel()
    form.begin_submit("Main St")

    assert form.state == FormState.SUBMITTING
    assert form.submit_disabled is True
    with pytest.raises(InvalidTransitionError):
        form.begin_submit("Main St")


def test_cannot_toggle_location_while_submitting():
    form = FormModel()
    form.begin_submit("Main St")

    with pytest.raises(InvalidTransitionError):
        form.toggle_location(True)


def test_cannot_submit_while_awaiting_location():
    form = FormModel()
    form.toggle_location(True)

    with pytest.raises(InvalidTransitionError):
        form.begin_submit()


def test_process_submission_requires_submitting_state():
    with pytest.raises(InvalidTransitionError):
        process_submission(FormModel(), Recorder(), Recorder())


def test_location_cannot_arrive_when_not_requested():
    with pytest.raises(InvalidTransitionError):
        FormModel().location_acquired(HOME)


def test_new_submission_clears_previous_result():
    form = run_check(FormModel(), "Main St", Recorder(value=HOME), Recorder(value=RESULT))

    form.begin_submit("Elm St")

    assert form.result is None
    assert form.coordinate is None
    assert form.show_map is False


@pytest.mark.parametrize("geocode, evaluate", [
    (Recorder(error=KeyError("center")), Recorder(value=RESULT)),
    (Recorder(value=HOME), Recorder(error=ValueError("Expecting value"))),
])
def test_unexpected_error_moves_to_error_state(geocode, evaluate):
    form = run_check(FormModel(), "Main St", geocode, evaluate)

    assert form.state == FormState.ERROR
    assert form.error == UNEXPECTED_FAILURE
    assert form.submit_disabled is False

    # The form can be submitted again; nothing is retried on its own
    form.begin_submit("Main St")
    assert form.state == FormState.SUBMITTING
