"""
Form state for the check-area page.

The page is in exactly one of six states; every user action or
service answer moves it along one of the transitions listed in
TRANSITIONS. Keeping a single state value avoids combinations such as
showing a result while a submission is still running.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from exceptions import FoodDesertError, InvalidTransitionError
from models import Coordinate, FoodDesertResult

logger = logging.getLogger(__name__)

UNABLE_TO_GEOCODE = "Unable to geocode the provided address"
UNEXPECTED_FAILURE = "Something went wrong while checking this area"


class FormState(str, Enum):
    IDLE = "idle"
    AWAITING_GEOLOCATION = "awaiting_geolocation"
    READY_TO_SUBMIT = "ready_to_submit"
    SUBMITTING = "submitting"
    SHOWING_RESULT = "showing_result"
    ERROR = "error"


TRANSITIONS = {
    FormState.IDLE: {FormState.AWAITING_GEOLOCATION, FormState.SUBMITTING},
    FormState.AWAITING_GEOLOCATION: {FormState.READY_TO_SUBMIT, FormState.IDLE},
    FormState.READY_TO_SUBMIT: {FormState.SUBMITTING, FormState.IDLE},
    FormState.SUBMITTING: {FormState.SHOWING_RESULT, FormState.ERROR},
    FormState.SHOWING_RESULT: {
        FormState.SUBMITTING, FormState.AWAITING_GEOLOCATION, FormState.IDLE
    },
    FormState.ERROR: {
        FormState.SUBMITTING, FormState.AWAITING_GEOLOCATION, FormState.IDLE
    },
}

# States from which the submit button may be pressed
SUBMITTABLE_STATES = {
    FormState.IDLE,
    FormState.READY_TO_SUBMIT,
    FormState.SHOWING_RESULT,
    FormState.ERROR,
}


@dataclass
class FormModel:
    """Everything the check-area page needs to render itself."""

    state: FormState = FormState.IDLE
    use_location: bool = False
    address: str = ""
    coordinate: Optional[Coordinate] = None
    result: Optional[FoodDesertResult] = None
    error: Optional[str] = None

    def _move(self, target: FormState) -> None:
        if target != self.state and target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state, target)
        logger.debug(f"Form state {self.state.value} -> {target.value}")
        self.state = target

    @property
    def submit_disabled(self) -> bool:
        return self.state not in SUBMITTABLE_STATES

    @property
    def show_map(self) -> bool:
        return self.coordinate is not None and self.state != FormState.SUBMITTING

    def toggle_location(self, enabled: bool) -> None:
        """Turn "use my location" on or off."""
        if enabled == self.use_location:
            return

        if enabled:
            self._move(FormState.AWAITING_GEOLOCATION)
        else:
            self._move(FormState.IDLE)

        self.use_location = enabled
        self.coordinate = None
        self.result = None
        self.error = None

    def location_acquired(self, coordinate: Coordinate) -> None:
        self._move(FormState.READY_TO_SUBMIT)
        self.coordinate = coordinate

    def location_failed(self, message: str) -> None:
        self._move(FormState.IDLE)
        self.use_location = False
        self.coordinate = None
        self.error = message

    def begin_submit(self, address: str = "") -> None:
        """Start a submission; the submit button is disabled until it ends."""
        if self.submit_disabled:
            raise InvalidTransitionError(self.state, FormState.SUBMITTING)
        self._move(FormState.SUBMITTING)
        self.address = address
        self.error = None
        self.result = None
        if not self.use_location:
            self.coordinate = None

    def submit_succeeded(self, coordinate: Coordinate, result: FoodDesertResult) -> None:
        self._move(FormState.SHOWING_RESULT)
        self.coordinate = coordinate
        self.result = result

    def submit_failed(self, message: str) -> None:
        self._move(FormState.ERROR)
        self.result = None
        self.error = message


def process_submission(
    model: FormModel,
    geocode: Callable[[str], Optional[Coordinate]],
    evaluate: Callable[[Coordinate], FoodDesertResult]
) -> FormModel:
    """
    Finish a submission that has already been started.

    At most two calls are made, one after the other: geocode the address
    (unless the browser location is used), then evaluate the coordinate.

    Args:
        model: Form in the submitting state
        geocode: Address -> Coordinate or None
        evaluate: Coordinate -> FoodDesertResult

    Returns:
        The same model, now showing a result or an error
    """
    if model.state != FormState.SUBMITTING:
        raise InvalidTransitionError(model.state, FormState.SUBMITTING)

    try:
        if model.use_location:
            coordinate = model.coordinate
        else:
            coordinate = geocode(model.address)

        if coordinate is None:
            model.submit_failed(UNABLE_TO_GEOCODE)
            return model

        result = evaluate(coordinate)
    except FoodDesertError as e:
        logger.error(f"Area check failed: {e}")
        model.submit_failed(str(e))
        return model
    except Exception as e:  # noqa: BLE001
        # The form must leave SUBMITTING or every rerun repeats the calls
        logger.exception(f"Unexpected error during area check: {e}")
        model.submit_failed(UNEXPECTED_FAILURE)
        return model

    model.submit_succeeded(coordinate, result)
    return model


def run_check(
    model: FormModel,
    address: str,
    geocode: Callable[[str], Optional[Coordinate]],
    evaluate: Callable[[Coordinate], FoodDesertResult]
) -> FormModel:
    """Start and finish a submission in one go."""
    model.begin_submit(address)
    return process_submission(model, geocode, evaluate)
