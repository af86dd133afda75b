import pytest

from locallink.domain.nearby import state as transitions
from locallink.domain.nearby.models import CURRENT_USER_MARKER_ID, NearbyUser, Position
from locallink.domain.nearby.roster import DEMO_ROSTER
from locallink.domain.nearby.state import (
	ENABLE_LOCATION_MESSAGE,
	NO_MATCHES_MESSAGE,
	HomeState,
	UnknownInterest,
)


def test_initial_state_is_sharing_and_loading():
	state = HomeState()
	assert state.sharing is True
	assert state.loading is True
	assert state.position is None
	assert state.filtered == ()
	assert state.map_message is None


def test_fix_replaces_current_user_marker():
	state = transitions.apply_fix(HomeState(), Position(45.5, -73.5))
	state = transitions.apply_fix(state, Position(45.6, -73.6))
	assert state.position == Position(45.6, -73.6)
	assert len(state.markers) == 1
	marker = state.markers[0]
	assert marker.id == CURRENT_USER_MARKER_ID
	assert marker.label == "Your Location"
	assert marker.position == Position(45.6, -73.6)


def test_transitions_do_not_mutate_previous_snapshot():
	before = HomeState()
	after = transitions.roster_loaded(before, DEMO_ROSTER)
	assert before.roster == ()
	assert after.roster == DEMO_ROSTER


def test_filtered_tracks_roster_and_selection():
	state = transitions.roster_loaded(HomeState(), DEMO_ROSTER)
	assert state.filtered == DEMO_ROSTER
	state = transitions.select_interests(state, {"Basketball": True})
	assert [user.name for user in state.filtered] == ["Maria", "David"]
	state = transitions.select_interests(state, {"Basketball": False})
	assert state.filtered == DEMO_ROSTER


def test_select_rejects_unknown_tags_and_keeps_state():
	state = HomeState()
	with pytest.raises(UnknownInterest) as excinfo:
		transitions.select_interests(state, {"Knitting": True, "AI": True})
	assert excinfo.value.tags == ("Knitting",)
	assert not any(state.selection.values())


def test_selection_snapshot_is_read_only():
	state = HomeState()
	with pytest.raises(TypeError):
		state.selection["AI"] = True  # type: ignore[index]


def test_disable_clears_roster_and_enable_does_not_restore_it():
	state = transitions.roster_loaded(HomeState(), DEMO_ROSTER)
	state = transitions.disable_sharing(state)
	assert state.sharing is False
	assert state.roster == ()
	assert state.filtered == ()
	state = transitions.enable_sharing(state)
	assert state.sharing is True
	assert state.roster == ()


def test_roster_arriving_while_not_sharing_is_discarded():
	state = transitions.disable_sharing(HomeState())
	assert transitions.roster_loaded(state, DEMO_ROSTER).roster == ()


def test_toggle_to_current_state_is_noop():
	state = HomeState()
	assert transitions.enable_sharing(state) is state
	off = transitions.disable_sharing(state)
	assert transitions.disable_sharing(off) is off


def test_messages_after_loading():
	failed = transitions.location_failed(HomeState(), "permission_denied")
	assert failed.location_error == "permission_denied"
	assert failed.map_message == ENABLE_LOCATION_MESSAGE
	assert failed.list_message == NO_MATCHES_MESSAGE

	ready = transitions.apply_fix(transitions.location_ready(HomeState()), Position(1.0, 2.0))
	ready = transitions.roster_loaded(ready, [NearbyUser(id="1", name="Alex", interests=("AI",))])
	assert ready.map_message is None
	assert ready.list_message is None


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (0.0, -181.0), (float("nan"), 0.0)])
def test_position_rejects_invalid_coordinates(lat, lon):
	with pytest.raises(ValueError):
		Position(lat, lon)
