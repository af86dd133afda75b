import pytest
from pydantic import ValidationError

from locallink.domain.accounts import service
from locallink.domain.accounts.schemas import LoginRequest, SignupRequest


def _signup(**overrides):
	data = {
		"name": "Alex Doe",
		"email": "alex@example.com",
		"password": "secret1",
		"interests": ["Music"],
	}
	data.update(overrides)
	return SignupRequest(**data)


def test_valid_signup_trims_name_and_dedupes_interests():
	payload = _signup(name="  Alex  ", interests=["Music", "Art", "Music"])
	assert payload.name == "Alex"
	assert payload.interests == ["Music", "Art"]


@pytest.mark.parametrize(
	"overrides",
	[
		{"name": "   "},
		{"email": "not-an-email"},
		{"password": "12345"},
		{"interests": []},
		{"interests": ["Knitting"]},
	],
)
def test_invalid_signup_is_rejected(overrides):
	with pytest.raises(ValidationError):
		_signup(**overrides)


def test_signup_interests_are_independent_of_home_filter_tags():
	# "AI" is a home screen filter tag, not a signup interest
	with pytest.raises(ValidationError):
		_signup(interests=["AI"])


def test_login_requires_password():
	with pytest.raises(ValidationError):
		LoginRequest(email="alex@example.com", password="")


@pytest.mark.asyncio
async def test_accepted_forms_route_home():
	assert (await service.submit_signup(_signup())).next_screen == "home"
	login = LoginRequest(email="alex@example.com", password="x")
	assert (await service.submit_login(login)).next_screen == "home"
