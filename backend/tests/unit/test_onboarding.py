import pytest

from locallink.domain.launch.onboarding import PAGES, advance


def test_four_pages_in_order():
	assert [page.title for page in PAGES] == [
		"Find People Nearby",
		"Connect Through Interests",
		"Real-time Location",
		"Start Your Journey",
	]


def test_advance_moves_forward_and_flags_last_page():
	step = advance(0)
	assert (step.page, step.is_last, step.complete) == (1, False, False)
	step = advance(2)
	assert (step.page, step.is_last, step.complete) == (3, True, False)


def test_advance_past_last_page_completes():
	step = advance(len(PAGES) - 1)
	assert step.complete is True
	assert step.page == len(PAGES) - 1


@pytest.mark.parametrize("page", [-1, len(PAGES)])
def test_advance_rejects_unknown_page(page):
	with pytest.raises(IndexError):
		advance(page)
