"""Signup and login handling.

Accounts are not persisted: a valid form simply routes the client to the home
screen, matching the behaviour of the mobile prototype.
"""

from __future__ import annotations

import logging

from locallink.domain.accounts.schemas import LoginRequest, NavigationResponse, SignupRequest
from locallink.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


async def submit_signup(payload: SignupRequest) -> NavigationResponse:
	obs_metrics.inc_account_form("signup", "accepted")
	logger.info(
		"signup accepted",
		extra={"email": payload.email, "interests_count": len(payload.interests)},
	)
	return NavigationResponse(next_screen="home")


async def submit_login(payload: LoginRequest) -> NavigationResponse:
	obs_metrics.inc_account_form("login", "accepted")
	logger.info("login accepted", extra={"email": payload.email})
	return NavigationResponse(next_screen="home")
