"""Signup and login form endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from locallink.domain.accounts import service
from locallink.domain.accounts.schemas import (
	SIGNUP_INTERESTS,
	LoginRequest,
	NavigationResponse,
	SignupRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/signup/interests", response_model=List[str])
async def signup_interests() -> List[str]:
	return list(SIGNUP_INTERESTS)


@router.post("/signup", response_model=NavigationResponse)
async def signup(payload: SignupRequest) -> NavigationResponse:
	return await service.submit_signup(payload)


@router.post("/login", response_model=NavigationResponse)
async def login(payload: LoginRequest) -> NavigationResponse:
	return await service.submit_login(payload)
