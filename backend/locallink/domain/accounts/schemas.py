"""Pydantic schemas for the signup and login forms."""

from __future__ import annotations

from typing import Annotated, List, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_MIN_LEN = 6

# Signup offers its own interest list, unrelated to the home screen filter tags
SIGNUP_INTERESTS = (
	"Technology",
	"Sports",
	"Music",
	"Art",
	"Travel",
	"Cooking",
	"Reading",
	"Photography",
)


class SignupRequest(BaseModel):
	name: str
	email: EmailStr
	password: Annotated[str, Field(min_length=PASSWORD_MIN_LEN)]
	interests: List[str] = Field(default_factory=list)

	@field_validator("name")
	def validate_name(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("Please enter your name")
		return value

	@field_validator("interests")
	def validate_interests(cls, value: List[str]) -> List[str]:
		if not value:
			raise ValueError("Please select at least one interest")
		unknown = [item for item in value if item not in SIGNUP_INTERESTS]
		if unknown:
			raise ValueError(f"unknown interests: {', '.join(unknown)}")
		# Selection is a set in the form; keep first-seen order
		return list(dict.fromkeys(value))


class LoginRequest(BaseModel):
	email: EmailStr
	password: Annotated[str, Field(min_length=1)]


class NavigationResponse(BaseModel):
	next_screen: Literal["onboarding", "home"]
