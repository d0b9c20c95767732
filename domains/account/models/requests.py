"""
Request bodies for the account forms (login, registration, profile edit,
contact and waitlist).

Each class is the declarative constraint table for one form; they are
evaluated by realty_frontend.validators.validate_form.
"""

from typing import ClassVar, Literal, Optional

from pydantic import EmailStr, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from domains.account.models.session import UserType
from domains.base import CamelModel, ErrorMessages, check_url


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    error_messages: ClassVar[ErrorMessages] = {
        "username": "Username is required",
        "password": "Password is required",
    }


class RegistrationRequest(CamelModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., min_length=6)
    email: EmailStr
    full_name: str = Field(..., min_length=3)
    user_type: UserType
    phone_number: Optional[str] = None

    error_messages: ClassVar[ErrorMessages] = {
        "username": "Username must be at least 3 characters",
        "password": "Password must be at least 6 characters",
        "confirmPassword": {
            "missing": "Confirm password is required",
            "string_too_short": "Confirm password is required",
        },
        "email": "Please enter a valid email address",
        "fullName": "Full name is required",
        "userType": "Please select a user type",
    }

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        # password failed its own checks: that error is enough
        password = info.data.get("password")
        if password is not None and v != password:
            raise PydanticCustomError("password_mismatch", "Passwords do not match")
        return v


class ProfileUpdateRequest(CamelModel):
    """PATCH body for /api/users/:id; only the fields provided are sent."""

    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = None
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None

    error_messages: ClassVar[ErrorMessages] = {
        "fullName": "Full name must be at least 2 characters",
        "profileImage": "Please provide a valid image URL",
    }

    @field_validator("profile_image")
    @classmethod
    def empty_or_url(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return check_url(v)
        return v


class ContactRequest(CamelModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    message: str = Field(..., min_length=10)

    error_messages: ClassVar[ErrorMessages] = {
        "name": "Name must be at least 2 characters.",
        "email": "Please enter a valid email address.",
        "phone": "Please enter a valid phone number.",
        "message": "Message must be at least 10 characters.",
    }


class WaitlistRequest(CamelModel):
    full_name: str = Field(..., min_length=2)
    email: EmailStr
    property_interest: str = Field(..., min_length=1)
    agreed_to_terms: Literal[True]

    error_messages: ClassVar[ErrorMessages] = {
        "fullName": "Please enter your full name",
        "email": "Please enter a valid email address",
        "propertyInterest": "Please select your property interest",
        "agreedToTerms": "You must agree to the terms",
    }
