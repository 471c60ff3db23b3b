from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import date, datetime
from typing import List, Optional

# Matches String(50) on users.username
USERNAME_MAX_LENGTH = 50


def _not_blank(value: str, field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f'{field} is required')
    return value


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    """
    Registration payload.

    Blank checks and the column length live here. The password length
    rule and uniqueness are enforced by the credential store so they
    apply to every caller.
    """
    username: str = Field(max_length=USERNAME_MAX_LENGTH)
    password: str
    confirm_password: str

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        return _strip(v)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _not_blank(v, 'Username')

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _not_blank(v, 'Password')


class LoginRequest(BaseModel):
    """Username is stripped the same way registration stores it."""
    username: str
    password: str

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        return _strip(v)

    @field_validator('username', 'password')
    @classmethod
    def validate_present(cls, v: str) -> str:
        return _not_blank(v, 'Username and password')


class ResetPasswordRequest(BaseModel):
    """
    Password reset payload.

    The caller re-proves the current password instead of holding a session.
    """
    username: str
    current_password: str
    new_password: str = Field(min_length=6, max_length=100)
    confirm_password: str

    @field_validator('username', mode='before')
    @classmethod
    def strip_username(cls, v):
        return _strip(v)

    @field_validator('username', 'current_password', 'confirm_password')
    @classmethod
    def validate_present(cls, v: str) -> str:
        return _not_blank(v, 'Field')

    def passwords_match(self) -> bool:
        return self.new_password == self.confirm_password


class UserResponse(BaseModel):
    """
    Safe user representation for API responses.

    Critical: Never include password_hash in any response.
    """
    id: int
    username: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UsernameAvailability(BaseModel):
    username: str
    available: bool


class DiaryCreate(BaseModel):
    title: str = Field(max_length=200)
    content: str
    entry_date: Optional[date] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _not_blank(v, 'Title')

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _not_blank(v, 'Content')


class DiaryUpdate(DiaryCreate):
    """Same fields as creation; a missing entry_date keeps the stored one."""


class DiaryResponse(BaseModel):
    id: int
    title: str
    content: str
    entry_date: date
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    """
    One page of the owner's diaries plus everything the pager needs.

    total_elements counts matches under the current search,
    total_diaries counts all of the owner's entries.
    """
    diaries: List[DiaryResponse]
    search: Optional[str] = None
    current_page: int
    total_pages: int
    has_previous: bool
    has_next: bool
    page_size: int
    total_elements: int
    total_diaries: int
    username: str


class MessageResponse(BaseModel):
    """
    Generic message response for operations without specific return data.
    """
    message: str
