"""Request bodies, checked at the API boundary before reaching the services."""
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError as PydanticValidationError,
    conint,
    field_validator,
    model_validator,
)

from errors import ValidationError
from utils import parse_timestamp

NAME_MAX_LENGTH = 100
USERNAME_MAX_LENGTH = 150

Weekday = conint(strict=True, ge=0, le=6)

# Messages for type and range errors, keyed by field
FIELD_MESSAGES = {
    'name': 'Habit name cannot be more than 100 characters',
    'icon_id': 'Icon ID must be a number',
    'repeats': 'Repeats must be an array of day numbers (0-6, where Monday=0)',
    'username': 'Please add a username',
    'password': 'Password must be at least 6 characters',
    'notifications_enabled': 'notifications_enabled must be true or false',
}

MISSING_MESSAGES = {
    'name': 'Please add a habit name',
    'repeats': 'Please provide repeats array or a single day (0-6, Monday=0)',
    'username': 'Please add a username',
    'password': 'Password must be at least 6 characters',
    'notifications_enabled': 'notifications_enabled must be true or false',
}


def _require_object(data):
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _to_api_error(exc):
    """First pydantic error as an ``errors.ValidationError`` naming its field."""
    error = exc.errors(include_url=False)[0]
    loc = error.get('loc', ())
    field = loc[0] if loc else None
    if error['type'] == 'missing':
        message = MISSING_MESSAGES.get(field, 'Please provide all required fields')
    elif error['type'] == 'value_error':
        message = str(error['ctx']['error'])
    else:
        message = FIELD_MESSAGES.get(field, error['msg'])
    return ValidationError(message, field=field)


class Payload(BaseModel):

    @classmethod
    def from_json(cls, data):
        try:
            return cls.model_validate(_require_object(data))
        except PydanticValidationError as exc:
            raise _to_api_error(exc) from None


class HabitPayload(Payload):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: StrictStr = Field(max_length=NAME_MAX_LENGTH)
    created_time: StrictStr
    target_time: StrictStr
    icon_id: StrictInt
    repeats: List[Weekday]

    @model_validator(mode='before')
    @classmethod
    def single_day(cls, data):
        """A lone ``day`` stands in for ``repeats`` when repeats is absent."""
        day = data.get('day')
        if data.get('repeats') is None and isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6:
            data = dict(data, repeats=[day])
        return data

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        if not value:
            raise ValueError('Please add a habit name')
        return value

    @field_validator('created_time', 'target_time')
    @classmethod
    def validate_timestamp(cls, value, info):
        if not value:
            raise ValueError('Please provide all required fields')
        try:
            parse_timestamp(value)
        except ValueError:
            raise ValueError(f'Please provide a valid UTC timestamp for {info.field_name}')
        return value

    @field_validator('repeats')
    @classmethod
    def sort_repeats(cls, value):
        return sorted(set(value))


class CompletionPayload(Payload):
    timestamp: Optional[str] = None

    @field_validator('timestamp', mode='before')
    @classmethod
    def string_or_now(cls, value):
        # Only string timestamps are honoured; anything else falls back to now
        return value if isinstance(value, str) else None


class CredentialsPayload(Payload):
    username: StrictStr
    password: StrictStr = Field(min_length=6)

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        value = value.strip()
        if not value:
            raise ValueError('Please add a username')
        return value[:USERNAME_MAX_LENGTH]


class PreferencesPayload(Payload):
    notifications_enabled: StrictBool
