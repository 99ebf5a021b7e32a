"""
Password handling for cookieseal

This module normalizes the configured password (a single string or an
id -> password rotation map) into a validated PasswordSet and provides
secure password generation.
"""

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple, Union

from cookieseal.core.config import MIN_PASSWORD_LENGTH
from cookieseal.core.exceptions import BadUsageError

logger = logging.getLogger(__name__)

Password = Union[str, Mapping[Union[int, str], str]]


def generate_secure_password(length: int = 64) -> str:
    """
    Generate a cryptographically secure session password.

    Args:
        length: Length of the password (default: 64 characters)

    Returns:
        A secure random string suitable for sealing cookies
    """
    if length < MIN_PASSWORD_LENGTH:
        raise BadUsageError(
            f"cookieseal: Bad usage. Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    # Use a mix of letters, digits, and safe symbols for maximum entropy
    alphabet = string.ascii_letters + string.digits + "-_"
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def normalize_password_to_map(password: Password) -> Dict[int, str]:
    """
    Normalize a password option into an id -> password map.

    A single string becomes ``{1: password}``. Map keys may be ints or
    numeric strings (as they arrive from JSON) and are coerced to ints.

    Raises:
        BadUsageError: If an id is not a positive integer
    """
    if isinstance(password, str):
        return {1: password}

    passwords_map = {}
    for key, value in password.items():
        try:
            password_id = int(key)
        except (TypeError, ValueError):
            raise BadUsageError(
                f"cookieseal: Bad usage. Password id {key!r} is not an integer."
            ) from None
        if password_id < 1:
            raise BadUsageError(
                f"cookieseal: Bad usage. Password id {password_id} must be positive."
            )
        passwords_map[password_id] = value
    return passwords_map


@dataclass(frozen=True)
class PasswordSet:
    """Validated set of passwords keyed by id.

    New seals use the current (highest) id; incoming seals may name any id
    still present, which lets old cookies survive a rotation.
    """

    passwords: Dict[int, str]

    @classmethod
    def from_password(cls, password: Union[Password, "PasswordSet", None]) -> "PasswordSet":
        if isinstance(password, PasswordSet):
            return password
        if not password:
            raise BadUsageError("cookieseal: Bad usage. Missing password.")

        passwords_map = normalize_password_to_map(password)
        if not passwords_map:
            raise BadUsageError("cookieseal: Bad usage. Missing password.")

        for value in passwords_map.values():
            validate_password(value)

        return cls(passwords=passwords_map)

    @property
    def current_id(self) -> int:
        return max(self.passwords)

    @property
    def current(self) -> str:
        return self.passwords[self.current_id]

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(sorted(self.passwords))

    def get(self, password_id: int):
        return self.passwords.get(password_id)

    def __repr__(self) -> str:
        # Never render secrets
        return f"PasswordSet(ids={list(self.ids)})"


def validate_password(password: str) -> None:
    """
    Validate that a password meets the sealing requirements.

    Args:
        password: The password to validate

    Raises:
        BadUsageError: If the password is not a string or is too short
    """
    if not isinstance(password, str):
        raise BadUsageError("cookieseal: Bad usage. Password must be a string.")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise BadUsageError(
            f"cookieseal: Bad usage. Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )

    # Repetitive passwords are legal but weak
    unique_chars = len(set(password.lower()))
    if unique_chars < 8:
        logger.warning("Session password has low entropy (too repetitive)")
