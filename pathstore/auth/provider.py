"""
File-backed credential provider.

Users are stored as a JSON array of records with bcrypt password hashes.
A successful authentication returns the user's identity without the
password hash.
"""

import json
from pathlib import Path

import bcrypt
import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = structlog.get_logger(__name__)


class AuthError(Exception):
    """User file could not be read or parsed."""

    pass


class UserNotFoundError(AuthError):
    """No user matches the given credentials."""

    pass


class User(BaseModel):
    """A user record as saved in the auth file."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    password: str  # bcrypt hash
    display_name: str = Field(default="", alias="displayName")
    email: str = ""


class AuthResource(BaseModel):
    """Identity of a user after a valid authentication."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    display_name: str = Field(default="", alias="displayName")
    email: str = ""


_users_adapter = TypeAdapter(list[User])


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: Cost factor (4-31)

    Returns:
        Hashed password string suitable for User.password
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in the user file
        return False


class AuthProvider:
    """Authenticates users against a JSON user file."""

    def __init__(self, auth_file: str | Path):
        self.auth_file = Path(auth_file)

    def _load_users(self) -> list[User]:
        try:
            data = self.auth_file.read_bytes()
        except OSError as e:
            logger.error("Failed to read auth file", path=str(self.auth_file), error=str(e))
            raise AuthError(f"Cannot read auth file: {e}") from e

        try:
            return _users_adapter.validate_json(data)
        except ValidationError as e:
            logger.error("Failed to parse auth file", path=str(self.auth_file), error=str(e))
            raise AuthError(f"Invalid auth file: {e}") from e

    def authenticate(self, username: str, password: str) -> AuthResource:
        """
        Authenticate a username/password pair against the auth file.

        Returns:
            AuthResource for the matching user

        Raises:
            UserNotFoundError: If no user matches
            AuthError: If the auth file cannot be read or parsed
        """
        for user in self._load_users():
            if user.username == username and verify_password(password, user.password):
                return AuthResource(
                    username=user.username,
                    display_name=user.display_name,
                    email=user.email,
                )
        raise UserNotFoundError("user not found")

    def exists_auth(self) -> bool:
        """Check that the auth file exists and can be opened."""
        try:
            with open(self.auth_file, "rb"):
                return True
        except OSError:
            return False

    def create_user(self, user: User) -> None:
        """
        Write a user file containing only ``user``.

        Used when bootstrapping an installation; an existing file is
        replaced. The password must already be hashed.
        """
        payload = json.dumps([user.model_dump(by_alias=True)], indent=2)
        try:
            self.auth_file.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise AuthError(f"Cannot write auth file: {e}") from e
        logger.info("Auth file created", path=str(self.auth_file), username=user.username)
