"""Authentication service: password hashing and server-side sessions."""
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import jwt, ExpiredSignatureError, JWTError

from companion_chat.models.user import User
from companion_chat.storage.base import Storage
from companion_chat.utils.clock import utcnow

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# scrypt parameters
SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 2 ** 14
SCRYPT_R = 8
SCRYPT_P = 1


class AuthenticationError(Exception):
    """Raised when credentials or a session cookie do not check out."""


def hash_password(password: str) -> str:
    """
    Hash password with a random salt using scrypt.
    Format: "<hex digest>.<hex salt>"
    """
    if not isinstance(password, str):
        raise ValueError("password must be a string")

    salt = secrets.token_hex(SALT_BYTES)
    digest = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )
    return f"{digest.hex()}.{salt}"


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify password against a stored "<hex digest>.<hex salt>" value."""
    try:
        hashed, salt = stored_hash.split(".", 1)
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False

    supplied = hashlib.scrypt(
        plain_password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=len(expected),
    )
    return hmac.compare_digest(supplied, expected)


@dataclass
class IssuedSession:
    """A freshly created session and the signed cookie value for it."""
    token: str
    cookie_value: str
    max_age: int


class AuthService:
    """Registers users, checks credentials and manages login sessions."""

    def __init__(self, storage: Storage, secret: str, session_max_age_seconds: int):
        self.storage = storage
        self.secret = secret
        self.session_max_age_seconds = session_max_age_seconds

    def register(self, username: str, password: str) -> User:
        """Create a user. Raises DuplicateUsernameError when the name is taken."""
        user = self.storage.create_user(username, hash_password(password))
        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    def authenticate(self, username: str, password: str) -> User:
        """Return the user for valid credentials, else raise AuthenticationError."""
        user = self.storage.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for username {username!r}")
            raise AuthenticationError("Invalid username or password")
        return user

    def start_session(self, user: User) -> IssuedSession:
        """Create a server-side session and sign a cookie value for it."""
        now = utcnow()
        expires_at = now + timedelta(seconds=self.session_max_age_seconds)
        token = secrets.token_urlsafe(32)
        self.storage.delete_expired_sessions(now)
        self.storage.create_session(token, user.id, expires_at)

        payload = {
            "sub": str(user.id),
            "sid": token,
            "iat": now,
            "exp": expires_at,
        }
        cookie_value = jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)
        return IssuedSession(token=token, cookie_value=cookie_value, max_age=self.session_max_age_seconds)

    def _decode(self, cookie_value: str) -> dict:
        try:
            return jwt.decode(cookie_value, self.secret, algorithms=[JWT_ALGORITHM])
        except ExpiredSignatureError:
            self._discard_expired(cookie_value)
            raise AuthenticationError("Session expired")
        except JWTError as e:
            raise AuthenticationError(f"Invalid session: {str(e)}")

    def _discard_expired(self, cookie_value: str) -> None:
        """Drop the stored session behind a correctly signed but expired cookie."""
        try:
            payload = jwt.decode(
                cookie_value, self.secret, algorithms=[JWT_ALGORITHM], options={"verify_exp": False}
            )
        except JWTError:
            return
        token = payload.get("sid")
        if token:
            self.storage.delete_session(token)
            logger.info(f"Removed expired session for user {payload.get('sub')}")

    def resolve_session(self, cookie_value: Optional[str]) -> User:
        """
        Resolve a session cookie to its user.

        Raises:
            AuthenticationError: If the cookie is missing, forged, expired, or
                its server-side session no longer exists
        """
        if not cookie_value:
            raise AuthenticationError("Not authenticated")

        payload = self._decode(cookie_value)
        token = payload.get("sid")
        subject = payload.get("sub")
        if not token or subject is None:
            raise AuthenticationError("Invalid session")

        auth_session = self.storage.get_session(token)
        if not auth_session or str(auth_session.user_id) != str(subject):
            raise AuthenticationError("Session not found")

        if auth_session.is_expired():
            self.storage.delete_session(token)
            raise AuthenticationError("Session expired")

        user = self.storage.get_user(auth_session.user_id)
        if not user:
            raise AuthenticationError("User not found")
        return user

    def end_session(self, cookie_value: Optional[str]) -> None:
        """Delete the server-side session behind a cookie, if there is one."""
        if not cookie_value:
            return
        try:
            payload = self._decode(cookie_value)
        except AuthenticationError:
            return
        token = payload.get("sid")
        if token:
            self.storage.delete_session(token)
