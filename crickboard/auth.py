# crickboard/auth.py
# Account registration and login against the local store.
import hashlib
import hmac
import secrets
import sqlite3
from typing import Optional

from crickboard.app_logger import get_logger
from crickboard.db_connection import get_conn
from crickboard.models import User, new_id, now_iso

log = get_logger("auth")

MIN_PASSWORD_LENGTH = 6
_ITERATIONS = 120_000


class AuthError(Exception):
    """Raised with a message that is safe to show to the user."""


def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt, _ = stored.split("$", 1)
    except (AttributeError, ValueError):
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


def _user_from_row(row) -> User:
    return User(id=row["id"], email=row["email"], name=row["name"], created_at=row["created_at"])


def register(email: str, password: str, name: str) -> User:
    if not email or not password or not name or not email.strip() or not name.strip():
        raise AuthError("All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user = User(id=new_id(), email=email.strip().lower(), name=name.strip(), created_at=now_iso())
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT 1 FROM users WHERE email=?", (user.email,))
        if cur.fetchone():
            raise AuthError("User with this email already exists")
        cur.execute(
            "INSERT INTO users (id, email, name, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
            (user.id, user.email, user.name, hash_password(password), user.created_at),
        )
        conn.commit()
    except sqlite3.IntegrityError:
        raise AuthError("User with this email already exists")
    finally:
        conn.close()
    log.info("Registered user %s", user.email)
    return user


def login(email: str, password: str) -> User:
    if not email or not password:
        raise AuthError("Email and password are required")
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT * FROM users WHERE email=?", (email.strip().lower(),))
        row = cur.fetchone()
    finally:
        conn.close()
    if row is None or not verify_password(password, row["password_hash"]):
        raise AuthError("Invalid email or password")
    return _user_from_row(row)


def get_user(user_id: str) -> Optional[User]:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT * FROM users WHERE id=?", (user_id,))
        row = cur.fetchone()
    finally:
        conn.close()
    return _user_from_row(row) if row else None


def update_user(user_id: str, name: Optional[str] = None, password: Optional[str] = None) -> User:
    user = get_user(user_id)
    if user is None:
        raise AuthError("No user logged in")
    sets, params = [], []
    if name is not None:
        if not name.strip():
            raise AuthError("Name cannot be empty")
        sets.append("name=?")
        params.append(name.strip())
    if password is not None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        sets.append("password_hash=?")
        params.append(hash_password(password))
    if sets:
        conn = get_conn()
        try:
            conn.execute(f"UPDATE users SET {', '.join(sets)} WHERE id=?", tuple(params) + (user_id,))
            conn.commit()
        finally:
            conn.close()
    return get_user(user_id)
