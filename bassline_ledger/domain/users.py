"""User directory and current-session slot"""

import logging
from dataclasses import replace
from typing import Optional

import bcrypt

from bassline_ledger.config import settings
from bassline_ledger.domain.exceptions import DuplicateEmailError, InvalidPasswordError, NotFoundError
from bassline_ledger.domain.models import User
from bassline_ledger.infrastructure.store.interface import USERS, RecordStore
from bassline_ledger.utils.date_utils import Clock, utc_now
from bassline_ledger.utils.ids import generate_id

# bcrypt only hashes the first 72 bytes; newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    return 0 < len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.password_hash_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class UserDirectory:
    """Registration, credential checks and explicit balance adjustments"""

    def __init__(
        self,
        store: RecordStore,
        clock: Clock = utc_now,
        id_factory=generate_id,
        hash_rounds: int | None = None,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.hash_rounds = hash_rounds

    def register_user(self, name: str, email: str, phone: str, password: str) -> User:
        """
        Create a user with a zero balance.

        Raises:
            DuplicateEmailError: email (compared case-sensitively) is taken
            InvalidPasswordError: password is empty or over 72 UTF-8 bytes
        """
        if not password_fits(password):
            raise InvalidPasswordError(f"Password must be 1 to {MAX_PASSWORD_BYTES} bytes long")

        with self.store.atomic():
            if self.store.find_one(USERS, lambda u: u.email == email) is not None:
                raise DuplicateEmailError(f"Email already registered: {email}")

            user = User(
                id=self.id_factory(),
                name=name,
                email=email,
                phone=phone,
                password_hash=hash_password(password, self.hash_rounds),
                balance=0.0,
                created_at=self.clock(),
            )
            self.store.upsert_by_key(USERS, user.id, user)

        logging.info("User registered", extra={"step": "user_registered", "user_id": user.id})
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """The matching user, or None for an unknown email or wrong password"""
        user = self.store.find_one(USERS, lambda u: u.email == email)
        if user is None or not password_fits(password) or not verify_password(password, user.password_hash):
            logging.warning("Authentication failed", extra={"step": "authenticate"})
            return None
        return user

    def get_user(self, user_id: str) -> User:
        user = self.store.find_one(USERS, lambda u: u.id == user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def adjust_balance(self, user_id: str, delta: float) -> User:
        """Add delta (may be negative) to the user's balance"""
        with self.store.atomic():
            user = self.get_user(user_id)
            updated = replace(user, balance=user.balance + delta)
            self.store.upsert_by_key(USERS, updated.id, updated)
        return updated

    def start_session(self, user: User) -> dict:
        session = user.public_view()
        self.store.set_session(session)
        return session

    def current_session(self) -> Optional[dict]:
        return self.store.get_session()

    def end_session(self) -> None:
        self.store.clear_session()
