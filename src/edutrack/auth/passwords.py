from __future__ import annotations

from passlib.context import CryptContext

# pbkdf2_sha256 is pure-python in passlib; no native backend to pin.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)
