"""
Password hashing and verification.

Uses argon2id (memory-hard, salted per hash) via argon2-cffi. Hashing and
verification are CPU-bound by design, so async callers use the *_async
variants, which run the work in a worker thread instead of blocking the
event loop.
"""
from anyio import to_thread
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# argon2-cffi defaults follow RFC 9106 low-memory recommendations
_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with argon2id. Returns the encoded PHC string."""
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """
    Verify a plaintext password against a stored argon2 hash.

    Returns False on mismatch and on a malformed stored hash; never raises
    for either case, so callers cannot distinguish the two.
    """
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


async def hash_password_async(password: str) -> str:
    """Hash a password without blocking the event loop."""
    return await to_thread.run_sync(hash_password, password)


async def verify_password_async(password_hash: str, password: str) -> bool:
    """Verify a password without blocking the event loop."""
    return await to_thread.run_sync(verify_password, password_hash, password)
