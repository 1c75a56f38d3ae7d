"""Password hashing at rest (bcrypt via passlib)."""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash with the scheme's default cost."""
    return pwd_context.hash(_truncate(password))


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored hash."""
    try:
        return pwd_context.verify(_truncate(password), password_hash)
    except (ValueError, TypeError):
        # Malformed or unknown hash format
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verify when there is no hash to check."""
    pwd_context.dummy_verify()
