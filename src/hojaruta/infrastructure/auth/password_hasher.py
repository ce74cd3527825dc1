"""Password hashing via werkzeug.security."""

from werkzeug.security import check_password_hash, generate_password_hash


class WerkzeugPasswordHasher:
    """Salted password hashes in werkzeug's ``method$salt$hash`` format."""

    def hash(self, password: str) -> str:
        return generate_password_hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        if not password_hash:
            return False
        try:
            return check_password_hash(password_hash, password)
        except ValueError:
            # Hash written by another scheme (e.g. bcrypt)
            return False
