from sqlalchemy import func, or_, select

from app.dashtact.db.models import User


class UserRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, user_id):
        return self.db.get(User, user_id)

    def find_login_candidates(self, identifier: str) -> list[User]:
        """Users whose username, or case-insensitive email, equals ``identifier``."""
        identifier = identifier.strip()
        stmt = select(User).where(or_(User.username == identifier, func.lower(User.email) == identifier.lower()))
        return list(self.db.execute(stmt).scalars().all())
