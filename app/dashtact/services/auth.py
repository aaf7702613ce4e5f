from app.dashtact.core.error_catalog import AppError, ErrorCatalog
from app.dashtact.core.security import issue_access_token, verify_password
from app.dashtact.repos.users import UserRepository


def is_user_active(user) -> bool:
    return bool(user.is_active) and user.status == "active"


class AuthService:
    def __init__(self, db):
        self.repo = UserRepository(db)

    def login(self, identifier: str, password: str):
        """Return ``(user, access_token)``.

        A correct password on a suspended account reports ``USER_INACTIVE``;
        anything else reports ``INVALID_CREDENTIALS``.
        """
        matched = [
            user
            for user in self.repo.find_login_candidates(identifier)
            if verify_password(password, user.hashed_password)
        ]
        for user in matched:
            if is_user_active(user):
                return user, issue_access_token(user)
        if matched:
            raise AppError(ErrorCatalog.USER_INACTIVE)
        raise AppError(ErrorCatalog.INVALID_CREDENTIALS)
