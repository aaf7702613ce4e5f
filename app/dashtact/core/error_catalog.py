from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    INVALID_CREDENTIALS = ErrorDefinition(
        "INVALID_CREDENTIALS",
        "Invalid credentials",
        status.HTTP_401_UNAUTHORIZED,
    )
    USER_INACTIVE = ErrorDefinition(
        "USER_INACTIVE",
        "User is inactive or suspended",
        status.HTTP_403_FORBIDDEN,
    )
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    TENANT_SCOPE_REQUIRED = ErrorDefinition(
        "TENANT_SCOPE_REQUIRED",
        "Tenant scope is required",
        status.HTTP_403_FORBIDDEN,
    )
    MENU_NOT_FOUND = ErrorDefinition(
        "MENU_NOT_FOUND",
        "Menu not found",
        status.HTTP_404_NOT_FOUND,
    )
    MENU_PARENT_NOT_FOUND = ErrorDefinition(
        "MENU_PARENT_NOT_FOUND",
        "Parent menu not found",
        status.HTTP_404_NOT_FOUND,
    )
    MENU_KEY_CONFLICT = ErrorDefinition(
        "MENU_KEY_CONFLICT",
        "Menu key already exists",
        status.HTTP_409_CONFLICT,
    )
    MENU_PARENT_CYCLE = ErrorDefinition(
        "MENU_PARENT_CYCLE",
        "Menu cannot be its own ancestor",
        status.HTTP_400_BAD_REQUEST,
    )
    MENU_PAGE_CONFIG_INVALID = ErrorDefinition(
        "MENU_PAGE_CONFIG_INVALID",
        "Menu page configuration is invalid",
        status.HTTP_400_BAD_REQUEST,
    )
    MENU_HAS_CHILDREN = ErrorDefinition(
        "MENU_HAS_CHILDREN",
        "Cannot delete menu with children",
        status.HTTP_400_BAD_REQUEST,
    )
    SETTINGS_NOT_FOUND = ErrorDefinition(
        "SETTINGS_NOT_FOUND",
        "Ecommerce settings not found",
        status.HTTP_404_NOT_FOUND,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
