"""
FastAPI dependencies

Repositories and services are built per request from the shared remote
store and local cache, so tests can swap either one through
`app.dependency_overrides`.
"""
from fastapi import Depends, HTTPException, status

from orderdesk.core.database import get_local_cache, get_remote_store
from orderdesk.core.errors import (
    ConstraintError,
    DataAccessError,
    InvalidCredentialsError,
    PartialWriteError,
    TransportError,
    ValidationError,
)
from orderdesk.core.local_cache import LocalCache
from orderdesk.core.remote_store import RemoteStore
from orderdesk.domain.user import User, UserRole
from orderdesk.repositories import OrderRepository, ProductRepository, UserRepository
from orderdesk.services.auth_service import AuthService
from orderdesk.services.order_service import OrderService


def get_product_repository(
    remote: RemoteStore = Depends(get_remote_store),
    cache: LocalCache = Depends(get_local_cache)
) -> ProductRepository:
    return ProductRepository(remote, cache)


def get_user_repository(remote: RemoteStore = Depends(get_remote_store)) -> UserRepository:
    return UserRepository(remote)


def get_order_service(
    remote: RemoteStore = Depends(get_remote_store),
    products: ProductRepository = Depends(get_product_repository)
) -> OrderService:
    return OrderService(OrderRepository(remote), products)


def get_auth_service(
    remote: RemoteStore = Depends(get_remote_store),
    users: UserRepository = Depends(get_user_repository),
    cache: LocalCache = Depends(get_local_cache)
) -> AuthService:
    return AuthService(remote, users, cache)


def to_http_error(error: DataAccessError) -> HTTPException:
    """Map the data-access taxonomy onto HTTP status codes"""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, ConstraintError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, PartialWriteError):
        return HTTPException(status_code=502, detail={"message": str(error), "order_id": error.order_id})
    if isinstance(error, InvalidCredentialsError):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, TransportError):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def require_user(auth: AuthService = Depends(get_auth_service)) -> User:
    """User of the current device session; 401 when nobody is logged in"""
    user = auth.current_user()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in")
    return user


def require_role(*roles: UserRole):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/{user_id}")
        async def delete_user(
            user_id: str,
            user: User = Depends(require_role(UserRole.ADMIN))
        ):
            # Only admins can delete users
            pass
    """
    allowed = set(roles)

    def role_checker(user: User = Depends(require_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"Access denied. Required role: {', '.join(role.value for role in roles)}, "
                    f"your role: {user.role.value}"
                )
            )
        return user

    return role_checker


# Convenience dependencies for common role requirements
require_admin = require_role(UserRole.ADMIN)
require_manager = require_role(UserRole.ADMIN, UserRole.SUPERVISOR)
