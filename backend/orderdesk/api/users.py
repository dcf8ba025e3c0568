"""
Users API Endpoints

Author: Dicompel
Date: 2026-09-10
"""
from fastapi import APIRouter, Depends

from orderdesk.api.deps import get_user_repository, require_admin, require_user, to_http_error
from orderdesk.core.errors import DataAccessError
from orderdesk.domain.user import User, UserCreate
from orderdesk.repositories.user_repository import UserRepository

router = APIRouter()


@router.get("/")
async def get_users(
    admin: User = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository)
):
    users = await repo.get_all()
    return {"status": "success", "count": len(users), "data": [user.to_dict() for user in users]}


@router.get("/representatives")
async def get_representatives(
    user: User = Depends(require_user),
    repo: UserRepository = Depends(get_user_repository)
):
    reps = await repo.get_representatives()
    return {"status": "success", "count": len(reps), "data": [user.to_dict() for user in reps]}


@router.post("/", status_code=201)
async def create_user(
    user: UserCreate,
    admin: User = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        created = await repo.create(user)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success", "data": created.to_dict()}


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    user: User,
    admin: User = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        await repo.update(user.model_copy(update={'id': user_id}))
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success"}


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        await repo.delete(user_id)
    except DataAccessError as e:
        raise to_http_error(e)
    return {"status": "success"}
