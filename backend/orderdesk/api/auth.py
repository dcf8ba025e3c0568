"""
Auth API Endpoints
Single login call, logout and current session

Author: Dicompel
Date: 2026-09-10
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from orderdesk.api.deps import get_auth_service
from orderdesk.services.auth_service import AuthService

router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login")
async def login(credentials: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    user = await auth.login(credentials.email, credentials.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Email ou senha inválidos")
    return {"status": "success", "data": user.to_dict()}


@router.post("/logout")
async def logout(auth: AuthService = Depends(get_auth_service)):
    await auth.logout()
    return {"status": "success"}


@router.get("/me")
async def current_user(auth: AuthService = Depends(get_auth_service)):
    user = auth.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return {"status": "success", "data": user.to_dict()}
