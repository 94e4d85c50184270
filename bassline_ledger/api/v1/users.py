"""User registration, login session and balance endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Response

from bassline_ledger.api.dependencies import get_user_directory
from bassline_ledger.api.v1.schemas import (
    BalanceAdjustmentRequest,
    LoginRequest,
    UserCreateRequest,
    UserResponse,
)
from bassline_ledger.domain.users import UserDirectory

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=201)
def register_user(request_body: UserCreateRequest, users: UserDirectory = Depends(get_user_directory)):
    """Register a user; 409 if the email is taken"""
    user = users.register_user(
        name=request_body.name,
        email=request_body.email,
        phone=request_body.phone,
        password=request_body.password,
    )
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, users: UserDirectory = Depends(get_user_directory)):
    return UserResponse.model_validate(users.get_user(user_id))


@router.post("/users/{user_id}/balance-adjustments", response_model=UserResponse)
def adjust_balance(
    user_id: str,
    request_body: BalanceAdjustmentRequest,
    users: UserDirectory = Depends(get_user_directory),
):
    """Explicitly credit (positive delta) or debit (negative delta) a balance"""
    return UserResponse.model_validate(users.adjust_balance(user_id, request_body.delta))


@router.post("/sessions", response_model=UserResponse)
def login(request_body: LoginRequest, users: UserDirectory = Depends(get_user_directory)):
    """Check credentials and make the user the current session"""
    user = users.authenticate(request_body.email, request_body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return UserResponse(**users.start_session(user))


@router.get("/sessions/current", response_model=UserResponse)
def current_session(users: UserDirectory = Depends(get_user_directory)):
    session = users.current_session()
    if session is None:
        raise HTTPException(status_code=404, detail="No active session")
    return UserResponse(**session)


@router.delete("/sessions/current", status_code=204)
def logout(users: UserDirectory = Depends(get_user_directory)):
    users.end_session()
    logging.info("Session cleared", extra={"step": "logout"})
    return Response(status_code=204)
