"""Authentication router for Companion Chat."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
import logging

from companion_chat.schemas.auth import Credentials, UserResponse
from companion_chat.middleware.auth import (
    clear_session_cookie,
    get_auth_service,
    get_current_user,
    get_session_cookie,
    set_session_cookie,
)
from companion_chat.models.user import User
from companion_chat.services.auth_service import AuthService, AuthenticationError
from companion_chat.storage import DuplicateUsernameError
from companion_chat.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])  # No prefix since main.py adds /api prefix


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Credentials,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create an account and log it in."""
    try:
        user = auth_service.register(credentials.username, credentials.password)
        issued = auth_service.start_session(user)
    except DuplicateUsernameError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists"
        )
    except Exception as e:
        logger.error(f"Registration error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register user"
        )

    metrics_collector.user_registered()
    set_session_cookie(request, response, issued)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    credentials: Credentials,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Check credentials and start a session."""
    try:
        user = auth_service.authenticate(credentials.username, credentials.password)
    except AuthenticationError as e:
        metrics_collector.login_failed()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )

    issued = auth_service.start_session(user)
    set_session_cookie(request, response, issued)
    return user


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """End the current session. Succeeds even without one."""
    auth_service.end_session(get_session_cookie(request))
    clear_session_cookie(request, response)
    return {"message": "Logged out"}


@router.get("/user", response_model=UserResponse)
async def current_user(user: User = Depends(get_current_user)):
    """Return the logged-in user."""
    return user
