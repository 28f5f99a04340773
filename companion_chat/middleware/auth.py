"""Cookie session authentication for FastAPI."""
from fastapi import HTTPException, Depends, status, Request, Response

from companion_chat.models.user import User
from companion_chat.services.auth_service import AuthService, AuthenticationError, IssuedSession
from companion_chat.storage import Storage, get_storage


def get_auth_service(request: Request, storage: Storage = Depends(get_storage)) -> AuthService:
    """Dependency for getting an AuthService instance."""
    settings = request.app.state.settings
    return AuthService(
        storage,
        secret=settings.session_secret,
        session_max_age_seconds=settings.session_max_age_seconds,
    )


def get_session_cookie(request: Request) -> str | None:
    return request.cookies.get(request.app.state.settings.session_cookie_name)


async def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the session cookie to the logged-in user.

    Raises:
        HTTPException: 401 if there is no valid session
    """
    try:
        return auth_service.resolve_session(get_session_cookie(request))
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


def set_session_cookie(request: Request, response: Response, issued: IssuedSession) -> None:
    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=issued.cookie_value,
        max_age=issued.max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(request: Request, response: Response) -> None:
    settings = request.app.state.settings
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
