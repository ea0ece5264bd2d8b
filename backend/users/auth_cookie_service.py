from django.conf import settings
from rest_framework.response import Response


class AuthCookieService:
    """
    Centralized cookie management for JWT authentication.
    """

    @staticmethod
    def get_cookie_settings() -> dict:
        return {
            "secure": settings.SIMPLE_JWT.get("AUTH_COOKIE_SECURE", not settings.DEBUG),
            "samesite": settings.SIMPLE_JWT.get("AUTH_COOKIE_SAMESITE", "Lax"),
            "httponly": settings.SIMPLE_JWT.get("AUTH_COOKIE_HTTP_ONLY", True),
        }

    @staticmethod
    def set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> Response:
        cookie_settings = AuthCookieService.get_cookie_settings()

        response.set_cookie(
            key=settings.SIMPLE_JWT["AUTH_COOKIE"],
            value=access_token,
            max_age=settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds(),
            path="/",
            **cookie_settings,
        )
        response.set_cookie(
            key=settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"],
            value=refresh_token,
            max_age=settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"].total_seconds(),
            path="/",
            **cookie_settings,
        )
        return response

    @staticmethod
    def clear_auth_cookies(response: Response) -> Response:
        response.delete_cookie(settings.SIMPLE_JWT["AUTH_COOKIE"], path="/")
        response.delete_cookie(settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"], path="/")
        return response
