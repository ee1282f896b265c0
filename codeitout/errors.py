from typing import Any, Dict, Optional, Union

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from codeitout.config import logger


# Custom exceptions
class AppException(Exception):
    """Base exception for application-specific errors."""

    def __init__(self, status_code: int, detail: Union[str, Dict[str, Any]]):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class DatabaseException(AppException):
    """Exception for database-related errors."""

    def __init__(self, detail: str = "Database error occurred"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


class PersistenceException(DatabaseException):
    """A problem or user record could not be written or read."""

    def __init__(self, detail: str = "Failed to persist record"):
        super().__init__(detail=detail)


class AuthenticationException(AppException):
    """Exception for authentication-related errors."""

    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class UnauthorizedException(AuthenticationException):
    """Missing session, or a role that may not perform the action."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(detail=detail)


class InvalidSessionException(AuthenticationException):
    def __init__(self, detail: str = "Unauthorized - Invalid or expired token"):
        super().__init__(detail=detail)


class InvalidCredentialsException(AuthenticationException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail=detail)


class UserNotFoundException(AuthenticationException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(detail=detail)


class ResourceNotFoundException(AppException):
    """Exception for resource not found errors."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestException(AppException):
    """Exception for bad request errors."""

    def __init__(self, detail: Union[str, Dict[str, Any]] = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class DuplicateEmailException(BadRequestException):
    def __init__(self, detail: str = "User already exists"):
        super().__init__(detail=detail)


class UnsupportedLanguageException(BadRequestException):
    def __init__(self, language: str):
        self.language = language
        super().__init__(
            detail={
                "error": f"Unsupported language: {language}",
                "language": language,
            }
        )


class TestCaseFailedException(BadRequestException):
    """A reference solution did not pass one of the problem's test cases."""

    __test__ = False

    def __init__(
        self,
        language: str,
        test_case_index: int,
        stdin: str,
        result: Optional[Dict[str, Any]] = None,
    ):
        self.language = language
        self.test_case_index = test_case_index
        self.stdin = stdin
        self.result = result or {}
        super().__init__(
            detail={
                "error": f"Validation failed for {language} on input: {stdin}",
                "language": language,
                "testCaseIndex": test_case_index,
                "input": stdin,
                "details": self.result,
            }
        )


class NotImplementedException(AppException):
    def __init__(self, detail: str = "Not implemented"):
        super().__init__(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=detail)


class JudgeException(AppException):
    """Base exception for failures of the remote execution service."""


class JudgeUnavailableException(JudgeException):
    def __init__(self, detail: str = "Judge service is unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail
        )


class JudgeProtocolException(JudgeException):
    def __init__(self, detail: str = "Malformed response from judge service"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class JudgeTimeoutException(JudgeException):
    def __init__(self, detail: str = "Timed out waiting for judge results"):
        super().__init__(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=detail)


# Exception handlers
async def app_exception_handler(request: Request, exc: AppException):
    """Handler for application-specific exceptions."""
    logger.error(f"Application error: {exc.detail} (Status: {exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    formatted_errors = [
        {
            "type": error["type"],
            "loc": error["loc"],
            "msg": error["msg"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": formatted_errors},
    )


async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Handler for Pydantic validation errors."""
    errors = exc.errors(include_url=False, include_context=False)
    logger.error(f"Pydantic validation error: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handler for SQLAlchemy errors."""
    logger.error(f"Database error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred. Please try again later."},
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handler for all other exceptions."""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


# Function to register exception handlers with FastAPI app
def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")
