"""
User Microservice

Responsibilities:
- User management (create, update, soft delete)
- Email uniqueness
- User-with-orders view backed by order_service
"""

from fastapi import FastAPI, HTTPException, Depends, Path, Request, status
from fastapi.responses import JSONResponse, Response
import uvicorn
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from core.config_manager import ConfigManager
from core.logger import setup_service_logger
from core.request_context import RequestContext

from .user_service import UserService
from .protocols import (
    UserServiceError,
    UserNotFoundError,
    UserValidationError,
    DuplicateEmailError,
    UpstreamUnavailableError,
)
from .models import User, UserRequest, ErrorResponse, UserServiceStatus

# Initialize configuration
config_manager = ConfigManager("user_service")
config = config_manager.get_service_config()

# Setup loggers (use actual service name)
app_logger = setup_service_logger("user_service", config_manager.get_logging_config())
logger = app_logger


class UserMicroservice:
    """User microservice core class"""

    def __init__(self):
        self.user_service: Optional[UserService] = None

    async def initialize(self):
        """Initialize the microservice"""
        from .factory import create_user_service

        try:
            self.user_service = create_user_service(config=config_manager)
            await self.user_service.repo.ensure_schema()
            logger.info("User microservice initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize user microservice: {e}")
            raise

    async def shutdown(self):
        """Shutdown the microservice"""
        if not self.user_service:
            return
        try:
            await self.user_service.order_client.close()
            await self.user_service.repo.db.close()
            logger.info("User microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Global microservice instance
user_microservice = UserMicroservice()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    await user_microservice.initialize()
    logger.info(f"User Service started on port {config.service_port}")
    yield
    await user_microservice.shutdown()


app = FastAPI(
    title="User Service",
    description="User management microservice",
    version="1.0.0",
    lifespan=lifespan
)


def get_user_service() -> UserService:
    """Get user service instance"""
    if not user_microservice.user_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User service not initialized"
        )
    return user_microservice.user_service


def get_request_context(request: Request) -> RequestContext:
    """Build the per-request context from inbound headers"""
    return RequestContext.from_headers(request.headers, source="user_service")


# ==================== Exception Handlers ====================

def _error(status_code: int, exc: Exception, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error_code=error_code).model_dump(),
    )


@app.exception_handler(UserValidationError)
async def validation_error_handler(request: Request, exc: UserValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "VALIDATION_ERROR")


@app.exception_handler(UserNotFoundError)
async def not_found_handler(request: Request, exc: UserNotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, exc, "NOT_FOUND")


@app.exception_handler(DuplicateEmailError)
async def duplicate_email_handler(request: Request, exc: DuplicateEmailError):
    return _error(status.HTTP_409_CONFLICT, exc, "CONFLICT")


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc, "UPSTREAM_UNAVAILABLE")


@app.exception_handler(UserServiceError)
async def service_error_handler(request: Request, exc: UserServiceError):
    logger.error(f"Unhandled user service error on {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")


# ==================== Health ====================

@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "port": config.service_port,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/health/detailed", response_model=UserServiceStatus)
async def detailed_health_check(
    user_service: UserService = Depends(get_user_service)
):
    """Detailed health check with database and order_service connectivity"""
    return UserServiceStatus(
        port=config.service_port,
        database_connected=await user_service.health_check(),
        order_service_connected=await user_service.order_service_health_check(),
        timestamp=datetime.now(timezone.utc)
    )


# ==================== Users ====================

@app.get("/api/v1/users/count/active", response_model=int)
async def count_active_users(
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Number of ACTIVE users"""
    logger.info(f"{ctx} GET /api/v1/users/count/active")
    return await user_service.count_active_users(ctx=ctx)


@app.get("/api/v1/users/email/{email}", response_model=User)
async def get_user_by_email(
    email: str = Path(..., description="Exact email address"),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Get user by email"""
    logger.info(f"{ctx} GET /api/v1/users/email/{email}")
    return await user_service.get_user_by_email(email, ctx=ctx)


@app.get("/api/v1/users", response_model=List[User])
async def list_users(
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """List all users"""
    logger.info(f"{ctx} GET /api/v1/users")
    return await user_service.list_users(ctx=ctx)


@app.get("/api/v1/users/{user_id}", response_model=User)
async def get_user(
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Get user details"""
    logger.info(f"{ctx} GET /api/v1/users/{user_id}")
    return await user_service.get_user(user_id, ctx=ctx)


@app.get("/api/v1/users/{user_id}/orders", response_model=List[Dict[str, Any]])
async def get_user_orders(
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Orders of a user as reported by order_service"""
    logger.info(f"{ctx} GET /api/v1/users/{user_id}/orders")
    return await user_service.get_user_orders(user_id, ctx=ctx)


@app.post("/api/v1/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserRequest,
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Create a new user"""
    logger.info(f"{ctx} POST /api/v1/users: {request.email}")
    return await user_service.create_user(request, ctx=ctx)


@app.put("/api/v1/users/{user_id}", response_model=User)
async def update_user(
    request: UserRequest,
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Update a user"""
    logger.info(f"{ctx} PUT /api/v1/users/{user_id}")
    return await user_service.update_user(user_id, request, ctx=ctx)


@app.delete("/api/v1/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    user_service: UserService = Depends(get_user_service)
):
    """Deactivate a user (soft delete)"""
    logger.info(f"{ctx} DELETE /api/v1/users/{user_id}")
    await user_service.delete_user(user_id, ctx=ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    uvicorn.run(
        "microservices.user_service.main:app",
        host=config.service_host,
        port=config.service_port,
        reload=config.debug,
        log_level="info"
    )
