import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.notification_router import router as notification_router
from app.config.config import GatewayConfig, load_config
from app.core.errors import ErrorKind
from app.core.firebase_push_service import FirebasePushSender
from app.core.smtp_email_service import SmtpEmailSender
from app.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def create_app(gateway_config: Optional[GatewayConfig] = None, email_sender=None, push_sender=None):
    setup_logging() # 로깅 설정 초기화

    # 설정은 시작 시 한 번만 로드하고 이후에는 읽기 전용
    if gateway_config is None:
        gateway_config = load_config()

    app = FastAPI(title="Notification Gateway")
    app.state.config = gateway_config
    app.state.email_sender = email_sender or SmtpEmailSender(gateway_config.email)
    app.state.push_sender = push_sender or FirebasePushSender(gateway_config.firebase)

    app.include_router(notification_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_request_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Invalid request ({ErrorKind.DECODE.value}) for {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request"})

    @app.on_event("startup")
    async def startup_event():
        logger.info("Application startup event triggered.")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Application shutdown event triggered.")
        close = getattr(app.state.push_sender, "close", None)
        if close:
            close()

    @app.get("/")
    async def root():
        return {"message": "Notification Gateway is running"}

    return app
