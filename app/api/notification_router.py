import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.core.errors import DeliveryError
from app.schemas.notification_schemas import EmailRequest, ErrorResponse, MessageResponse, PushNotificationRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])

FAILURE_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def get_email_sender(request: Request):
    return request.app.state.email_sender


def get_push_sender(request: Request):
    return request.app.state.push_sender


def _failure(e: DeliveryError, action: str) -> JSONResponse:
    # 원인은 로그에만 남기고 응답에는 일반 메시지만 전달
    logger.error(f"{action} failed ({e.kind.value}): {e.__cause__!r}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": e.message})


# 동기 엔드포인트: SMTP/Firebase 호출은 스레드풀에서 블로킹됨
@router.post("/send-email", response_model=MessageResponse, responses=FAILURE_RESPONSES)
def send_email(request: EmailRequest, email_sender=Depends(get_email_sender)):
    try:
        email_sender.send(request.to, request.subject, request.body)
    except DeliveryError as e:
        return _failure(e, f"Email to {request.to}")
    return {"message": "Email sent successfully"}


@router.post("/send-push", response_model=MessageResponse, responses=FAILURE_RESPONSES)
def send_push_notification(request: PushNotificationRequest, push_sender=Depends(get_push_sender)):
    try:
        push_sender.send(request.token, request.title, request.body)
    except DeliveryError as e:
        return _failure(e, "Push notification")
    return {"message": "Push notification sent successfully"}
