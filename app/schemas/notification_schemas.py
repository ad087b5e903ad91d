from pydantic import BaseModel


class EmailRequest(BaseModel):
    to: str
    subject: str
    body: str


class PushNotificationRequest(BaseModel):
    token: str
    title: str
    body: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
