from enum import Enum


class ErrorKind(str, Enum):
    DECODE = "decode"
    CONNECT = "connect"
    AUTH = "auth"
    INIT = "init"
    SEND = "send"


class DeliveryError(Exception):
    """
    외부 서비스(SMTP, Firebase) 호출 실패.
    kind 는 로그에만 남고, 클라이언트에게는 message 만 전달됩니다.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self):
        return f"[{self.kind.value}] {self.message}"
