import logging
import smtplib
import ssl
from email.message import EmailMessage

from app.config.config import EmailConfig
from app.core.errors import DeliveryError, ErrorKind

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send email"
SMTPS_PORT = 465


def build_message(sender: str, to: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body, subtype="plain")
    return message


class SmtpEmailSender:
    """설정된 SMTP 서버로 일반 텍스트 메일을 보냅니다. 요청마다 새 연결을 엽니다."""

    def __init__(self, email_config: EmailConfig):
        self.host = email_config.smtp_host
        self.port = email_config.smtp_port
        self.username = email_config.username
        self.password = email_config.password

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        try:
            if self.port == SMTPS_PORT:
                return smtplib.SMTP_SSL(self.host, self.port, context=context)
            server = smtplib.SMTP(self.host, self.port)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(ErrorKind.CONNECT, SEND_FAILED_MESSAGE) from e

        try:
            server.ehlo()
            # 서버가 지원하면 STARTTLS 로 업그레이드
            if server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
        except (smtplib.SMTPException, OSError) as e:
            server.close()
            raise DeliveryError(ErrorKind.CONNECT, SEND_FAILED_MESSAGE) from e
        return server

    def send(self, to: str, subject: str, body: str) -> None:
        try:
            message = build_message(self.username, to, subject, body)
        except ValueError as e:
            # 헤더에 줄바꿈(CR/LF)이 들어간 경우: 연결 전에 실패 처리
            raise DeliveryError(ErrorKind.SEND, SEND_FAILED_MESSAGE) from e
        server = self._connect()
        try:
            with server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except smtplib.SMTPAuthenticationError as e:
            raise DeliveryError(ErrorKind.AUTH, SEND_FAILED_MESSAGE) from e
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(ErrorKind.SEND, SEND_FAILED_MESSAGE) from e
        logger.info(f"Email sent to {to} via {self.host}:{self.port}")
