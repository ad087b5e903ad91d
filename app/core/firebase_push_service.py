import logging
import threading

import firebase_admin
from firebase_admin import credentials, exceptions, messaging
from google.auth.exceptions import GoogleAuthError

from app.config.config import FirebaseConfig
from app.core.errors import DeliveryError, ErrorKind

logger = logging.getLogger(__name__)

INIT_FAILED_MESSAGE = "Failed to initialize Firebase app"
MESSAGING_INIT_FAILED_MESSAGE = "Failed to initialize Firebase messaging client"
SEND_FAILED_MESSAGE = "Failed to send push notification"


class FirebasePushSender:
    """
    Firebase Cloud Messaging 으로 푸시 알림을 보냅니다.
    Firebase 앱은 첫 요청에서 만들어 이후 요청에서 재사용하며,
    초기화에 실패하면 캐시하지 않고 다음 요청에서 다시 시도합니다.
    """

    def __init__(self, firebase_config: FirebaseConfig):
        self.credentials_file = firebase_config.credentials_file
        self._app_name = f"notification-gateway-{id(self)}"
        self._app = None
        self._lock = threading.Lock()

    def _get_app(self) -> firebase_admin.App:
        with self._lock:
            if self._app is None:
                try:
                    cred = credentials.Certificate(self.credentials_file)
                    self._app = firebase_admin.initialize_app(cred, name=self._app_name)
                except (OSError, ValueError) as e:
                    raise DeliveryError(ErrorKind.INIT, INIT_FAILED_MESSAGE) from e
                logger.info(f"Firebase app '{self._app_name}' initialized from {self.credentials_file}")
            return self._app

    def _check_messaging(self, app: firebase_admin.App):
        # 메시징 클라이언트는 프로젝트 ID 가 있어야 만들어짐
        try:
            project_id = app.project_id
        except (GoogleAuthError, ValueError) as e:
            raise DeliveryError(ErrorKind.INIT, MESSAGING_INIT_FAILED_MESSAGE) from e
        if not project_id:
            raise DeliveryError(ErrorKind.INIT, MESSAGING_INIT_FAILED_MESSAGE)

    def send(self, token: str, title: str, body: str) -> None:
        app = self._get_app()
        self._check_messaging(app)
        message = messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
        )
        try:
            message_id = messaging.send(message, app=app)
        except (exceptions.FirebaseError, GoogleAuthError, ValueError) as e:
            # GoogleAuthError: OAuth 토큰 갱신 실패 (토큰 엔드포인트 연결 불가, 폐기된 키 등)
            raise DeliveryError(ErrorKind.SEND, SEND_FAILED_MESSAGE) from e
        logger.info(f"Push notification sent. Message ID: {message_id}")

    def close(self):
        with self._lock:
            if self._app is not None:
                firebase_admin.delete_app(self._app)
                self._app = None
                logger.info(f"Firebase app '{self._app_name}' deleted.")
