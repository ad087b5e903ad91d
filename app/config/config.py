import json
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    # 게이트웨이 설정 파일 경로 (실행 인자로는 바꿀 수 없음)
    CONFIG_FILE = os.getenv("GATEWAY_CONFIG_FILE", "config.json")
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8080"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class ConfigError(Exception):
    """설정 파일을 읽거나 해석할 수 없을 때 발생합니다."""


class EmailConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    smtp_host: StrictStr
    smtp_port: StrictInt = Field(ge=1, le=65535)
    username: StrictStr
    password: StrictStr


class FirebaseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials_file: StrictStr


class GatewayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailConfig
    firebase: FirebaseConfig


def _describe(e: ValidationError) -> str:
    # 입력값(비밀번호 등)은 메시지에 포함하지 않음
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
    )


def _warn_empty_fields(gateway_config: GatewayConfig):
    sections = {"email": gateway_config.email, "firebase": gateway_config.firebase}
    for section_name, section in sections.items():
        for field_name, value in section.model_dump().items():
            if value == "":
                logger.warning(f"Config field '{section_name}.{field_name}' is empty; it will be used as-is.")


def load_config(path: Optional[str] = None) -> GatewayConfig:
    """
    JSON 설정 파일을 읽어 GatewayConfig 를 반환합니다.
    파일을 열 수 없거나, JSON 이 아니거나, 형식이 맞지 않으면 ConfigError 를 발생시킵니다.
    """
    path = path or Config.CONFIG_FILE
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot open config file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file '{path}' is not valid JSON: {e}") from e

    try:
        gateway_config = GatewayConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Config file '{path}' has an invalid shape: {_describe(e)}") from e

    _warn_empty_fields(gateway_config)
    logger.info(f"Loaded gateway config from {path}")
    return gateway_config
