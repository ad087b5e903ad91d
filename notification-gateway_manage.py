import logging
import sys

import uvicorn
from app import create_app
from app.config.config import Config, ConfigError

logger = logging.getLogger(__name__)

try:
    app = create_app()
except ConfigError as e:
    # 설정 파일 오류는 치명적: 서버를 띄우지 않고 종료
    logger.error(f"Error loading config: {e}")
    sys.exit(1)

if __name__ == '__main__':
    uvicorn.run(
        app,
        host=Config.HOST,
        port=Config.PORT,
        log_config=None # logging.basicConfig를 사용하므로 Uvicorn의 기본 로깅 설정을 비활성화
    )
