"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 권한 캐시 (Authorizer 소유)
    PERMISSION_CACHE_TTL_SEC: int = 300
    PERMISSION_CACHE_MAX_ENTRIES: int = 1024

    # SQLite 잠금 대기 (밀리초)
    DB_BUSY_TIMEOUT_MS: int = 30000


class Money:
    """금액 관련 상수

    금액은 항상 Decimal (고정 소수점). float 사용 금지.
    """

    # 허용 소수 자릿수 (최소 단위 0.01)
    SCALE: int = 2
    ZERO: str = "0"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DEFAULT_DB: Path = DATA_DIR / "ledger.db"
