"""
설정 로더

settings.yaml 로드 및 DB/권한 캐시/Web 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths
from core.types import Environment


@dataclass(frozen=True)
class DatabaseConfig:
    """DB 설정"""

    path: Path = Paths.DEFAULT_DB
    busy_timeout_ms: int = Defaults.DB_BUSY_TIMEOUT_MS


@dataclass(frozen=True)
class AuthConfig:
    """권한 캐시 설정"""

    permission_cache_ttl_sec: int = Defaults.PERMISSION_CACHE_TTL_SEC
    permission_cache_max_entries: int = Defaults.PERMISSION_CACHE_MAX_ENTRIES


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    environment: Environment = Environment.DEVELOPMENT
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    web: WebConfig = field(default_factory=WebConfig)


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigLoadError(f"settings.yaml의 '{name}' 섹션 형식이 잘못되었습니다")
    return section


def _positive_int(section: dict[str, Any], key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigLoadError(
            f"settings.yaml의 {name}.{key} 값은 양의 정수여야 합니다: {value!r}"
        )
    return value


def load_app_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로, 파일이 없으면 기본값)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigLoadError: 지정한 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 environment인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE
        if not path.exists():
            return AppConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise ConfigLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise ConfigLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    # environment 검증
    env_str = data.get("environment", Environment.DEVELOPMENT.value)
    try:
        environment = Environment(env_str)
    except ValueError as e:
        valid_envs = [env.value for env in Environment]
        raise ValueError(
            f"유효하지 않은 environment입니다: '{env_str}'. "
            f"유효한 값: {valid_envs}"
        ) from e

    # DB 설정 (상대 경로는 프로젝트 루트 기준)
    db_section = _section(data, "database")
    db_path = Path(db_section.get("path", Paths.DEFAULT_DB))
    if not db_path.is_absolute():
        db_path = PROJECT_ROOT / db_path

    database = DatabaseConfig(
        path=db_path,
        busy_timeout_ms=_positive_int(
            db_section, "busy_timeout_ms", Defaults.DB_BUSY_TIMEOUT_MS, "database",
        ),
    )

    auth_section = _section(data, "auth")
    auth = AuthConfig(
        permission_cache_ttl_sec=_positive_int(
            auth_section, "permission_cache_ttl_sec",
            Defaults.PERMISSION_CACHE_TTL_SEC, "auth",
        ),
        permission_cache_max_entries=_positive_int(
            auth_section, "permission_cache_max_entries",
            Defaults.PERMISSION_CACHE_MAX_ENTRIES, "auth",
        ),
    )

    web_section = _section(data, "web")
    web = WebConfig(
        host=str(web_section.get("host", Defaults.WEB_HOST)),
        port=_positive_int(web_section, "port", Defaults.WEB_PORT, "web"),
    )

    return AppConfig(environment=environment, database=database, auth=auth, web=web)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_app_config(settings_path)

    @property
    def config(self) -> AppConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def environment(self) -> Environment:
        """실행 환경"""
        return self.config.environment

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        return self.config.database.path

    @property
    def db_busy_timeout_ms(self) -> int:
        """DB 잠금 대기 시간"""
        return self.config.database.busy_timeout_ms

    @property
    def auth(self) -> AuthConfig:
        """권한 캐시 설정"""
        return self.config.auth

    @property
    def web(self) -> WebConfig:
        """Web 서버 설정"""
        return self.config.web

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
