from __future__ import annotations

import asyncio
import logging
import queue
import sys
from datetime import datetime
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from src.config.settings import logging_settings

# 레코드 속성으로 직접 넘길 수 없는 키 (LogRecord 예약어)
_RESERVED_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys() | {"message", "asctime"}
)


class PipelineLogger:
    """
    집계 파이프라인 로거
    - 컴포넌트 태그가 붙은 레코드
    - 키워드 인자를 그대로 extra로 전달 (phase, provider, status ...)
    - 큐 기반 핸들러로 호출 스레드는 블로킹하지 않음
    """

    # 프로세스 종료 시 flush 대상
    _instances: list[PipelineLogger] = []

    @classmethod
    def get_logger(cls, name: str, component: str | None = None, **kwargs) -> PipelineLogger:
        """
        logging.getLogger가 이름 단위로 같은 로거를 돌려주므로
        이름별 캐시 없이 매번 인스턴스를 만듭니다.
        """
        return cls(name, component, **kwargs)

    def __init__(
        self,
        name: str,
        component: str | None = None,
        level: int | str | None = None,
        log_to_file: bool | None = None,
        log_to_console: bool = True,
        log_dir: str | None = None,
        rotation: str = "midnight",
    ):
        """
        Args:
            name: 로거 이름
            component: 컴포넌트 이름 (app, core, exchange)
            level: 로깅 레벨 (기본: LOG_LEVEL)
            log_to_file: 파일 로깅 여부 (기본: LOG_TO_FILE)
            log_to_console: stderr 로깅 여부
            log_dir: 로그 디렉토리 (기본: LOG_DIR)
            rotation: 파일 로테이션 주기
        """
        self.name = name
        self.component = component
        self.level = level or logging_settings.level.upper()
        self.log_to_file = logging_settings.to_file if log_to_file is None else log_to_file
        self.log_to_console = log_to_console
        self.log_dir = log_dir or logging_settings.dir
        self.rotation = rotation

        self.log_queue: queue.Queue = queue.Queue()
        self._setup_logger()

    def _setup_logger(self) -> None:
        self.logger_name = f"{self.name}.{self.component}" if self.component else self.name
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(self.level)

        # 같은 이름으로 재생성될 때 핸들러 중복 방지
        if self.logger.hasHandlers():
            self.logger.handlers.clear()

        self.formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(component)s] %(message)s"
        )

        handlers: list[logging.Handler] = []

        if self.log_to_console:
            # stdout은 가격 결과 출력 전용
            console = logging.StreamHandler(sys.stderr)
            console.setFormatter(self.formatter)
            handlers.append(console)

        if self.log_to_file:
            log_filename = self._get_log_filename()
            Path(log_filename).parent.mkdir(parents=True, exist_ok=True)

            file_handler = TimedRotatingFileHandler(
                filename=log_filename,
                when=self.rotation,
                backupCount=7,
            )
            file_handler.setFormatter(self.formatter)
            handlers.append(file_handler)

        self.queue_handler = QueueHandler(self.log_queue)
        self.logger.addHandler(self.queue_handler)

        self.listener = QueueListener(self.log_queue, *handlers, respect_handler_level=True)
        self.listener.start()
        self._closed = False
        PipelineLogger._instances.append(self)

    def _get_log_filename(self) -> str:
        today = datetime.now().strftime("%Y-%m-%d")
        component_part = f"{self.component}/" if self.component else ""
        return f"{self.log_dir}/{component_part}{self.name}_{today}.log"

    def _process_message(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        """
        키워드 필드를 LogRecord extra로 변환

        - exc_info / stack_info 는 logging에 그대로 전달
        - extra={...} 로 넘긴 딕셔너리는 풀어서 병합
        - 예약어와 겹치는 키는 field_ 접두사를 붙여 보존
        """
        exc_info = fields.pop("exc_info", None)
        stack_info = bool(fields.pop("stack_info", False))

        merged: dict[str, Any] = {}
        nested = fields.pop("extra", None)
        if isinstance(nested, dict):
            merged.update(nested)
        merged.update(fields)

        log_extra: dict[str, Any] = {"component": self.component or "main"}
        for key, value in merged.items():
            log_extra[f"field_{key}" if key in _RESERVED_KEYS else key] = value

        self.logger.log(level, msg, exc_info=exc_info, stack_info=stack_info, extra=log_extra)

    async def alog(self, level: int, msg: str, **kwargs) -> None:
        """
        이벤트 루프 안에서는 기본 executor로 위임, 루프 밖이면 동기 처리
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._process_message(level, msg, kwargs)
            return
        await loop.run_in_executor(None, self._process_message, level, msg, kwargs)

    def debug(self, msg: str, **kwargs) -> None:
        self._process_message(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._process_message(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._process_message(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._process_message(logging.ERROR, msg, kwargs)

    async def awarning(self, msg: str, **kwargs) -> None:
        await self.alog(logging.WARNING, msg, **kwargs)

    def close(self) -> None:
        """큐에 남은 레코드 flush 후 리스너 종료 (중복 호출 무시)"""
        if self._closed:
            return
        self._closed = True
        self.listener.stop()

    @classmethod
    def shutdown(cls) -> None:
        """생성된 모든 로거의 리스너 종료. 프로세스 종료 직전에 호출합니다."""
        while cls._instances:
            cls._instances.pop().close()
