"""I/O 경계 DTO 기반 클래스 모듈"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# 거래소 응답용 ConfigDict
# - 거래소가 필드를 추가해도 깨지지 않도록 extra="ignore"
# - 파싱 후 변경할 일이 없으므로 frozen=True
EXCHANGE_RESPONSE_CONFIG = ConfigDict(
    extra="ignore",
    frozen=True,
    str_strip_whitespace=True,
    arbitrary_types_allowed=False,
)


class BaseExchangeResponseDTO(BaseModel):
    """거래소 REST 응답 공통 베이스 모델.

    특징:
    - 불변 객체 (frozen=True)
    - 알 수 없는 필드 무시 (extra="ignore")
    """

    model_config = EXCHANGE_RESPONSE_CONFIG
