from src.core.types._common_types import (
    AGGREGATED_EXCHANGE,
    ExchangeName,
    Product,
    Side,
    side_label,
)
from src.core.types._exception_types import (
    PAYLOAD_EXCEPTIONS,
    TRANSPORT_EXCEPTIONS,
    ErrorCode,
)

__all__ = [
    # _common_types
    "AGGREGATED_EXCHANGE",
    "ExchangeName",
    "Product",
    "Side",
    "side_label",
    # _exception_types
    "ErrorCode",
    "PAYLOAD_EXCEPTIONS",
    "TRANSPORT_EXCEPTIONS",
]
