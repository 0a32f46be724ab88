"""
工具模块
"""

from .errors import (
    CheckerError,
    CheckerErrorCode,
    ConnectivityError,
    RetrievalError,
    MalformedFeatureGateToken,
    ConfigurationError,
)
from .parsers import (
    find_feature_gates_flag,
    parse_feature_gates_value,
    format_feature_gates_value,
)

__all__ = [
    "CheckerError",
    "CheckerErrorCode",
    "ConnectivityError",
    "RetrievalError",
    "MalformedFeatureGateToken",
    "ConfigurationError",
    "find_feature_gates_flag",
    "parse_feature_gates_value",
    "format_feature_gates_value",
]
