"""
检查器错误类型定义

提供结构化的错误处理机制
"""

from enum import Enum
from typing import Dict, Any, Optional


class CheckerErrorCode(Enum):
    """检查器错误码枚举"""

    # 超时类错误
    TIMEOUT = "TIMEOUT"

    # 权限类错误
    PERMISSION_DENIED = "PERMISSION_DENIED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"

    # API 类错误
    API_ERROR = "API_ERROR"

    # 配置类错误
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_PARAMETER = "INVALID_PARAMETER"

    # 网络类错误
    CONNECTION_FAILED = "CONNECTION_FAILED"

    # 未知错误
    UNKNOWN = "UNKNOWN"


class CheckerError(Exception):
    """检查器异常基类

    Attributes:
        message: 错误消息
        code: 错误码
        details: 额外的错误详情
    """

    def __init__(
        self,
        message: str,
        code: CheckerErrorCode = CheckerErrorCode.UNKNOWN,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "error": self.message,
            "code": self.code.value,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.value}] {self.message} ({details_str})"
        return f"[{self.code.value}] {self.message}"


class ConnectivityError(CheckerError):
    """集群连接错误

    kubectl 不可用、kubeconfig 缺失、API Server 不可达或认证失败。
    发生在任何收集之前, 对本次运行是致命的。
    """

    def __init__(
        self,
        message: str,
        kubeconfig: Optional[str] = None,
        code: CheckerErrorCode = CheckerErrorCode.CONNECTION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        all_details = details or {}
        if kubeconfig:
            all_details["kubeconfig"] = kubeconfig

        super().__init__(message, code, all_details)


class RetrievalError(CheckerError):
    """Pod 列表获取错误

    例如 RBAC 拒绝、超时、输出无法解析。不重试, 直接终止运行。
    """

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        code: CheckerErrorCode = CheckerErrorCode.API_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        all_details = details or {}
        if namespace:
            all_details["namespace"] = namespace

        super().__init__(message, code, all_details)


class MalformedFeatureGateToken(CheckerError):
    """feature-gates 取值中的某个 token 缺少 key=value 分隔符

    只影响单个容器, 不会终止整个运行。
    """

    def __init__(
        self,
        token: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.token = token
        all_details = details or {}
        all_details["token"] = token

        super().__init__(
            f"malformed feature gate token {token!r}, expect key=value",
            CheckerErrorCode.INVALID_PARAMETER,
            all_details
        )


class ConfigurationError(CheckerError):
    """配置错误 (组件列表、超时等)"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        all_details = details or {}
        if field:
            all_details["field"] = field
        if value is not None:
            all_details["value"] = str(value)

        super().__init__(message, CheckerErrorCode.CONFIGURATION_ERROR, all_details)
