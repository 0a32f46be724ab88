"""
Kubernetes 客户端 - 基于 kubectl

集群连接与认证 (kubeconfig、context、凭证插件) 全部交给 kubectl 处理,
这里只负责拼接命令、执行并把结果/错误转换为结构化数据。
"""

import json
import logging
import os
import subprocess
from typing import Dict, List, Optional

from .models import PodInfo, SYSTEM_NAMESPACE
from ..utils.errors import CheckerErrorCode, ConnectivityError, RetrievalError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15

# kubectl stderr 中表示无法建立/认证会话的特征
_CONNECTIVITY_MARKERS = (
    "unable to connect to the server",
    "connection refused",
    "no such host",
    "invalid configuration",
    "no configuration has been provided",
    "error loading config file",
    "does not exist",
    "context was not found",
)
_AUTH_MARKERS = (
    "unauthorized",
    "you must be logged in",
)
_TIMEOUT_MARKERS = (
    "context deadline exceeded",
    "client.timeout exceeded",
    "timeout",
)


class KubectlWrapper:
    """kubectl 封装"""

    def __init__(self, kubeconfig: Optional[str] = None, context: Optional[str] = None):
        """
        Args:
            kubeconfig: kubeconfig 路径 (可为 os.pathsep 分隔的多个路径, 默认交给 kubectl)
            context: kubeconfig context (默认使用 current-context)
        """
        self.kubeconfig = kubeconfig
        self.context = context
        self.kubectl_cmd = self._build_kubectl_cmd()

    def _build_kubectl_cmd(self) -> List[str]:
        """构建 kubectl 命令前缀"""
        cmd = ["kubectl"]
        # 多个路径时通过环境变量传递, --kubeconfig 只接受单个文件
        if self.kubeconfig and os.pathsep not in self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def _build_env(self) -> Optional[Dict[str, str]]:
        if self.kubeconfig and os.pathsep in self.kubeconfig:
            env = dict(os.environ)
            env["KUBECONFIG"] = self.kubeconfig
            return env
        return None

    def check_kubeconfig(self):
        """确认 kubeconfig 至少有一个文件存在

        Raises:
            ConnectivityError: 所有路径都不存在
        """
        if not self.kubeconfig:
            return

        paths = [p for p in self.kubeconfig.split(os.pathsep) if p]
        if not any(os.path.isfile(os.path.expanduser(p)) for p in paths):
            raise ConnectivityError(
                "kubeconfig file not found",
                kubeconfig=self.kubeconfig
            )

    def run(self, cmd: List[str], timeout: int = DEFAULT_TIMEOUT) -> Dict:
        """
        执行命令并解析结果

        Args:
            cmd: 命令列表
            timeout: 超时时间（秒）

        Returns:
            {"success": bool, "data": any, "error": str, "reason": str}
        """
        logger.debug("running: %s (timeout=%ss)", " ".join(cmd), timeout)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=self._build_env()
            )
        except subprocess.TimeoutExpired:
            return {
                "success": False,
                "error": f"Command timed out after {timeout}s",
                "reason": "timeout",
                "cmd": " ".join(cmd)
            }
        except FileNotFoundError as e:
            return {
                "success": False,
                "error": f"{cmd[0]} not found: {e}",
                "reason": "not_found",
                "cmd": " ".join(cmd)
            }

        if result.returncode != 0:
            return {
                "success": False,
                "error": result.stderr.strip(),
                "reason": "exit_code",
                "cmd": " ".join(cmd)
            }

        # 尝试解析 JSON
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            # 不是 JSON，返回原始文本
            data = result.stdout.strip()

        return {"success": True, "data": data}

    # === 标准 K8s 资源操作 ===

    def list_pods(self, namespace: str = SYSTEM_NAMESPACE,
                  timeout: int = DEFAULT_TIMEOUT) -> List[PodInfo]:
        """获取命名空间内的全部 Pod

        一次阻塞调用, 不重试。

        Raises:
            ConnectivityError: 无法连接或认证失败
            RetrievalError: 列表调用本身失败 (RBAC、超时、输出异常)
        """
        self.check_kubeconfig()

        cmd = self.kubectl_cmd + [
            "get", "pods",
            "-n", namespace,
            "--request-timeout", f"{timeout}s",
            "-o", "json"
        ]
        response = self.run(cmd, timeout=timeout)

        if not response["success"]:
            raise self._classify_failure(response, namespace)

        data = response["data"]
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            raise RetrievalError(
                "unexpected kubectl output, expect a PodList",
                namespace=namespace
            )

        pods = [PodInfo.from_k8s(item) for item in data["items"]]
        logger.debug("fetched %d pods from %s", len(pods), namespace)
        return pods

    def _classify_failure(self, response: Dict, namespace: str) -> Exception:
        """把失败的 kubectl 调用转换为 ConnectivityError / RetrievalError"""
        error = response.get("error", "")
        reason = response.get("reason")
        details = {"cmd": response.get("cmd", "")}

        if reason == "not_found":
            return ConnectivityError(error, kubeconfig=self.kubeconfig, details=details)

        if reason == "timeout":
            return RetrievalError(
                error, namespace=namespace,
                code=CheckerErrorCode.TIMEOUT, details=details
            )

        lowered = error.lower()
        if any(marker in lowered for marker in _AUTH_MARKERS):
            return ConnectivityError(
                error, kubeconfig=self.kubeconfig,
                code=CheckerErrorCode.AUTHENTICATION_FAILED, details=details
            )

        if any(marker in lowered for marker in _CONNECTIVITY_MARKERS):
            return ConnectivityError(error, kubeconfig=self.kubeconfig, details=details)

        if "forbidden" in lowered:
            return RetrievalError(
                error, namespace=namespace,
                code=CheckerErrorCode.PERMISSION_DENIED, details=details
            )

        if any(marker in lowered for marker in _TIMEOUT_MARKERS):
            return RetrievalError(
                error, namespace=namespace,
                code=CheckerErrorCode.TIMEOUT, details=details
            )

        return RetrievalError(error or "kubectl get pods failed", namespace=namespace, details=details)
