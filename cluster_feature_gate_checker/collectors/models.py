"""
Feature Gate 收集器数据模型定义

Pod / 容器信息、组件定义以及最终的结果矩阵
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


SYSTEM_NAMESPACE = "kube-system"


class ComponentSpec(BaseModel):
    """系统组件定义: 标识名 + 用于匹配 Pod 名称的子串"""
    name: str = Field(min_length=1, description="组件标识")
    match: str = Field(min_length=1, description="Pod 名称中需包含的子串")

    @classmethod
    def of(cls, name: str) -> "ComponentSpec":
        return cls(name=name, match=name)


# 核心组件列表
BASIC_COMPONENTS = [
    "kube-apiserver",
    "kube-scheduler",
]

ALL_COMPONENTS = BASIC_COMPONENTS + [
    "kube-controller-manager",
    "kube-proxy",
]


def default_components(basic: bool = False) -> List[ComponentSpec]:
    """返回默认组件集合的新副本"""
    names = BASIC_COMPONENTS if basic else ALL_COMPONENTS
    return [ComponentSpec.of(name) for name in names]


class ContainerInfo(BaseModel):
    """流水线需要的容器字段"""
    name: str
    args: List[str] = Field(default_factory=list, description="command + args")

    @classmethod
    def from_k8s(cls, container: Dict) -> "ContainerInfo":
        command = container.get("command") or []
        args = container.get("args") or []
        return cls(name=container.get("name", ""), args=list(command) + list(args))


class PodInfo(BaseModel):
    """流水线需要的 Pod 字段"""
    name: str
    containers: List[ContainerInfo] = Field(default_factory=list)

    @classmethod
    def from_k8s(cls, pod: Dict) -> "PodInfo":
        metadata = pod.get("metadata") or {}
        spec = pod.get("spec") or {}
        return cls(
            name=metadata.get("name", ""),
            containers=[ContainerInfo.from_k8s(c) for c in spec.get("containers") or []],
        )


class FeatureGateStatus(str, Enum):
    """容器 feature-gates 状态枚举"""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class FeatureGateEntry(BaseModel):
    key: str = Field(min_length=1)
    value: str


class ContainerFeatureGates(BaseModel):
    name: str
    status: FeatureGateStatus = FeatureGateStatus.NOT_FOUND
    feature_gates: List[FeatureGateEntry] = Field(default_factory=list)
    error: Optional[str] = None


class PodFeatureGates(BaseModel):
    name: str
    containers: List[ContainerFeatureGates] = Field(default_factory=list)


class ComponentFeatureGateMatrix(BaseModel):
    """结果矩阵

    {"kube-apiserver": [PodFeatureGates, ...], "kube-scheduler": [], ...}
    """
    namespace: str = SYSTEM_NAMESPACE
    components: Dict[str, List[PodFeatureGates]] = Field(default_factory=dict)

    def has_errors(self) -> bool:
        return any(
            container.status == FeatureGateStatus.ERROR
            for pods in self.components.values()
            for pod in pods
            for container in pod.containers
        )
