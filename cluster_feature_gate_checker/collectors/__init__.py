"""
收集器模块 - 系统组件 Feature Gate 数据收集

提供 Pod 获取、组件分类和 Feature Gate 汇总功能
"""

from .k8s_client import KubectlWrapper, DEFAULT_TIMEOUT
from .classifier import classify_pods
from .feature_gate_collector import (
    collect_running_cluster_feature_gates,
    aggregate_feature_gates,
)
from .models import (
    SYSTEM_NAMESPACE,
    BASIC_COMPONENTS,
    ALL_COMPONENTS,
    ComponentSpec,
    ContainerInfo,
    PodInfo,
    FeatureGateStatus,
    FeatureGateEntry,
    ContainerFeatureGates,
    PodFeatureGates,
    ComponentFeatureGateMatrix,
    default_components,
)

__all__ = [
    # K8s 客户端
    "KubectlWrapper",
    "DEFAULT_TIMEOUT",
    # 收集器
    "classify_pods",
    "collect_running_cluster_feature_gates",
    "aggregate_feature_gates",
    # 模型
    "SYSTEM_NAMESPACE",
    "BASIC_COMPONENTS",
    "ALL_COMPONENTS",
    "ComponentSpec",
    "ContainerInfo",
    "PodInfo",
    "FeatureGateStatus",
    "FeatureGateEntry",
    "ContainerFeatureGates",
    "PodFeatureGates",
    "ComponentFeatureGateMatrix",
    "default_components",
]
