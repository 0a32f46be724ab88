"""
Feature Gate 收集器

流程：
1. 获取 kube-system 下的全部 Pod (一次调用)
2. 按组件分类
3. 逐个容器提取并解析 --feature-gates
4. 汇总为 ComponentFeatureGateMatrix
"""

import logging
from typing import Dict, List, Optional, Sequence

from .classifier import classify_pods
from .k8s_client import DEFAULT_TIMEOUT, KubectlWrapper
from .models import (
    ComponentFeatureGateMatrix,
    ComponentSpec,
    ContainerFeatureGates,
    ContainerInfo,
    FeatureGateEntry,
    FeatureGateStatus,
    PodFeatureGates,
    PodInfo,
    SYSTEM_NAMESPACE,
    default_components,
)
from ..utils.errors import MalformedFeatureGateToken
from ..utils.parsers import find_feature_gates_flag, parse_feature_gates_value

logger = logging.getLogger(__name__)


def collect_running_cluster_feature_gates(
    client: KubectlWrapper,
    components: Optional[Sequence[ComponentSpec]] = None,
    namespace: str = SYSTEM_NAMESPACE,
    timeout: int = DEFAULT_TIMEOUT
) -> ComponentFeatureGateMatrix:
    """从运行中的集群收集系统组件的 Feature Gate 配置

    Args:
        client: 提供 list_pods 的客户端
        components: 组件定义 (默认 4 个核心组件)
        namespace: 命名空间 (默认 kube-system)
        timeout: Pod 列表调用的超时时间（秒）

    Returns:
        ComponentFeatureGateMatrix

    Raises:
        ConnectivityError / RetrievalError: 来自 client.list_pods, 不重试
    """
    if components is None:
        components = default_components()

    pods = client.list_pods(namespace=namespace, timeout=timeout)
    buckets = classify_pods(pods, components)

    return aggregate_feature_gates(buckets, namespace=namespace)


def aggregate_feature_gates(
    buckets: Dict[str, List[PodInfo]],
    namespace: str = SYSTEM_NAMESPACE
) -> ComponentFeatureGateMatrix:
    """对每个组件桶中的每个 Pod 的每个容器执行 提取 -> 解析"""
    matrix = ComponentFeatureGateMatrix(namespace=namespace)

    for component_name, pods in buckets.items():
        pod_configs = []
        for pod in pods:
            pod_config = PodFeatureGates(name=pod.name)
            for container in pod.containers:
                pod_config.containers.append(_collect_container(pod.name, container))
            pod_configs.append(pod_config)

        matrix.components[component_name] = pod_configs

    return matrix


def _collect_container(pod_name: str, container: ContainerInfo) -> ContainerFeatureGates:
    result = ContainerFeatureGates(name=container.name)

    raw_feature_gates = find_feature_gates_flag(container.args)
    if raw_feature_gates is None:
        return result

    try:
        feature_gates = parse_feature_gates_value(raw_feature_gates)
    except MalformedFeatureGateToken as e:
        logger.warning(
            "pod %s container %s: malformed feature gate token %r",
            pod_name, container.name, e.token
        )
        result.status = FeatureGateStatus.ERROR
        result.error = str(e)
        return result

    result.status = FeatureGateStatus.FOUND
    for key, value in feature_gates.items():
        result.feature_gates.append(FeatureGateEntry(key=key, value=value))

    return result
