"""
系统组件分类器

按 Pod 名称子串把 Pod 分配到各个组件桶中。
"""

from typing import Dict, List, Sequence

from .models import ComponentSpec, PodInfo


def classify_pods(
    pods: Sequence[PodInfo],
    components: Sequence[ComponentSpec]
) -> Dict[str, List[PodInfo]]:
    """构建 组件 -> Pod 列表 的映射

    - 每个组件都会出现在结果中, 没有匹配时为空列表
    - Pod 保持发现顺序
    - 名称同时包含多个子串的 Pod 会出现在每个匹配的桶中

    Args:
        pods: 集群返回的 Pod 列表
        components: 组件定义 (标识名 + 匹配子串)

    Returns:
        {"kube-apiserver": [PodInfo, ...], "kube-scheduler": [], ...}
    """
    buckets: Dict[str, List[PodInfo]] = {component.name: [] for component in components}

    for pod in pods:
        for component in components:
            if component.match in pod.name:
                buckets[component.name].append(pod)

    return buckets
