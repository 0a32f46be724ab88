#!/usr/bin/env python3
"""
测试 Feature Gate 收集流程（使用假的 kubectl 客户端）
"""

import logging

import pytest

from cluster_feature_gate_checker.collectors import (
    ComponentSpec,
    ContainerInfo,
    FeatureGateStatus,
    PodInfo,
    aggregate_feature_gates,
    classify_pods,
    collect_running_cluster_feature_gates,
    default_components,
)
from cluster_feature_gate_checker.utils.errors import RetrievalError


class FakeClient:
    """只实现 list_pods 的假客户端"""

    def __init__(self, pods=None, error=None):
        self.pods = pods or []
        self.error = error
        self.calls = []

    def list_pods(self, namespace="kube-system", timeout=15):
        self.calls.append((namespace, timeout))
        if self.error:
            raise self.error
        return self.pods


def _pod(name, *containers):
    return PodInfo(
        name=name,
        containers=[ContainerInfo(name=c_name, args=args) for c_name, args in containers],
    )


def test_end_to_end_scenario():
    """测试1: apiserver 有 feature-gates, scheduler 没有"""
    print("=" * 60)
    print("测试1: 端到端场景")
    print("=" * 60)

    client = FakeClient([
        _pod("kube-apiserver-1", ("kube-apiserver", ["--feature-gates=Foo=true,Bar=false"])),
        _pod("kube-scheduler-1", ("kube-scheduler", ["--v=2"])),
    ])

    matrix = collect_running_cluster_feature_gates(
        client, components=default_components(basic=True), timeout=5
    )
    print(matrix.model_dump_json(indent=2))

    assert client.calls == [("kube-system", 5)]
    assert list(matrix.components) == ["kube-apiserver", "kube-scheduler"]

    apiserver_pods = matrix.components["kube-apiserver"]
    assert len(apiserver_pods) == 1
    assert apiserver_pods[0].name == "kube-apiserver-1"
    container = apiserver_pods[0].containers[0]
    assert container.name == "kube-apiserver"
    assert container.status == FeatureGateStatus.FOUND
    assert {e.key: e.value for e in container.feature_gates} == {"Foo": "true", "Bar": "false"}

    scheduler_pods = matrix.components["kube-scheduler"]
    assert len(scheduler_pods) == 1
    container = scheduler_pods[0].containers[0]
    assert container.name == "kube-scheduler"
    assert container.status == FeatureGateStatus.NOT_FOUND
    assert container.feature_gates == []


def test_empty_cluster():
    """测试2: 集群没有 Pod"""
    matrix = collect_running_cluster_feature_gates(FakeClient([]))

    assert matrix.components == {
        "kube-apiserver": [],
        "kube-scheduler": [],
        "kube-controller-manager": [],
        "kube-proxy": [],
    }
    assert not matrix.has_errors()


def test_malformed_token_marks_container(caplog):
    """测试3: 格式错误只影响单个容器"""
    client = FakeClient([
        _pod(
            "kube-apiserver-1",
            ("kube-apiserver", ["--feature-gates=A=true,Bfalse"]),
            ("sidecar", ["--feature-gates=C=true"]),
        ),
    ])

    with caplog.at_level(logging.WARNING):
        matrix = collect_running_cluster_feature_gates(
            client, components=[ComponentSpec.of("kube-apiserver")]
        )

    broken, healthy = matrix.components["kube-apiserver"][0].containers
    assert broken.status == FeatureGateStatus.ERROR
    assert broken.feature_gates == []
    assert "Bfalse" in broken.error

    assert healthy.status == FeatureGateStatus.FOUND
    assert [(e.key, e.value) for e in healthy.feature_gates] == [("C", "true")]

    assert matrix.has_errors()
    assert "kube-apiserver-1" in caplog.text
    assert "Bfalse" in caplog.text


def test_order_is_preserved():
    """测试4: Pod 与容器顺序与输入一致"""
    pods = [
        _pod("kube-proxy-b", ("kube-proxy", []), ("init", [])),
        _pod("kube-proxy-a", ("kube-proxy", ["--feature-gates=X=true"])),
    ]
    buckets = classify_pods(pods, [ComponentSpec.of("kube-proxy")])
    matrix = aggregate_feature_gates(buckets)

    proxy_pods = matrix.components["kube-proxy"]
    assert [p.name for p in proxy_pods] == ["kube-proxy-b", "kube-proxy-a"]
    assert [c.name for c in proxy_pods[0].containers] == ["kube-proxy", "init"]


def test_only_parsed_entries_are_appended():
    """测试5: 条目数量等于解析出的 key 数量（重复 key 合并）"""
    buckets = {
        "kube-apiserver": [
            _pod("kube-apiserver-1", ("kube-apiserver", ["--feature-gates=A=true,A=false,B=true"])),
        ]
    }
    matrix = aggregate_feature_gates(buckets)
    entries = matrix.components["kube-apiserver"][0].containers[0].feature_gates

    assert [(e.key, e.value) for e in entries] == [("A", "false"), ("B", "true")]


def test_retrieval_error_propagates():
    """测试6: Pod 列表失败直接抛出, 不重试"""
    client = FakeClient(error=RetrievalError("forbidden", namespace="kube-system"))

    with pytest.raises(RetrievalError):
        collect_running_cluster_feature_gates(client)

    assert len(client.calls) == 1


if __name__ == "__main__":
    test_end_to_end_scenario()
    test_empty_cluster()
    test_order_is_preserved()
    test_only_parsed_entries_are_appended()
    print("\n✅ 所有测试通过")
