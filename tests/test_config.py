#!/usr/bin/env python3
"""
测试配置加载: CLI 参数、环境变量与组件 YAML 文件
"""

import pytest

from cluster_feature_gate_checker.config import (
    ENV_COMPONENTS,
    ENV_CONTEXT,
    ENV_KUBECONFIG,
    ENV_TIMEOUT,
    CheckerConfig,
    default_kubeconfig,
    load_components_file,
    parse_components_list,
)
from cluster_feature_gate_checker.collectors import ALL_COMPONENTS, BASIC_COMPONENTS
from cluster_feature_gate_checker.utils.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (ENV_KUBECONFIG, ENV_CONTEXT, ENV_COMPONENTS, ENV_TIMEOUT):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    """测试1: 默认配置"""
    config = CheckerConfig.from_env()

    assert [c.name for c in config.components] == ALL_COMPONENTS
    assert all(c.name == c.match for c in config.components)
    assert config.kubeconfig == default_kubeconfig()
    assert config.context is None
    assert config.timeout == 15


def test_basic_preset():
    """测试2: --basic 只包含 apiserver 与 scheduler"""
    config = CheckerConfig.from_env(basic=True)
    assert [c.name for c in config.components] == BASIC_COMPONENTS


def test_env_overrides(monkeypatch):
    """测试3: 环境变量"""
    monkeypatch.setenv(ENV_KUBECONFIG, "/tmp/kubeconfig")
    monkeypatch.setenv(ENV_CONTEXT, "kind-dev")
    monkeypatch.setenv(ENV_COMPONENTS, "kube-apiserver, kube-proxy")
    monkeypatch.setenv(ENV_TIMEOUT, "30")

    config = CheckerConfig.from_env()

    assert config.kubeconfig == "/tmp/kubeconfig"
    assert config.context == "kind-dev"
    assert [c.name for c in config.components] == ["kube-apiserver", "kube-proxy"]
    assert config.timeout == 30


def test_cli_overrides_env(monkeypatch):
    """测试4: CLI 参数优先于环境变量"""
    monkeypatch.setenv(ENV_KUBECONFIG, "/tmp/from-env")
    monkeypatch.setenv(ENV_TIMEOUT, "30")

    config = CheckerConfig.from_env(
        kubeconfig="/tmp/from-cli",
        components="kube-scheduler",
        timeout=5,
    )

    assert config.kubeconfig == "/tmp/from-cli"
    assert [c.name for c in config.components] == ["kube-scheduler"]
    assert config.timeout == 5


def test_invalid_timeout(monkeypatch):
    """测试5: 无效超时"""
    monkeypatch.setenv(ENV_TIMEOUT, "soon")
    with pytest.raises(ConfigurationError):
        CheckerConfig.from_env()

    with pytest.raises(ConfigurationError):
        CheckerConfig.from_env(timeout=0)


def test_parse_components_list():
    """测试6: name=match 形式"""
    components = parse_components_list("api=kube-apiserver,kube-proxy")

    assert [(c.name, c.match) for c in components] == [
        ("api", "kube-apiserver"),
        ("kube-proxy", "kube-proxy"),
    ]

    with pytest.raises(ConfigurationError):
        parse_components_list(" , ")
    with pytest.raises(ConfigurationError):
        parse_components_list("api=")


def test_load_components_file_list(tmp_path):
    """测试7: YAML 列表格式"""
    path = tmp_path / "components.yaml"
    path.write_text(
        "components:\n"
        "  - kube-apiserver\n"
        "  - name: scheduler\n"
        "    match: kube-scheduler\n",
        encoding="utf-8",
    )

    components = load_components_file(str(path))

    assert [(c.name, c.match) for c in components] == [
        ("kube-apiserver", "kube-apiserver"),
        ("scheduler", "kube-scheduler"),
    ]


def test_load_components_file_mapping(tmp_path):
    """测试8: YAML 字典格式"""
    path = tmp_path / "components.yaml"
    path.write_text("api: kube-apiserver\nkube-proxy:\n", encoding="utf-8")

    config = CheckerConfig.from_env(components_file=str(path))

    assert [(c.name, c.match) for c in config.components] == [
        ("api", "kube-apiserver"),
        ("kube-proxy", "kube-proxy"),
    ]


def test_load_components_file_errors(tmp_path):
    """测试9: 文件缺失、YAML 无效、内容为空"""
    with pytest.raises(ConfigurationError):
        load_components_file(str(tmp_path / "missing.yaml"))

    broken = tmp_path / "broken.yaml"
    broken.write_text("components: [kube-apiserver\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_components_file(str(broken))

    empty = tmp_path / "empty.yaml"
    empty.write_text("components: []\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_components_file(str(empty))

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("kube-apiserver\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_components_file(str(scalar))


def test_duplicate_component_names(tmp_path):
    """测试10: 重复的组件标识名被拒绝"""
    with pytest.raises(ConfigurationError) as exc_info:
        CheckerConfig.from_env(components="kube-apiserver,kube-apiserver")
    print(f"  错误: {exc_info.value}")
    assert "duplicate" in str(exc_info.value)

    # 标识名不同、匹配子串相同是允许的
    components = parse_components_list("api=kube-apiserver,apiserver=kube-apiserver")
    assert [c.name for c in components] == ["api", "apiserver"]

    path = tmp_path / "components.yaml"
    path.write_text(
        "components:\n"
        "  - kube-apiserver\n"
        "  - name: kube-apiserver\n"
        "    match: apiserver\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigurationError):
        load_components_file(str(path))
