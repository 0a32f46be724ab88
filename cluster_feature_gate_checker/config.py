"""
检查器配置

优先级: CLI 参数 > 环境变量 (.env) > 默认值
"""

import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .collectors.k8s_client import DEFAULT_TIMEOUT
from .collectors.models import ComponentSpec, default_components
from .utils.errors import ConfigurationError


ENV_KUBECONFIG = "KUBECONFIG"
ENV_CONTEXT = "FEATURE_GATE_CHECKER_CONTEXT"
ENV_COMPONENTS = "FEATURE_GATE_CHECKER_COMPONENTS"
ENV_TIMEOUT = "FEATURE_GATE_CHECKER_TIMEOUT"


def default_kubeconfig() -> str:
    return str(Path.home() / ".kube" / "config")


def parse_components_list(raw: str) -> List[ComponentSpec]:
    """解析逗号分隔的组件列表, 如 "kube-apiserver,kube-scheduler"

    也支持 name=match 形式指定匹配子串。
    """
    components = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, match = item.partition("=")
        name = name.strip()
        match = match.strip() if sep else name
        if not name or not match:
            raise ConfigurationError("invalid component", field="components", value=item)
        components.append(ComponentSpec(name=name, match=match))

    if not components:
        raise ConfigurationError("component list is empty", field="components", value=raw)
    _check_unique_names(components, "components")
    return components


def load_components_file(path: str) -> List[ComponentSpec]:
    """从 YAML 文件加载组件定义

    支持格式:
        components:
          - kube-apiserver
          - name: scheduler
            match: kube-scheduler

        # 或
        kube-apiserver: kube-apiserver
        scheduler: kube-scheduler
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read components file: {e}", field="components_file", value=path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML: {e}", field="components_file", value=path)

    if isinstance(data, dict) and "components" in data:
        data = data["components"]

    components = _components_from_data(data, path)
    if not components:
        raise ConfigurationError("component list is empty", field="components_file", value=path)
    _check_unique_names(components, "components_file")
    return components


def _check_unique_names(components: List[ComponentSpec], field: str):
    """组件标识名必须唯一, 否则同一个 Pod 会在同一个桶中出现多次"""
    seen = set()
    for component in components:
        if component.name in seen:
            raise ConfigurationError("duplicate component name", field=field, value=component.name)
        seen.add(component.name)


def _components_from_data(data: Any, path: str) -> List[ComponentSpec]:
    components = []

    if isinstance(data, dict):
        for name, match in data.items():
            components.append(_make_component(name, match if match is not None else name, path))
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, str):
                components.append(_make_component(item, item, path))
            elif isinstance(item, dict) and "name" in item:
                components.append(_make_component(item["name"], item.get("match", item["name"]), path))
            else:
                raise ConfigurationError("invalid component entry", field="components_file", value=item)
    else:
        raise ConfigurationError(
            "expect a list or mapping of components", field="components_file", value=path
        )

    return components


def _make_component(name: Any, match: Any, path: str) -> ComponentSpec:
    if not isinstance(name, str) or not isinstance(match, str) or not name or not match:
        raise ConfigurationError(
            "component name and match must be non-empty strings",
            field="components_file",
            value=f"{path}: {name}={match}"
        )
    return ComponentSpec(name=name, match=match)


class CheckerConfig:
    """一次运行所需的全部配置"""

    def __init__(
        self,
        components: List[ComponentSpec],
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.components = components
        self.kubeconfig = kubeconfig
        self.context = context
        self.timeout = timeout

    @classmethod
    def from_env(
        cls,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        components: Optional[str] = None,
        components_file: Optional[str] = None,
        basic: bool = False,
        timeout: Optional[int] = None,
    ) -> "CheckerConfig":
        """根据 CLI 参数与环境变量构建配置

        Raises:
            ConfigurationError: 组件或超时配置无效
        """
        kubeconfig = kubeconfig or os.getenv(ENV_KUBECONFIG) or default_kubeconfig()
        context = context or os.getenv(ENV_CONTEXT) or None

        if components_file:
            component_specs = load_components_file(components_file)
        elif components:
            component_specs = parse_components_list(components)
        elif basic:
            component_specs = default_components(basic=True)
        elif os.getenv(ENV_COMPONENTS):
            component_specs = parse_components_list(os.getenv(ENV_COMPONENTS))
        else:
            component_specs = default_components()

        if timeout is None:
            raw_timeout = os.getenv(ENV_TIMEOUT)
            if raw_timeout:
                try:
                    timeout = int(raw_timeout)
                except ValueError:
                    raise ConfigurationError("timeout must be an integer", field=ENV_TIMEOUT, value=raw_timeout)
            else:
                timeout = DEFAULT_TIMEOUT

        if timeout <= 0:
            raise ConfigurationError("timeout must be positive", field="timeout", value=timeout)

        return cls(
            components=component_specs,
            kubeconfig=kubeconfig,
            context=context,
            timeout=timeout,
        )
