"""
feature-gates 参数解析工具

提供从容器命令行中提取 --feature-gates 参数、解析其取值以及反向格式化的功能。
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .errors import MalformedFeatureGateToken


FEATURE_GATES_FLAG = "--feature-gates"


def find_feature_gates_flag(args: List[str]) -> Optional[str]:
    """从容器命令行参数中查找 --feature-gates 的取值

    规则:
    - 包含 "--feature-gates" 的参数都是候选, 最后一个候选生效
    - 取值为第一个 "=" 之后的全部内容 (取值中的 "=" 保留)
    - "--feature-gates Foo=true" 形式 (无 "=") 取下一个参数作为取值

    Args:
        args: 容器的命令行参数 (command + args)

    Returns:
        原始取值字符串; 没有找到该参数时返回 None
    """
    value = None

    for idx, arg in enumerate(args):
        if FEATURE_GATES_FLAG not in arg:
            continue

        _, sep, rest = arg.partition("=")
        if sep:
            value = rest
        elif idx + 1 < len(args):
            value = args[idx + 1]
        else:
            value = ""

    return value


def parse_feature_gates_value(raw_feature_gates: str) -> Dict[str, str]:
    """解析 feature-gates 的原始取值

    Example:
        >>> parse_feature_gates_value("Feature1=true,Feature2=false")
        {'Feature1': 'true', 'Feature2': 'false'}

    Args:
        raw_feature_gates: 逗号分隔的 key=value 列表

    Returns:
        key -> value 字典, 重复的 key 以最后一次出现为准

    Raises:
        MalformedFeatureGateToken: 某个 token 没有 "=" 或 key 为空
    """
    feature_gates: Dict[str, str] = {}

    for raw_kv_pair in raw_feature_gates.split(","):
        token = raw_kv_pair.strip()
        # 末尾逗号或空取值
        if not token:
            continue

        key, sep, value = token.partition("=")
        key = key.strip()
        if not sep or not key:
            raise MalformedFeatureGateToken(token)

        feature_gates[key] = value.strip()

    return feature_gates


def format_feature_gates_value(entries: Iterable[Tuple[str, str]]) -> str:
    """将 (key, value) 列表格式化为 --feature-gates 的取值形式"""
    return ",".join(f"{key}={value}" for key, value in entries)
