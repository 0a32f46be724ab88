"""
结果输出 - 文本报告与 JSON
"""

from rich.console import Console
from rich.markup import escape

from ..collectors.models import ComponentFeatureGateMatrix, FeatureGateStatus
from ..utils.parsers import format_feature_gates_value


HEADER = "===== k8s running cluster feature gate checker ====="
ERROR_SUMMARY = "Some containers have malformed feature gates, see the entries above"


def render_report(matrix: ComponentFeatureGateMatrix, console: Console):
    """按 组件 -> Pod/容器 -> key=value 打印报告

    输出到管道或文件时不按终端宽度折行, 每条记录保持在一行。
    """
    def emit(text: str = ""):
        console.print(text, soft_wrap=True)

    emit(f"[bold cyan]{HEADER}[/bold cyan]")
    emit()

    for component_name, pods in matrix.components.items():
        emit(f"[bold]### {escape(component_name)}[/bold]")

        if not pods:
            emit("    [dim]No Pods Found[/dim]")

        for pod in pods:
            for container in pod.containers:
                label = escape(f"{pod.name}/{container.name}")

                if container.status == FeatureGateStatus.ERROR:
                    emit(
                        f"    {label}: [red]Malformed Feature Gates ({escape(container.error or '')})[/red]"
                    )
                    continue

                if not container.feature_gates:
                    emit(f"    {label}: [yellow]No Feature Gates Found[/yellow]")
                    continue

                emit(f"    {label}:")
                for entry in container.feature_gates:
                    emit(f"        {escape(format_feature_gates_value([(entry.key, entry.value)]))}")

        emit()

    if matrix.has_errors():
        emit(f"[yellow]⚠️  {ERROR_SUMMARY}[/yellow]")


def render_json(matrix: ComponentFeatureGateMatrix, console: Console):
    """以 JSON 形式输出结果矩阵"""
    console.print_json(matrix.model_dump_json())
