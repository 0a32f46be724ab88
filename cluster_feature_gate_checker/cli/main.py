#!/usr/bin/env python3
"""
Kubernetes 集群 Feature Gate 检查工具

- 输入: kubeconfig (KUBECONFIG 或 ~/.kube/config) 与组件列表
- 处理: 获取 kube-system Pod, 解析各容器的 --feature-gates
- 输出: 按组件 / Pod / 容器分组的 Feature Gate 报告
"""

import argparse
import logging
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cluster_feature_gate_checker.cli.report import render_json, render_report
from cluster_feature_gate_checker.collectors import (
    KubectlWrapper,
    SYSTEM_NAMESPACE,
    collect_running_cluster_feature_gates,
)
from cluster_feature_gate_checker.config import CheckerConfig
from cluster_feature_gate_checker.utils.errors import CheckerError


console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("cluster_feature_gate_checker")


def setup_logging(verbose: bool = False):
    """日志输出到 stderr, 不干扰报告"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def run(args: argparse.Namespace, out: Console = console) -> int:
    """执行一次 收集 -> 报告

    Returns:
        进程退出码
    """
    try:
        config = CheckerConfig.from_env(
            kubeconfig=args.kubeconfig,
            context=args.context,
            components=args.components,
            components_file=args.components_file,
            basic=args.basic,
            timeout=args.timeout,
        )
        logger.debug(
            "components: %s", ", ".join(c.name for c in config.components)
        )

        client = KubectlWrapper(kubeconfig=config.kubeconfig, context=config.context)
        matrix = collect_running_cluster_feature_gates(
            client,
            components=config.components,
            namespace=SYSTEM_NAMESPACE,
            timeout=config.timeout,
        )
    except CheckerError as e:
        err_console.print(f"[red]❌ {escape(str(e))}[/red]", highlight=False)
        return 1

    if args.output == "json":
        render_json(matrix, out)
    else:
        render_report(matrix, out)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cluster-feature-gate-checker",
        description="检查运行中集群的系统组件 Feature Gate 配置",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  %(prog)s
  %(prog)s --basic
  %(prog)s --components kube-apiserver,kube-proxy --output json
  KUBECONFIG=~/.kube/dev %(prog)s --context kind-dev
        """
    )

    parser.add_argument("--kubeconfig", help="kubeconfig 路径 (默认 $KUBECONFIG 或 ~/.kube/config)")
    parser.add_argument("--context", help="kubeconfig context")

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--components",
        help="逗号分隔的组件列表, 支持 name=match"
    )
    group.add_argument(
        "--components-file",
        help="组件定义 YAML 文件"
    )
    group.add_argument(
        "--basic",
        action="store_true",
        help="只检查 kube-apiserver 与 kube-scheduler"
    )

    parser.add_argument("--timeout", type=int, help="Pod 列表调用超时（秒）")
    parser.add_argument(
        "-o", "--output",
        choices=["text", "json"],
        default="text",
        help="输出格式"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    return parser


def main():
    """CLI 主入口"""
    load_dotenv()

    args = build_parser().parse_args()
    setup_logging(args.verbose)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]⚠️  用户中断[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
