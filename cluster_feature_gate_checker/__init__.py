"""
Kubernetes 集群 Feature Gate 检查工具
"""

__version__ = "1.0.0"
