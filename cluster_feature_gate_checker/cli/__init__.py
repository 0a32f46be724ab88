"""
CLI 模块
"""
