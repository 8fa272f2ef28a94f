"""
工具函数模块
"""

from .outline import (
    parse_outline,
    extract_first_h1,
    is_heading_line,
)

__all__ = [
    "parse_outline",
    "extract_first_h1",
    "is_heading_line",
]
