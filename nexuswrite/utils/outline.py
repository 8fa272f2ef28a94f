"""
Markdown 大纲解析

将带 # 标记的标题文本解析为最多 3 层的大纲树。正文行一律忽略。

注意：解析结果与 Markdown 之间不保证往返一致。编辑只作用于内存中的树，
编辑后不要通过重新解析来恢复结构。
"""

from __future__ import annotations

import re

from ..models import OutlineNode


HEADING_PATTERN = re.compile(r"^(#{1,3})\s+(.+)$")
H1_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)
MARKDOWN_HEADING_PATTERN = re.compile(r"^#{1,6}\s+")
NUMBERED_HEADING_PATTERN = re.compile(r"^\d+(\.\d+)+[\s　]+")


def parse_outline(markdown: str) -> list[OutlineNode]:
    """
    解析 Markdown 大纲文本为层级结构

    Args:
        markdown: 大纲文本，# / ## / ### 表示 1-3 级标题

    Returns:
        顶层节点列表；无法识别任何标题时返回空列表
    """
    roots: list[OutlineNode] = []
    stack: list[OutlineNode] = []

    for line in (markdown or "").split("\n"):
        match = HEADING_PATTERN.match(line)
        if not match:
            continue

        node = OutlineNode(level=len(match.group(1)), title=match.group(2).strip())

        # 弹出不可能成为父节点的层级
        while stack and stack[-1].level >= node.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots


def extract_first_h1(text: str) -> str | None:
    """从文本中提取第一个一级标题"""
    match = H1_PATTERN.search(text or "")
    if match:
        return match.group(1).strip() or None
    return None


def is_heading_line(text: str) -> bool:
    """判断一行是否为标题（Markdown 标题或 2.3 这样的编号标题）"""
    line = text.strip()
    return bool(MARKDOWN_HEADING_PATTERN.match(line) or NUMBERED_HEADING_PATTERN.match(line))
