"""
大纲树模型

节点由解析器生成，之后的编辑（改标题）和删除（连同子树）都直接作用于内存中的树，
不会重新解析 Markdown。
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, Field


class OutlineNode(BaseModel):
    """大纲节点"""
    level: int = Field(..., ge=1, le=3, description="标题层级 1-3")
    title: str = Field(..., description="标题文本")
    children: list[OutlineNode] = Field(default_factory=list, description="子节点")

    def walk(self) -> Iterator[OutlineNode]:
        """前序遍历本节点及所有子孙节点"""
        yield self
        for child in self.children:
            yield from child.walk()


def walk_nodes(nodes: list[OutlineNode]) -> Iterator[OutlineNode]:
    """前序遍历整棵大纲树"""
    for node in nodes:
        yield from node.walk()


def rename_node(nodes: list[OutlineNode], target: OutlineNode, title: str) -> bool:
    """
    原地修改目标节点标题

    节点按对象身份匹配（同名节点互不影响）。

    Returns:
        是否找到目标节点
    """
    for node in walk_nodes(nodes):
        if node is target:
            node.title = title
            return True
    return False


def remove_node(nodes: list[OutlineNode], target: OutlineNode) -> bool:
    """
    原地删除目标节点及其子树

    Returns:
        是否找到目标节点
    """
    for index, node in enumerate(nodes):
        if node is target:
            del nodes[index]
            return True
        if remove_node(node.children, target):
            return True
    return False


def flatten_titles(nodes: list[OutlineNode]) -> list[str]:
    """按前序顺序列出所有标题"""
    return [node.title for node in walk_nodes(nodes)]


def outline_to_markdown(nodes: list[OutlineNode]) -> str:
    """按节点层级输出 Markdown 标题行"""
    return "\n".join(f"{'#' * node.level} {node.title}" for node in walk_nodes(nodes))
