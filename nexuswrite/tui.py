"""
NexusWrite 交互式终端组件

大纲确认（修改标题 / 删除节点）与智能体配置表单
"""

from __future__ import annotations

from typing import Any

import questionary
from rich.console import Console
from rich.tree import Tree

from .models import ConfigField, OutlineNode, rename_node, remove_node, walk_nodes
from .store import initial_values

console = Console()


# 自定义样式
STYLE = questionary.Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:green"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
])

ACTION_CONFIRM = "confirm"
ACTION_RENAME = "rename"
ACTION_DELETE = "delete"
ACTION_CANCEL = "cancel"


def build_outline_tree(nodes: list[OutlineNode], title: str = "大纲") -> Tree:
    """把大纲树转换为 rich Tree"""
    tree = Tree(f"[bold]{title or '大纲'}[/bold]")

    def add(branch: Tree, node: OutlineNode) -> None:
        style = {1: "bold cyan", 2: "cyan", 3: "white"}.get(node.level, "white")
        child = branch.add(f"[{style}]{node.title}[/{style}]")
        for sub in node.children:
            add(child, sub)

    for node in nodes:
        add(tree, node)
    return tree


def display_outline(nodes: list[OutlineNode], title: str = "大纲") -> None:
    """显示大纲树；为空时显示无法解析的提示"""
    if not nodes:
        console.print("[yellow]无法解析大纲内容[/yellow]")
        return
    console.print(build_outline_tree(nodes, title))


def _node_choices(nodes: list[OutlineNode]) -> list[questionary.Choice]:
    return [
        questionary.Choice(title=f"{'  ' * (node.level - 1)}{node.title}", value=index)
        for index, node in enumerate(walk_nodes(nodes))
    ]


def edit_outline_interactive(nodes: list[OutlineNode], title: str = "大纲") -> bool:
    """
    交互式确认大纲

    修改和删除直接作用于传入的树。

    Returns:
        True 表示确认生成，False 表示取消
    """
    while True:
        display_outline(nodes, title)
        action = questionary.select(
            "请选择操作：",
            choices=[
                questionary.Choice("确认大纲，开始生成", value=ACTION_CONFIRM),
                questionary.Choice("修改标题", value=ACTION_RENAME),
                questionary.Choice("删除节点（含子节点）", value=ACTION_DELETE),
                questionary.Choice("取消", value=ACTION_CANCEL),
            ],
            style=STYLE,
        ).ask()

        if action in (None, ACTION_CANCEL):
            return False
        if action == ACTION_CONFIRM:
            return True
        if not nodes:
            console.print("[yellow]大纲为空，没有可编辑的节点[/yellow]")
            continue

        index = questionary.select("选择节点：", choices=_node_choices(nodes), style=STYLE).ask()
        if index is None:
            continue
        target = list(walk_nodes(nodes))[index]

        if action == ACTION_RENAME:
            new_title = questionary.text("新标题：", default=target.title, style=STYLE).ask()
            if new_title and new_title.strip():
                rename_node(nodes, target, new_title.strip())
        elif action == ACTION_DELETE:
            remove_node(nodes, target)


def prompt_config_values(
    fields: list[ConfigField],
    saved: dict[str, Any] | None = None,
    title: str = "配置",
) -> dict[str, Any] | None:
    """
    逐项填写配置表单

    Returns:
        填写结果；用户中断时返回 None
    """
    if not fields:
        return {}

    console.print(f"\n[bold]{title}[/bold]")
    values = initial_values(fields, saved)
    for field in fields:
        current = values.get(field.key, "")
        if field.type == "select" and field.options:
            answer = questionary.select(
                f"{field.label}：",
                choices=field.options,
                default=current if current in field.options else None,
                style=STYLE,
            ).ask()
        else:
            answer = questionary.text(
                f"{field.label}：",
                default=str(current or ""),
                multiline=field.type == "textarea",
                style=STYLE,
            ).ask()
        if answer is None:
            return None
        values[field.key] = answer
    return values
