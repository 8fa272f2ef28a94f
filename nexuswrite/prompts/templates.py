"""
Prompt 模板
"""

from __future__ import annotations

from typing import Any


REWRITE_SYSTEM_PROMPT = (
    "你是专业中文写作编辑。你只能改写用户给出的选中文本，不得新增小节标题、编号、章节名或未选中的事实信息。"
    "只输出最终改写文本，不要解释，不要加前后缀，不要使用 markdown 代码块。"
)

REWRITE_PROMPT = """改写要求：{instruction}

硬性约束：
1) 只改写待改写文本本身
2) 不得补写标题/编号（如"2.3 ..."）
3) 不得引入待改写文本之外的新段落主题

待改写文本：
{selected_text}

请直接输出最终文本。"""

REWRITE_INSTRUCTIONS = {
    "continue": "在保留原文开头和风格的前提下自然续写，并输出完整续写结果（包含原文）。",
    "polish": "在不改变核心信息的前提下润色表达，提升流畅度和可读性。",
    "expand": "在保留原意的前提下扩写，补充细节、论据或描写，让内容更饱满。",
    "custom": "请按用户要求改写。",
}

GENERATION_SYSTEM_PROMPT = (
    "你是专业的中文写作助手。请根据用户需求撰写完整文档，使用 Markdown 格式，"
    "第一行必须是以 # 开头的文档标题，只输出正文，不要解释。"
)

GENERATION_PROMPT = """写作需求：
{input}
{outline_block}{config_block}
请开始撰写。"""


def build_rewrite_prompt(selected_text: str, instruction: str) -> str:
    """构建选中文本改写 Prompt"""
    return REWRITE_PROMPT.format(instruction=instruction, selected_text=selected_text)


def build_generation_prompt(
    input: str,
    *,
    outline: str | None = None,
    memory_config: dict[str, Any] | None = None,
    params_config: dict[str, Any] | None = None,
) -> str:
    """构建正文生成 Prompt（大纲与智能体配置按需附加）"""
    outline_block = ""
    if outline:
        outline_block = f"\n请严格按照以下大纲组织内容：\n{outline}\n"

    config_lines = [
        f"- {key}: {value}"
        for key, value in {**(memory_config or {}), **(params_config or {})}.items()
        if value not in (None, "")
    ]
    config_block = ""
    if config_lines:
        config_block = "\n写作配置：\n" + "\n".join(config_lines) + "\n"

    return GENERATION_PROMPT.format(
        input=input,
        outline_block=outline_block,
        config_block=config_block,
    )
