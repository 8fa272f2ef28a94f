"""
选中文本改写

改写结果回到文档之前必须经过 sanitize_rewrite_output：
如果原选中文本不是以标题开头，模型输出里的标题/编号行一律去掉。
"""

from __future__ import annotations

from enum import Enum

import httpx

from .llm import LLMProvider
from .models import LLMOptions
from .prompts import REWRITE_INSTRUCTIONS, REWRITE_SYSTEM_PROMPT, build_rewrite_prompt
from .utils import is_heading_line


class RewriteType(str, Enum):
    """改写类型"""
    CONTINUE = "continue"  # 续写
    POLISH = "polish"      # 润色
    EXPAND = "expand"      # 扩写
    CUSTOM = "custom"      # 自定义


class RewriteError(Exception):
    """改写失败（携带 HTTP 风格的状态码）"""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.status} {self.message}>"


def get_rewrite_instruction(rewrite_type: RewriteType | str, custom_prompt: str | None = None) -> str:
    """获取改写指令"""
    try:
        rewrite_type = RewriteType(rewrite_type)
    except ValueError:
        return "请改写文本。"
    if rewrite_type == RewriteType.CUSTOM and custom_prompt and custom_prompt.strip():
        return custom_prompt.strip()
    return REWRITE_INSTRUCTIONS[rewrite_type.value]


def sanitize_rewrite_output(selected_text: str, output: str) -> str:
    """
    清理模型输出

    选中文本本身不以标题开头时，去掉输出中第一行之后的所有标题行；
    若剩余内容的第一行仍是标题，也一并去掉。
    """
    cleaned = (output or "").strip()
    if not cleaned or is_heading_line(selected_text):
        return cleaned

    lines = cleaned.split("\n")
    kept = [line for index, line in enumerate(lines) if index == 0 or not is_heading_line(line)]
    cleaned = "\n".join(kept).strip()

    first_line = cleaned.split("\n")[0] if cleaned else ""
    if is_heading_line(first_line):
        cleaned = "\n".join(cleaned.split("\n")[1:]).strip()
    return cleaned


class Rewriter:
    """调用 LLM 改写选中文本"""

    def __init__(self, provider: LLMProvider, options: LLMOptions | None = None):
        self.provider = provider
        self.options = options or LLMOptions()

    async def rewrite(
        self,
        selected_text: str,
        rewrite_type: RewriteType | str = RewriteType.POLISH,
        custom_prompt: str | None = None,
    ) -> str:
        """
        改写选中文本

        Raises:
            RewriteError: 输入为空、上游请求失败或模型未返回有效结果
        """
        if not self.provider.api_key:
            raise RewriteError(500, "服务端未配置 QWEN_API_KEY")
        selected_text = (selected_text or "").strip()
        if not selected_text:
            raise RewriteError(400, "selectedText 不能为空")

        instruction = get_rewrite_instruction(rewrite_type, custom_prompt)
        try:
            response = await self.provider.invoke(
                build_rewrite_prompt(selected_text, instruction),
                system_prompt=REWRITE_SYSTEM_PROMPT,
                options=self.options,
            )
        except httpx.HTTPStatusError as e:
            raise RewriteError(e.response.status_code, _upstream_error_message(e.response)) from e
        except httpx.HTTPError as e:
            raise RewriteError(500, str(e) or "改写服务调用失败") from e

        cleaned = sanitize_rewrite_output(selected_text, response.content)
        if not cleaned:
            raise RewriteError(502, "模型未返回有效改写结果")
        return cleaned


def _upstream_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return message
    return f"Qwen API 请求失败（{response.status_code}）"
