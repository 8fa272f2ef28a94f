"""
OpenAI 兼容接口 Provider（通用实现，可用于通义千问、DeepSeek 等）
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator

import httpx

from ..models.options import LLMOptions
from .base import LLMProvider, LLMPurpose, LLMResponse, extract_message_content


class OpenAICompatibleProvider(LLMProvider):
    """
    OpenAI 兼容接口 Provider

    支持所有使用 OpenAI API 格式的模型服务商：
    - 阿里云百炼 (通义千问)
    - DeepSeek
    - OpenAI
    等
    """

    @property
    def name(self) -> str:
        return "openai_compatible"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(
        self,
        prompt: str,
        system_prompt: str | None,
        options: LLMOptions,
        *,
        stream: bool = False,
    ) -> dict[str, Any]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "top_p": options.top_p,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def invoke(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> LLMResponse:
        options = options or LLMOptions()

        async with httpx.AsyncClient(timeout=options.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=self._payload(prompt, system_prompt, options),
            )
            response.raise_for_status()
            data = response.json()

        usage = data.get("usage", {})

        return LLMResponse(
            content=extract_message_content(data).strip(),
            model=data.get("model", self.model),
            usage={
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
            },
        )

    async def invoke_stream(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        options: LLMOptions | None = None,
    ) -> AsyncIterator[str]:
        """以 SSE 方式流式读取增量内容"""
        options = options or LLMOptions()

        async with httpx.AsyncClient(timeout=options.timeout) as client:
            async with client.stream(
                "POST",
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=self._payload(prompt, system_prompt, options, stream=True),
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    delta = parse_sse_line(line)
                    if delta is None:
                        break
                    if delta:
                        yield delta


def parse_sse_line(line: str) -> str | None:
    """
    解析一行 SSE 数据

    Returns:
        增量文本；非数据行返回空字符串；遇到 [DONE] 返回 None
    """
    line = line.strip()
    if not line.startswith("data:"):
        return ""
    data = line[len("data:"):].strip()
    if data == "[DONE]":
        return None
    try:
        chunk = json.loads(data)
    except json.JSONDecodeError:
        return ""
    return extract_message_content(chunk)


class QwenProvider(OpenAICompatibleProvider):
    """通义千问（阿里云百炼兼容模式）Provider"""

    @property
    def name(self) -> str:
        return "qwen"


class DeepSeekProvider(OpenAICompatibleProvider):
    """DeepSeek Provider"""

    @property
    def name(self) -> str:
        return "deepseek"


def create_provider(
    provider_type: str,
    api_key: str,
    base_url: str,
    model: str,
    purpose: LLMPurpose = LLMPurpose.WRITING,
) -> LLMProvider:
    """
    工厂方法：创建 LLM Provider

    Args:
        provider_type: 提供商类型 (qwen, deepseek, openai_compatible)
        api_key: API Key
        base_url: Base URL
        model: 模型名称
        purpose: 模型用途

    Returns:
        LLMProvider 实例
    """
    providers = {
        "qwen": QwenProvider,
        "deepseek": DeepSeekProvider,
        "openai_compatible": OpenAICompatibleProvider,
    }

    provider_class = providers.get(provider_type, OpenAICompatibleProvider)
    return provider_class(
        api_key=api_key,
        base_url=base_url,
        model=model,
        purpose=purpose,
    )
