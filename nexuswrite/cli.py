"""
NexusWrite CLI 命令行入口

主要命令：
- write: 输入写作需求，经过大纲确认（或智能体配置）后流式生成文档
- outline: 解析 Markdown 大纲并显示树形结构
- tasks: 查看 / 删除历史任务
- rewrite: 改写一段选中文本
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import (
    AppConfig,
    create_rewrite_provider,
    create_task_store,
    create_writing_provider,
    find_scenario,
    load_config,
    load_scenarios,
)
from .models import Mode, Scenario, WritingContext, WritingState
from .prompts import GENERATION_SYSTEM_PROMPT, build_generation_prompt
from .rewrite import RewriteError, Rewriter, RewriteType
from .store import TaskStore
from .tui import display_outline, edit_outline_interactive, prompt_config_values
from .utils import parse_outline
from .workflow import GenerationTask, WritingSession, llm_text_stream


app = typer.Typer(
    name="nexuswrite",
    help="NexusWrite - AI 辅助写作工作台",
    add_completion=False,
)
tasks_app = typer.Typer(help="管理历史任务", add_completion=False)
app.add_typer(tasks_app, name="tasks")

console = Console()

THINKING_SECONDS = 1.5


def _load_scenario(scenarios_file: Optional[Path], scenario_id: Optional[str]) -> Scenario | None:
    if scenarios_file is None:
        if scenario_id:
            raise typer.BadParameter("指定 --scenario 时必须同时提供 --scenarios 文件")
        return None
    scenarios = load_scenarios(scenarios_file)
    if scenario_id is None:
        return scenarios[0] if scenarios else None
    scenario = find_scenario(scenarios, scenario_id)
    if scenario is None:
        raise typer.BadParameter(f"未找到场景: {scenario_id}")
    return scenario


def _llm_source_factory(config: AppConfig):
    provider = create_writing_provider(config)

    def factory(context: WritingContext):
        prompt = build_generation_prompt(
            context.input,
            outline=context.outline,
            memory_config=context.memory_config,
            params_config=context.params_config,
        )
        return llm_text_stream(
            provider,
            prompt,
            system_prompt=GENERATION_SYSTEM_PROMPT,
            options=config.llm_options(),
        )

    return factory


def _run_generation(session: WritingSession, generation: GenerationTask) -> None:
    """运行生成任务，Ctrl+C 时取消并保留已生成的内容"""

    async def run() -> str:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            bar = progress.add_task("正在生成...", total=None)

            def on_event(event) -> None:
                progress.update(
                    bar,
                    description=f"正在生成《{session.context.document_name}》... {len(event.content)} 字",
                )

            generation.add_listener(on_event)
            generation.start()
            return await generation.wait()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        session.cancel()
        console.print("\n[yellow]已取消[/yellow]")
        raise typer.Exit(code=1)


@app.command("write")
def write(
    text: str = typer.Argument(..., help="写作需求；包含 @ 时进入智能体模式"),
    scenarios_file: Optional[Path] = typer.Option(
        None,
        "--scenarios", "-s",
        help="场景配置 YAML 文件",
        exists=True,
    ),
    scenario_id: Optional[str] = typer.Option(
        None,
        "--scenario", "-a",
        help="场景 / 智能体 ID（默认使用文件中的第一个）",
    ),
    agent: bool = typer.Option(
        False,
        "--agent",
        help="使用智能体模式（跳过大纲确认）",
    ),
    yes: bool = typer.Option(
        False,
        "--yes", "-y",
        help="不进行交互，直接确认大纲 / 使用默认配置",
    ),
    use_llm: bool = typer.Option(
        False,
        "--llm",
        help="调用 LLM 生成正文（默认回放场景中的参考正文）",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="将生成的文档保存到文件",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    输入写作需求并生成文档

    通用模式：思考 -> 大纲确认 -> 生成；智能体模式：配置记忆/参数 -> 生成。
    """
    config = load_config(env_file)
    scenario = _load_scenario(scenarios_file, scenario_id)
    store = create_task_store(config, console=console)

    session = WritingSession(
        store,
        scenario=scenario,
        settings=config.generation,
        text_source=_llm_source_factory(config) if use_llm else None,
        console=console,
    )
    task = session.start(text, Mode.AGENT if agent else Mode.GENERAL)

    console.print(Panel(
        "[bold]NexusWrite 写作任务[/bold]\n"
        f"任务 ID: {task.id}\n"
        f"模式: {session.mode.value}\n"
        f"场景: {scenario.name if scenario else '（未指定）'}",
        border_style="blue",
    ))

    if session.mode == Mode.GENERAL:
        with console.status("[bold blue]🤔 正在思考...[/bold blue]"):
            time.sleep(0 if yes else THINKING_SECONDS)
        nodes = session.finish_thinking()
        title = session.outline_title()
        if yes:
            display_outline(nodes, title)
        elif not edit_outline_interactive(nodes, title):
            console.print("[yellow]已取消，任务保留在大纲确认阶段[/yellow]")
            raise typer.Exit(code=1)
        generation = session.confirm_outline(nodes)
    else:
        if scenario and not yes:
            agent_config = scenario.agent_config
            memory = prompt_config_values(
                agent_config.memory_configs,
                session.values.get_memory_values(scenario.id),
                title="记忆变量",
            )
            params = prompt_config_values(
                agent_config.param_configs,
                session.values.get_param_values(scenario.id),
                title="参数配置",
            )
            if memory is None or params is None:
                console.print("[yellow]已取消[/yellow]")
                raise typer.Exit(code=1)
            session.update_memory_config(memory)
            missing = session.update_params_config(params)
            if missing:
                console.print(f"[red]请填写以下必填项：{'、'.join(missing)}[/red]")
                raise typer.Exit(code=1)
        generation = session.start_generation()

    if generation is None:
        console.print(f"[red]✗ 当前状态 {session.state.value} 无法开始生成[/red]")
        raise typer.Exit(code=1)

    try:
        _run_generation(session, generation)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n[red]错误: {e}[/red]")
        raise typer.Exit(code=1)

    content = session.context.content or ""
    console.print(Panel(Markdown(content or "（空文档）"), title=session.context.document_name, border_style="green"))

    if output_file:
        output_file.write_text(content, encoding="utf-8")
        console.print(f"\n[green]✓ 文档已保存到: {output_file}[/green]")


@app.command("outline")
def outline(
    input_file: Path = typer.Argument(
        ...,
        help="Markdown 大纲文件（# / ## / ### 标题）",
        exists=True,
    ),
) -> None:
    """解析 Markdown 大纲并显示三级树形结构"""
    text = input_file.read_text(encoding="utf-8")
    nodes = parse_outline(text)
    display_outline(nodes, input_file.stem)


def _format_time(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def _open_store(env_file: Optional[Path]) -> TaskStore:
    return create_task_store(load_config(env_file), console=console)


@tasks_app.command("list")
def tasks_list(
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """按更新时间列出最近任务"""
    tasks = _open_store(env_file).list()
    if not tasks:
        console.print("[dim]暂无任务[/dim]")
        return

    table = Table(title="最近任务", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("名称", style="cyan")
    table.add_column("模式")
    table.add_column("状态")
    table.add_column("更新时间", justify="right")
    for task in tasks:
        state_style = "green" if task.writing_state == WritingState.FINISHED else "yellow"
        table.add_row(
            task.id,
            task.name if len(task.name) <= 30 else task.name[:30] + "…",
            task.mode.value,
            f"[{state_style}]{task.writing_state.value}[/{state_style}]",
            _format_time(task.updated_at),
        )
    console.print(table)


@tasks_app.command("show")
def tasks_show(
    task_id: str = typer.Argument(..., help="任务 ID"),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """显示任务详情"""
    task = _open_store(env_file).get(task_id)
    if task is None:
        console.print(f"[red]未找到任务: {task_id}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(
        f"[bold]{task.document_name}[/bold]\n"
        f"名称: {task.name}\n"
        f"模式: {task.mode.value}\n"
        f"状态: {task.writing_state.value}\n"
        f"场景: {task.scenario_id or '-'}\n"
        f"创建: {_format_time(task.created_at)}  更新: {_format_time(task.updated_at)}",
        title=task.id,
        border_style="blue",
    ))
    if task.outline:
        display_outline(parse_outline(task.outline), "大纲")
    if task.content:
        console.print(Markdown(task.content))


@tasks_app.command("delete")
def tasks_delete(
    task_id: str = typer.Argument(..., help="任务 ID"),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """删除任务"""
    if _open_store(env_file).delete(task_id):
        console.print(f"[green]✓ 已删除任务: {task_id}[/green]")
    else:
        console.print(f"[dim]任务不存在: {task_id}[/dim]")


@app.command("rewrite")
def rewrite(
    text: str = typer.Argument(..., help="待改写的选中文本"),
    rewrite_type: RewriteType = typer.Option(
        RewriteType.POLISH,
        "--type", "-t",
        help="改写类型",
        case_sensitive=False,
    ),
    custom_prompt: Optional[str] = typer.Option(
        None,
        "--prompt", "-p",
        help="自定义改写要求（--type custom 时使用）",
    ),
    env_file: Optional[Path] = typer.Option(None, "--env", "-e", help=".env 配置文件路径"),
) -> None:
    """调用 LLM 改写选中文本"""
    config = load_config(env_file)
    rewriter = Rewriter(create_rewrite_provider(config), config.llm_options())

    try:
        with console.status("[bold blue]✍️ 正在改写...[/bold blue]"):
            result = asyncio.run(rewriter.rewrite(text, rewrite_type, custom_prompt))
    except RewriteError as e:
        console.print(f"[red]✗ 改写失败（{e.status}）: {e.message}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(result, title=f"改写结果 · {rewrite_type.value}", border_style="green"))


@app.callback()
def main() -> None:
    """
    NexusWrite - AI 辅助写作工作台

    从一句写作需求出发，经过大纲确认或智能体配置，流式生成完整文档
    """


if __name__ == "__main__":
    app()
