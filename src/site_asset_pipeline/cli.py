"""命令行入口。

每个阶段各有一个独立命令（distribute-assets、optimize-images、update-templates、
audit-assets），asset-pipeline 以子命令的形式汇总全部功能。

单个素材失败不影响退出码；只有未处理的异常才返回 1。
"""

import argparse
from collections.abc import Callable, Sequence
from pathlib import Path

from . import __version__
from .engine.pipeline import AssetPipeline
from .utils.logging_helpers import configure_logging, get_logger


logger = get_logger()

PROG_NAME = "asset-pipeline"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="项目根目录（默认当前目录）",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="输出 DEBUG 级别日志",
    )


def _add_distribute_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--industry",
        "-i",
        default=None,
        help="只分发指定行业的素材",
    )
    parser.add_argument(
        "--rename-icons",
        action="store_true",
        help="分发前把投放区图标目录中的文件重命名为 <industry>-icon-<name>",
    )


# ============================================================================
# 阶段执行
# ============================================================================


def _run_all(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    summary = pipeline.run(getattr(args, "industry", None))
    for line in summary.get_summary_lines():
        print(line)


def _run_distribute(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    report = pipeline.distribute(args.industry, args.rename_icons)
    print(report.get_summary())


def _run_optimize(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    print(pipeline.standardize().get_summary())


def _run_update_templates(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    print(pipeline.publish().get_summary())


def _run_manifest(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    manifests = pipeline.generate_manifests()
    print(f"[manifest] 生成 {len(manifests)} 个清单")


def _run_audit(pipeline: AssetPipeline, args: argparse.Namespace) -> None:
    for path in pipeline.audit():
        print(f"[audit] 已写入 {path}")


StageRunner = Callable[[AssetPipeline, argparse.Namespace], None]


def _execute(runner: StageRunner, args: argparse.Namespace) -> int:
    """配置日志并执行一个阶段，把未处理的异常转换为退出码 1"""
    configure_logging(verbose=args.verbose)
    try:
        runner(AssetPipeline(args.root), args)
    except Exception:
        logger.exception("素材流水线异常终止")
        return 1
    return 0


# ============================================================================
# 独立命令
# ============================================================================


def _single_stage_main(
    prog: str,
    description: str,
    runner: StageRunner,
    argv: Sequence[str] | None,
    with_distribute_args: bool = False,
) -> int:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    _add_common_arguments(parser)
    if with_distribute_args:
        _add_distribute_arguments(parser)
    return _execute(runner, parser.parse_args(argv))


def distribute_main(argv: Sequence[str] | None = None) -> int:
    return _single_stage_main(
        "distribute-assets",
        "把投放区中的原始图片分发到各行业素材目录",
        _run_distribute,
        argv,
        with_distribute_args=True,
    )


def optimize_main(argv: Sequence[str] | None = None) -> int:
    return _single_stage_main(
        "optimize-images", "为行业素材生成按类别标准化的变体", _run_optimize, argv
    )


def update_templates_main(argv: Sequence[str] | None = None) -> int:
    return _single_stage_main(
        "update-templates",
        "把模板中的原图引用替换为标准化变体",
        _run_update_templates,
        argv,
    )


def audit_main(argv: Sequence[str] | None = None) -> int:
    return _single_stage_main(
        "audit-assets", "清点模板引用的素材并生成报告", _run_audit, argv
    )


# ============================================================================
# asset-pipeline 子命令
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="多行业站点模板的离线图片素材流水线",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="按顺序运行全部阶段")
    _add_common_arguments(run_parser)
    run_parser.add_argument("--industry", "-i", default=None, help="只分发指定行业")
    run_parser.set_defaults(runner=_run_all)

    distribute_parser = subparsers.add_parser("distribute", help="分发投放区素材")
    _add_common_arguments(distribute_parser)
    _add_distribute_arguments(distribute_parser)
    distribute_parser.set_defaults(runner=_run_distribute)

    for name, runner, help_text in (
        ("optimize", _run_optimize, "生成类别变体"),
        ("update-templates", _run_update_templates, "改写模板引用"),
        ("manifest", _run_manifest, "生成行业素材清单"),
        ("audit", _run_audit, "生成素材审计报告"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_common_arguments(sub)
        sub.set_defaults(runner=runner)

    serve_parser = subparsers.add_parser("serve", help="启动 MCP 服务器（stdio）")
    serve_parser.set_defaults(runner=None)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.runner is None:
        from .mcp_server import main as server_main

        server_main()
        return 0

    return _execute(args.runner, args)


if __name__ == "__main__":
    raise SystemExit(main())
