"""素材流水线 MCP 服务器。

通过 stdio 暴露两个工具：运行流水线（或单个阶段）、分析单张图片。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .core.classifier import ContentClassifier
from .engine.pipeline import AssetPipeline
from .exceptions import PipelineError
from .models.results import RewriteReport, StageReport
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPPipelineResponse = dict[str, Any]
MCPAnalysisResponse = dict[str, Any]

PIPELINE_STAGES = (
    "run",
    "distribute",
    "optimize",
    "update-templates",
    "manifest",
    "audit",
)


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result: dict[str, Any] = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }
        if details:
            result["details"] = details
        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(message, "validation", details)

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(message, "file", details)

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(message, "processing", details)


logger = get_logger()

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("站点素材流水线服务")

# 全局分类器实例
classifier = ContentClassifier()


# ============================================================================
# 流水线工具
# ============================================================================


def _format_stage(report: StageReport) -> dict[str, Any]:
    return {
        "stage": report.stage,
        "summary": report.get_summary(),
        "drop_zone_created": report.drop_zone_created,
        "optimized": report.optimized_count,
        "already_optimized": report.already_optimized_count,
        "failed": report.failed_count,
        "success_rate": report.get_success_rate(),
        "skipped": [record.describe() for record in report.skipped],
        "results": [
            {
                "source_path": str(r.source_path),
                "output_path": str(r.output_path),
                "status": r.status.value,
                "format_used": r.format_used,
                "size_saved": r.get_size_saved(),
                "error": r.error,
            }
            for r in report.results
        ],
    }


def _format_rewrite(report: RewriteReport) -> dict[str, Any]:
    return {
        "summary": report.get_summary(),
        "total_replacements": report.get_total_replacements(),
        "written_files": [str(p) for p in report.get_written_files()],
    }


@mcp.tool()
def run_asset_pipeline(
    root: str,
    stage: str = "run",
    industry: str | None = None,
) -> MCPPipelineResponse:
    """运行素材流水线或其中一个阶段

    Args:
        root: 项目根目录（包含各行业目录和投放区）
        stage: run / distribute / optimize / update-templates / manifest / audit
        industry: 分发时只处理的行业（可选）

    Returns:
        dict: 各阶段的结果汇总
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return MCPResponseBuilder.file_error(
            MessageFormatter.directory_not_found(root), root
        )
    if stage not in PIPELINE_STAGES:
        return MCPResponseBuilder.validation_error(
            MessageFormatter.validation_error(
                "stage", stage, "/".join(PIPELINE_STAGES)
            ),
            "stage",
        )

    try:
        pipeline = AssetPipeline(root_path)
        match stage:
            case "distribute":
                return {
                    "success": True,
                    "distribution": _format_stage(pipeline.distribute(industry)),
                }
            case "optimize":
                return {
                    "success": True,
                    "standardization": _format_stage(pipeline.standardize()),
                }
            case "update-templates":
                return {"success": True, "rewrite": _format_rewrite(pipeline.publish())}
            case "manifest":
                return {
                    "success": True,
                    "manifests": [str(p) for p in pipeline.generate_manifests()],
                }
            case "audit":
                return {"success": True, "reports": [str(p) for p in pipeline.audit()]}
            case _:
                summary = pipeline.run(industry)
                return {
                    "success": True,
                    "summary": summary.get_summary_lines(),
                    "failed": summary.get_failed_count(),
                    "distribution": _format_stage(summary.distribution)
                    if summary.distribution
                    else None,
                    "standardization": _format_stage(summary.standardization)
                    if summary.standardization
                    else None,
                    "rewrite": _format_rewrite(summary.rewrite)
                    if summary.rewrite
                    else None,
                    "manifests": [str(p) for p in summary.manifests],
                    "reports": [str(p) for p in summary.reports],
                }
    except (PipelineError, OSError) as e:
        logger.error(MessageFormatter.operation_failed("素材流水线", root, e))
        return MCPResponseBuilder.processing_error(
            MessageFormatter.operation_failed("素材流水线", root, e), stage
        )


# ============================================================================
# 图片分析工具
# ============================================================================


@mcp.tool()
def analyze_image(input_path: str, industry: str | None = None) -> MCPAnalysisResponse:
    """分析单张图片的语义类别、内容类型和推荐格式

    Args:
        input_path: 图片路径
        industry: 所属行业，用于 hero 白名单匹配（可选）

    Returns:
        dict: 分类结果和图像度量
    """
    path = Path(input_path)
    if not path.is_file():
        return MCPResponseBuilder.file_error(
            MessageFormatter.file_not_found(input_path), input_path
        )

    result = classifier.classify(path, industry)

    response: dict[str, Any] = {
        "success": True,
        "file_path": str(path),
        "category": result.category.category.value,
        "category_confidence": result.category.confidence,
        "category_rule": result.category.rule.value,
        "content_type": result.content_type.value,
        "content_score": result.content.score,
        "content_confidence": result.content.confidence,
        "reasons": list(result.content.reasons),
        "formats": list(result.recommendations.formats),
        "primary_format": result.recommendations.primary_format,
        "recommendation_reason": result.recommendations.reason,
    }
    if result.error:
        # 解码失败时仍附带兜底分类结果
        response.update(MCPResponseBuilder.processing_error(result.error, "图片分析"))
    elif metrics := result.metrics:
        response["metrics"] = metrics.model_dump()
    return response


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动素材流水线 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
