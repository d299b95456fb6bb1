"""
Gradio UI 组件定义
"""

import gradio as gr

from excellent_md.core.config import get_settings

from .handlers import get_stats, process_excel
from .styles import CUSTOM_CSS


def create_ui():
    """创建 Gradio 界面"""
    settings = get_settings()

    with gr.Blocks(css=CUSTOM_CSS) as app:
        gr.HTML('<h1 class="main-title">Excel 转 Markdown 表格</h1>')
        gr.HTML('<p class="sub-title">上传 .xlsx 工作簿，每个 sheet 转换为一个 Markdown 表格</p>')

        with gr.Row(equal_height=False):
            # 左侧：输入区
            with gr.Column(scale=1):
                excel_input = gr.File(
                    label="上传 Excel 文件",
                    file_types=[".xlsx"],
                    type="filepath",
                    elem_classes=["file-upload"],
                )

                gr.HTML(
                    '<p class="limits">'
                    f"最大 {settings.max_upload_mb} MB | "
                    f"最多 {settings.max_sheets or '不限'} 个 sheet | "
                    f"每个 sheet 最多 {settings.max_cells_per_sheet or '不限'} 个单元格 | "
                    f"超时 {settings.conversion_timeout_seconds:g} 秒"
                    "</p>"
                )

                process_btn = gr.Button(
                    "开始转换",
                    variant="primary",
                    elem_classes=["primary-btn"],
                    size="lg",
                )

                status_output = gr.Textbox(
                    label="处理状态",
                    lines=10,
                    interactive=False,
                    elem_classes=["status-box"],
                    placeholder="处理结果将显示在这里...",
                )

                md_file_output = gr.File(
                    label="下载 Markdown",
                    elem_classes=["file-download"],
                )

            # 右侧：输出区
            with gr.Column(scale=2):
                with gr.Tab("预览"):
                    preview_output = gr.Markdown(elem_classes=["md-preview"])
                with gr.Tab("Markdown"):
                    raw_output = gr.Code(language="markdown", interactive=False)
                with gr.Tab("JSON"):
                    json_output = gr.Code(language="json", interactive=False)

        process_btn.click(
            fn=process_excel,
            inputs=[excel_input],
            outputs=[preview_output, raw_output, json_output, md_file_output, status_output],
            show_progress="minimal",
        )

        if settings.enable_metrics:
            with gr.Accordion("统计", open=False, elem_classes=["accordion"]):
                stats_output = gr.JSON()
                refresh_btn = gr.Button("刷新", size="sm")
                refresh_btn.click(fn=get_stats, inputs=[], outputs=[stats_output])

        with gr.Accordion("使用说明", open=False, elem_classes=["accordion"]):
            gr.Markdown("""
**转换规则**

- 每个 sheet 输出一个二级标题和一个 Markdown 表格，第一行作为表头
- 行尾空单元格和表尾空行会被去掉，其余行补齐到相同列数
- 单元格中的换行转换为 `<br>`，竖线转义为 `\\|`

**提示信息**

- **合并单元格**：只保留左上角的值，其余位置为空
- **公式**：不计算公式，使用文件中保存的值
- **隐藏 sheet**：默认跳过

**错误处理**

- 单个 sheet 失败（如单元格过多）只影响该 sheet，其他 sheet 照常输出
- 文件无法解析、sheet 数量过多或超时会导致整个转换失败
""")

    return app
