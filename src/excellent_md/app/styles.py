"""
Gradio UI 自定义 CSS 样式
"""

CUSTOM_CSS = """
/* 整体容器 */
.gradio-container {
    max-width: 1400px !important;
    margin: auto !important;
    padding: 40px 60px !important;
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif !important;
}

/* 标题样式 */
.main-title {
    text-align: center;
    color: #1a1a1a;
    font-size: 2.2rem !important;
    font-weight: 600;
    margin-bottom: 8px;
}

.sub-title {
    text-align: center;
    color: #666;
    font-size: 1.1rem !important;
    margin-bottom: 40px;
}

/* 限制说明 */
.limits {
    color: #6b7280;
    font-size: 0.9rem !important;
    margin: 12px 0 !important;
}

/* 主按钮样式 */
.primary-btn {
    background: #2563eb !important;
    border: none !important;
    font-size: 1.1rem !important;
    font-weight: 500 !important;
    padding: 16px 32px !important;
    border-radius: 10px !important;
    margin: 16px 0 !important;
}

.primary-btn:hover {
    background: #1d4ed8 !important;
}

/* 状态输出框 */
.status-box textarea {
    font-family: "SF Mono", Monaco, "Cascadia Code", Consolas, monospace !important;
    font-size: 0.95rem !important;
    line-height: 1.8 !important;
    background: #f8f9fa !important;
    padding: 16px !important;
    min-height: 200px !important;
}

/* 文件上传区域 */
.file-upload {
    min-height: 160px !important;
}

/* 文件下载区域 */
.file-download {
    min-height: 80px !important;
    margin-top: 16px !important;
}

/* Markdown 预览 */
.md-preview table {
    border-collapse: collapse;
    width: 100%;
    margin: 20px 0;
}

.md-preview th, .md-preview td {
    border: 1px solid #ddd;
    padding: 8px 12px;
    text-align: left;
}

.md-preview th {
    background: #f5f5f5;
    font-weight: 600;
}

.md-preview blockquote {
    color: #92400e;
    background: #fffbeb;
    border-left: 4px solid #f59e0b;
    padding: 4px 12px;
}

/* Accordion 样式 */
.accordion {
    margin-top: 32px !important;
}

.accordion .prose {
    font-size: 0.95rem !important;
    line-height: 1.8 !important;
    padding: 20px !important;
}

/* 隐藏 Gradio 的预估时间显示 */
.eta-bar {
    display: none !important;
}
"""
