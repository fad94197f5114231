# -*- coding: utf-8 -*-
"""
模型目录文档解析模块

功能：
- 从 AWS Bedrock 文档页面（HTML）中找到模型表格
- 将表格每一行解析为 ResourceDescriptor
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from provider.bedrock.errors import ParseFailure
from provider.bedrock.models import LifecycleState, ResourceDescriptor

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = ('model id', 'provider')
MIN_COLUMNS = 6


def _cell_text(cell) -> str:
    return cell.get_text(' ', strip=True) if cell is not None else ''


def _split_list(text: str, separator: Optional[str] = None) -> List[str]:
    """按分隔符拆分并去掉空白项（separator=None 表示按空白拆分）"""
    return [item.strip() for item in text.split(separator) if item.strip()]


def find_model_table(soup: BeautifulSoup):
    """
    查找第一个表头同时包含 "model id" 和 "provider" 列的表格

    表头匹配不区分大小写，与列顺序无关
    """
    for table in soup.find_all('table'):
        headers = [_cell_text(th).lower() for th in table.find_all('th')]
        if all(required in headers for required in REQUIRED_HEADERS):
            return table
    return None


def parse_model_catalog(html: str) -> List[ResourceDescriptor]:
    """
    解析文档页面中的模型表格

    列顺序：provider, model name, model id, regions, input, output, streaming

    Args:
        html: 文档页面 HTML

    Returns:
        ResourceDescriptor 列表（requires_access / release_date 由 enrich_catalog 统一计算）

    Raises:
        ParseFailure: 找不到模型表格或 HTML 无法解析
    """
    try:
        soup = BeautifulSoup(html, 'lxml')
    except Exception as e:
        raise ParseFailure(f"HTML 解析失败: {e}") from e

    table = find_model_table(soup)
    if table is None:
        raise ParseFailure("文档中没有找到模型表格（需要 'Model ID' 和 'Provider' 列）")

    models: List[ResourceDescriptor] = []
    seen = set()

    for row in table.find_all('tr'):
        cells = row.find_all('td')
        # 表头行没有 td，列数不足的行也跳过
        if len(cells) < MIN_COLUMNS:
            continue

        provider = _cell_text(cells[0])
        model_name = _cell_text(cells[1])
        model_id = _cell_text(cells[2])

        if not model_id or not provider:
            continue

        if model_id in seen:
            logger.debug(f"[Catalog Parser] 跳过重复的模型: {model_id}")
            continue
        seen.add(model_id)

        regions = [region for region in _split_list(_cell_text(cells[3])) if region != '*']
        streaming_cell = _cell_text(cells[6]) if len(cells) > 6 else ''

        models.append(ResourceDescriptor(
            model_id=model_id,
            model_name=model_name,
            provider=provider,
            regions=tuple(regions),
            input_modalities=tuple(_split_list(_cell_text(cells[4]), ',')),
            output_modalities=tuple(_split_list(_cell_text(cells[5]), ',')),
            streaming_supported='yes' in streaming_cell.lower(),
            status=LifecycleState.ACTIVE,
        ))

    logger.debug(f"[Catalog Parser] 从文档表格解析到 {len(models)} 个模型")
    return models
