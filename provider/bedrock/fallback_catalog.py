# -*- coding: utf-8 -*-
"""
静态兜底模型目录

文档获取和缓存都不可用时使用，修改内容时同步更新 CATALOG_VERSION
"""

from typing import List

from provider.bedrock.models import LifecycleState, ResourceDescriptor

CATALOG_VERSION = '2025-10-01'

_US_EU_REGIONS = ('us-east-1', 'us-east-2', 'us-west-1', 'us-west-2', 'eu-west-1', 'eu-central-1')
_TEXT_IMAGE = ('Text', 'Image')
_TEXT_CHAT = ('Text', 'Chat')

_FALLBACK_MODELS = (
    # Claude 4.5
    ResourceDescriptor(
        model_id='anthropic.claude-sonnet-4-5-20250929-v1:0',
        model_name='Claude Sonnet 4.5',
        provider='Anthropic',
        regions=_US_EU_REGIONS,
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
    ResourceDescriptor(
        model_id='anthropic.claude-haiku-4-5-20251001-v1:0',
        model_name='Claude Haiku 4.5',
        provider='Anthropic',
        regions=_US_EU_REGIONS,
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
    # Claude 4
    ResourceDescriptor(
        model_id='anthropic.claude-sonnet-4-20250514-v1:0',
        model_name='Claude Sonnet 4',
        provider='Anthropic',
        regions=('us-east-1', 'us-east-2', 'us-west-1', 'us-west-2', 'eu-west-1'),
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
    ResourceDescriptor(
        model_id='anthropic.claude-opus-4-20250514-v1:0',
        model_name='Claude Opus 4',
        provider='Anthropic',
        regions=('us-east-1', 'us-east-2', 'us-west-2'),
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
    # 跨区域推理 profile
    ResourceDescriptor(
        model_id='us.anthropic.claude-sonnet-4-5-20250929-v1:0',
        model_name='Claude Sonnet 4.5 (US Cross-Region)',
        provider='Anthropic',
        regions=('us-west-2',),
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
    ResourceDescriptor(
        model_id='eu.anthropic.claude-sonnet-4-5-20250929-v1:0',
        model_name='Claude Sonnet 4.5 (EU Cross-Region)',
        provider='Anthropic',
        regions=('eu-west-1',),
        input_modalities=_TEXT_IMAGE,
        output_modalities=_TEXT_CHAT,
        streaming_supported=True,
        requires_access=True,
        status=LifecycleState.ACTIVE,
    ),
)

# 发现流程整体失败时返回给调用方的模型 ID 列表
STATIC_MODEL_IDS = (
    # Claude 4.5
    'anthropic.claude-sonnet-4-5-20250929-v1:0',
    'anthropic.claude-haiku-4-5-20251001-v1:0',
    # Claude 4
    'anthropic.claude-sonnet-4-20250514-v1:0',
    'anthropic.claude-opus-4-20250514-v1:0',
    'anthropic.claude-opus-4-1-20250805-v1:0',
    # Claude 3.7
    'anthropic.claude-3-7-sonnet-20250219-v1:0',
    # 4.5 跨区域推理 profile
    'us.anthropic.claude-sonnet-4-5-20250929-v1:0',
    'us.anthropic.claude-haiku-4-5-20251001-v1:0',
    'eu.anthropic.claude-sonnet-4-5-20250929-v1:0',
    'eu.anthropic.claude-haiku-4-5-20251001-v1:0',
    'global.anthropic.claude-sonnet-4-5-20250929-v1:0',
    # Claude 3.5 / 3
    'anthropic.claude-3-5-sonnet-20241022-v2:0',
    'anthropic.claude-3-5-haiku-20241022-v1:0',
    'anthropic.claude-3-opus-20240229-v1:0',
    'anthropic.claude-3-sonnet-20240229-v1:0',
    'anthropic.claude-3-haiku-20240307-v1:0',
)


def get_fallback_catalog() -> List[ResourceDescriptor]:
    """返回静态兜底目录（每次返回新列表，不会失败）"""
    return list(_FALLBACK_MODELS)
