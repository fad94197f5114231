# -*- coding: utf-8 -*-
"""
访问缺口分析与申请命令生成模块
"""

from collections import OrderedDict
from typing import Iterable, List, Sequence

from provider.bedrock.models import AccessStatus, CommandGroup

DEFAULT_REGION = 'us-west-2'
DEFAULT_ACCESS_REQUEST_REASON = 'Automated access request for Bedrock model discovery'


def provider_namespace(model_id: str) -> str:
    """模型 ID 第一个 '.' 之前的部分，如 "anthropic"、"us" """
    return model_id.split('.', 1)[0]


def find_gaps(statuses: Iterable[AccessStatus]) -> List[str]:
    """当前无权限但可以申请的模型 ID（保持原顺序）"""
    return [status.model_id for status in statuses if status.is_gap()]


def build_command_groups(model_ids: Sequence[str],
                         region: str = DEFAULT_REGION,
                         justification: str = DEFAULT_ACCESS_REQUEST_REASON) -> List[CommandGroup]:
    """
    按 provider 命名空间分组生成申请命令

    分组顺序为命名空间第一次出现的顺序，组内保持模型的相对顺序
    """
    groups = OrderedDict()
    for model_id in model_ids:
        groups.setdefault(provider_namespace(model_id), []).append(model_id)

    return [
        CommandGroup(namespace=namespace, model_ids=tuple(ids), region=region, justification=justification)
        for namespace, ids in groups.items()
    ]


def synthesize_commands(statuses: Iterable[AccessStatus],
                        region: str = DEFAULT_REGION,
                        justification: str = DEFAULT_ACCESS_REQUEST_REASON) -> List[CommandGroup]:
    """
    为所有缺口生成申请命令

    没有缺口时返回空列表
    """
    return build_command_groups(find_gaps(statuses), region, justification)
