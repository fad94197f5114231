# -*- coding: utf-8 -*-
"""
模型发现数据结构

功能：
- ResourceDescriptor: 模型目录条目
- AccessStatus: 单个模型的访问权限快照
- CommandGroup: 按 provider 命名空间分组的访问申请命令
- DiscoveryResult: 一次发现的不可变结果
"""

import shlex
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class LifecycleState(Enum):
    """模型生命周期状态"""
    ACTIVE = "ACTIVE"
    PREVIEW = "PREVIEW"
    DEPRECATED = "DEPRECATED"


class AccessState(Enum):
    """模型访问状态"""
    GRANTED = "GRANTED"              # 已授权
    PENDING = "PENDING"              # 申请中
    DENIED = "DENIED"                # 被拒绝
    NOT_REQUESTED = "NOT_REQUESTED"  # 未申请


@dataclass(frozen=True)
class ResourceDescriptor:
    """模型目录条目（model_id 是跨数据源唯一可靠的关联键）"""
    model_id: str                                   # 如 "anthropic.claude-sonnet-4-5-20250929-v1:0"
    model_name: str                                 # 显示名称
    provider: str                                   # 提供商名称，如 "Anthropic"
    regions: Tuple[str, ...] = ()                   # 提供该模型的区域（可能为空）
    input_modalities: Tuple[str, ...] = ()
    output_modalities: Tuple[str, ...] = ()
    streaming_supported: bool = False
    requires_access: bool = False                   # 由 model_id / provider 推导，见 gating.py
    status: LifecycleState = LifecycleState.ACTIVE
    release_date: Optional[date] = None             # 由 model_id 中的 8 位日期推导

    def to_dict(self) -> Dict[str, Any]:
        return {
            'modelId': self.model_id,
            'modelName': self.model_name,
            'provider': self.provider,
            'regions': list(self.regions),
            'inputModalities': list(self.input_modalities),
            'outputModalities': list(self.output_modalities),
            'streamingSupported': self.streaming_supported,
            'requiresAccess': self.requires_access,
            'status': self.status.value,
            'releaseDate': self.release_date.isoformat() if self.release_date else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResourceDescriptor':
        """从 to_dict() 的输出还原（用于文件缓存）"""
        release_date = data.get('releaseDate')
        return cls(
            model_id=data['modelId'],
            model_name=data.get('modelName', ''),
            provider=data.get('provider', ''),
            regions=tuple(data.get('regions') or ()),
            input_modalities=tuple(data.get('inputModalities') or ()),
            output_modalities=tuple(data.get('outputModalities') or ()),
            streaming_supported=bool(data.get('streamingSupported', False)),
            requires_access=bool(data.get('requiresAccess', False)),
            status=LifecycleState(data.get('status', LifecycleState.ACTIVE.value)),
            release_date=date.fromisoformat(release_date) if release_date else None,
        )


@dataclass(frozen=True)
class AccessStatus:
    """单个模型的访问权限快照"""
    model_id: str
    has_access: bool
    access_status: AccessState
    can_request_access: bool

    def __post_init__(self):
        if self.has_access and self.access_status != AccessState.GRANTED:
            raise ValueError(f"has_access=True 时 access_status 必须是 GRANTED: {self.model_id}")

    def is_gap(self) -> bool:
        """是否为缺口（当前无权限但可以申请）"""
        return not self.has_access and self.can_request_access

    def to_dict(self) -> Dict[str, Any]:
        return {
            'modelId': self.model_id,
            'hasAccess': self.has_access,
            'accessStatus': self.access_status.value,
            'canRequestAccess': self.can_request_access,
        }


@dataclass(frozen=True)
class CommandGroup:
    """一个 provider 命名空间的访问申请命令"""
    namespace: str
    model_ids: Tuple[str, ...]
    region: str
    justification: str

    def render(self) -> str:
        """生成可直接执行的 AWS CLI 命令文本（参数经过 shell 转义）"""
        model_list = ' '.join(shlex.quote(model_id) for model_id in self.model_ids)
        lines = [
            f"# Request access for {self.namespace} models",
            "aws bedrock put-model-access-request \\",
            f"  --region {shlex.quote(self.region)} \\",
            f"  --model-ids {model_list} \\",
            f"  --access-request-reason {shlex.quote(self.justification)}",
        ]
        return '\n'.join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'namespace': self.namespace,
            'modelIds': list(self.model_ids),
            'region': self.region,
            'command': self.render(),
        }


@dataclass(frozen=True)
class DiscoveryResult:
    """一次模型发现的不可变结果"""
    available_models: Tuple[str, ...] = ()
    catalog_models: Tuple[ResourceDescriptor, ...] = ()
    access_statuses: Tuple[AccessStatus, ...] = ()
    request_commands: Tuple[CommandGroup, ...] = ()
    catalog_source: str = 'none'     # document / cache / static / none
    access_source: str = 'none'      # live / heuristic / none
    region: Optional[str] = None
    generated_at: float = field(default=0.0, compare=False)

    @property
    def models_needing_access(self) -> List[str]:
        return [status.model_id for status in self.access_statuses if status.is_gap()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'region': self.region,
            'generatedAt': self.generated_at,
            'availableModels': list(self.available_models),
            'catalogModels': [model.to_dict() for model in self.catalog_models],
            'accessStatuses': [status.to_dict() for status in self.access_statuses],
            'requestCommands': [group.to_dict() for group in self.request_commands],
            'modelsNeedingAccess': self.models_needing_access,
            'catalogSource': self.catalog_source,
            'accessSource': self.access_source,
        }
