# -*- coding: utf-8 -*-
"""
访问申请文件生成接口

具体的脚本 / 说明文档内容由下游实现决定，这里只定义输入
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Sequence


@dataclass(frozen=True)
class ProvisioningOptions:
    """生成申请文件的选项"""
    region: str
    reason: str


class ProvisioningArtifactGenerator(ABC):
    """
    访问申请文件生成器接口

    实现方根据缺口模型列表生成一个或多个命名文本文件
    （各平台的申请脚本、dry-run 版本、操作说明等）
    """

    @abstractmethod
    def create_files(self, model_ids: Sequence[str], options: ProvisioningOptions) -> Dict[str, str]:
        """
        Args:
            model_ids: 需要申请访问权限的模型 ID
            options: 区域和申请理由

        Returns:
            {文件名: 文件内容}
        """
        pass
