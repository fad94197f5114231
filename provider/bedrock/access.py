# -*- coding: utf-8 -*-
"""
模型访问状态解析模块

功能：
- live: 查询账号的模型访问权限（/model-access）
- heuristic: 查询失败时按受限模型族推测
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from api.aws.signed_http import SignedHttpClient
from provider.bedrock.gating import GatedFamilyMatcher
from provider.bedrock.models import AccessState, AccessStatus
from provider.bedrock.tiers import TierOutcome, attempt_tiers

logger = logging.getLogger(__name__)

MODEL_ACCESS_PATH = '/model-access'


def parse_model_access(data: Dict[str, Any]) -> Tuple[Set[str], Dict[str, AccessState]]:
    """
    解析 /model-access 响应

    支持两种格式：
    - {"granted": ["model-id", ...]}
    - {"modelAccessSummaries": [{"modelId": ..., "accessStatus": "GRANTED|PENDING|DENIED"}]}
      （没有 accessStatus 时视为已授权）

    Returns:
        (已授权的模型 ID 集合, 其他状态映射)
    """
    granted = set(data.get('granted') or [])
    other_states: Dict[str, AccessState] = {}

    for summary in data.get('modelAccessSummaries') or []:
        model_id = summary.get('modelId')
        if not model_id:
            continue

        status = (summary.get('accessStatus') or summary.get('status') or AccessState.GRANTED.value).upper()
        if status == AccessState.GRANTED.value:
            granted.add(model_id)
        elif status in (AccessState.PENDING.value, AccessState.DENIED.value):
            other_states[model_id] = AccessState(status)
        else:
            logger.debug(f"[Access Check] 未知的访问状态 {status}: {model_id}")

    return granted, other_states


class AccessStatusResolver:
    """
    模型访问状态解析器
    """

    def __init__(self,
                 matcher: Optional[GatedFamilyMatcher] = None,
                 http_client_factory: Callable[..., SignedHttpClient] = SignedHttpClient,
                 timeout: float = 10.0):
        """
        Args:
            matcher: 受限模型族匹配器（heuristic tier 使用）
            http_client_factory: 签名客户端工厂 factory(region, credentials, timeout=...)，
                                 返回的客户端需要提供 get_json() 和 close()
            timeout: 请求超时（秒）
        """
        self.matcher = matcher or GatedFamilyMatcher()
        self.http_client_factory = http_client_factory
        self.timeout = timeout

    def _live(self, credentials, region: str, model_ids: Sequence[str]) -> List[AccessStatus]:
        client = self.http_client_factory(region, credentials, timeout=self.timeout)
        try:
            data = client.get_json(MODEL_ACCESS_PATH)
        finally:
            client.close()
        granted, other_states = parse_model_access(data or {})

        statuses = []
        for model_id in model_ids:
            if model_id in granted:
                state = AccessState.GRANTED
            else:
                state = other_states.get(model_id, AccessState.NOT_REQUESTED)
            statuses.append(AccessStatus(
                model_id=model_id,
                has_access=state == AccessState.GRANTED,
                access_status=state,
                can_request_access=True,
            ))
        return statuses

    def heuristic_statuses(self, model_ids: Sequence[str]) -> List[AccessStatus]:
        """
        按受限模型族推测访问状态：受限模型视为无权限，其他视为已授权
        """
        statuses = []
        for model_id in model_ids:
            gated = self.matcher.requires_access(model_id)
            statuses.append(AccessStatus(
                model_id=model_id,
                has_access=not gated,
                access_status=AccessState.NOT_REQUESTED if gated else AccessState.GRANTED,
                can_request_access=True,
            ))
        return statuses

    def check_with_source(self,
                          credentials: Optional[Dict[str, str]],
                          region: str,
                          model_ids: Sequence[str]) -> TierOutcome:
        """
        解析访问状态并返回来源

        Returns:
            TierOutcome(source, statuses)，source 为 live / heuristic
        """
        model_ids = list(model_ids)
        outcome = attempt_tiers([
            ('live', lambda: self._live(credentials, region, model_ids)),
            ('heuristic', lambda: self.heuristic_statuses(model_ids)),
        ], label='Access Check')

        granted = sum(1 for status in outcome.value if status.has_access)
        logger.info(f"[Access Check] 区域 {region}: {granted}/{len(model_ids)} 个模型有访问权限（来源: {outcome.source}）")
        return outcome

    def check_model_access_status(self,
                                  credentials: Optional[Dict[str, str]],
                                  region: str,
                                  model_ids: Sequence[str]) -> List[AccessStatus]:
        """每个模型返回一个 AccessStatus（不会失败）"""
        return self.check_with_source(credentials, region, model_ids).value
