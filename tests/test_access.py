"""
tests/test_access.py - 模型访问状态解析测试
"""

import pytest

from provider.bedrock.access import MODEL_ACCESS_PATH, AccessStatusResolver, parse_model_access
from provider.bedrock.errors import TransportFailure
from provider.bedrock.models import AccessState, AccessStatus

SONNET_35 = 'anthropic.claude-3-5-sonnet-20241022-v2:0'
SONNET_45 = 'anthropic.claude-sonnet-4-5-20250929-v1:0'
OPUS_4 = 'anthropic.claude-opus-4-20250514-v1:0'


class TestParseModelAccess:
    """parse_model_access 测试"""

    def test_granted_list(self):
        granted, others = parse_model_access({'granted': [SONNET_35]})
        assert granted == {SONNET_35}
        assert others == {}

    def test_summaries(self):
        granted, others = parse_model_access({'modelAccessSummaries': [
            {'modelId': SONNET_35},
            {'modelId': SONNET_45, 'accessStatus': 'pending'},
            {'modelId': OPUS_4, 'accessStatus': 'DENIED'},
            {'accessStatus': 'GRANTED'},
        ]})
        assert granted == {SONNET_35}
        assert others == {SONNET_45: AccessState.PENDING, OPUS_4: AccessState.DENIED}

    def test_empty_payload(self):
        assert parse_model_access({}) == (set(), {})


class TestLiveTier:
    """live tier 测试"""

    def test_granted_and_not_requested(self, fake_signed_factory):
        factory = fake_signed_factory({'granted': [SONNET_35]})
        resolver = AccessStatusResolver(http_client_factory=factory, timeout=4)

        source, statuses = resolver.check_with_source(None, 'us-west-2', [SONNET_35, SONNET_45])

        assert source == 'live'
        assert statuses == [
            AccessStatus(SONNET_35, True, AccessState.GRANTED, True),
            AccessStatus(SONNET_45, False, AccessState.NOT_REQUESTED, True),
        ]
        factory.assert_called_once_with('us-west-2', None, timeout=4)
        factory.return_value.get_json.assert_called_once_with(MODEL_ACCESS_PATH)

    def test_pending_and_denied(self, fake_signed_factory):
        factory = fake_signed_factory({'modelAccessSummaries': [
            {'modelId': SONNET_45, 'accessStatus': 'PENDING'},
            {'modelId': OPUS_4, 'accessStatus': 'DENIED'},
        ]})
        statuses = AccessStatusResolver(http_client_factory=factory).check_model_access_status(
            None, 'us-west-2', [SONNET_45, OPUS_4])

        assert [status.access_status for status in statuses] == [AccessState.PENDING, AccessState.DENIED]
        assert all(status.has_access is False for status in statuses)

    def test_live_ignores_gated_patterns(self, fake_signed_factory):
        """live 数据可用时不使用启发式规则"""
        factory = fake_signed_factory({'granted': [OPUS_4]})
        statuses = AccessStatusResolver(http_client_factory=factory).check_model_access_status(
            None, 'us-west-2', [OPUS_4, SONNET_35])

        assert statuses[0].has_access is True
        assert statuses[1].has_access is False

    def test_client_closed_after_query(self, fake_signed_factory):
        factory = fake_signed_factory({'granted': [SONNET_35]})
        AccessStatusResolver(http_client_factory=factory).check_model_access_status(None, 'us-west-2', [SONNET_35])
        factory.return_value.close.assert_called_once_with()

    def test_client_closed_when_query_fails(self, fake_signed_factory, transport_failure):
        factory = fake_signed_factory(transport_failure)
        AccessStatusResolver(http_client_factory=factory).check_model_access_status(None, 'us-west-2', [SONNET_35])
        factory.return_value.close.assert_called_once_with()

    def test_one_status_per_requested_id(self, fake_signed_factory):
        factory = fake_signed_factory({'granted': [SONNET_35, 'amazon.nova-lite-v1:0']})
        statuses = AccessStatusResolver(http_client_factory=factory).check_model_access_status(
            None, 'us-west-2', [SONNET_45])
        assert [status.model_id for status in statuses] == [SONNET_45]


class TestHeuristicTier:
    """heuristic tier 测试"""

    def test_transport_failure_falls_back(self, fake_signed_factory, transport_failure):
        resolver = AccessStatusResolver(http_client_factory=fake_signed_factory(transport_failure))

        source, statuses = resolver.check_with_source(None, 'us-west-2', [OPUS_4])

        assert source == 'heuristic'
        assert statuses[0].has_access is False
        assert statuses[0].can_request_access is True
        assert statuses[0].access_status == AccessState.NOT_REQUESTED

    def test_ungated_model_assumed_granted(self, fake_signed_factory, transport_failure):
        resolver = AccessStatusResolver(http_client_factory=fake_signed_factory(transport_failure))
        statuses = resolver.check_model_access_status(None, 'us-west-2', [SONNET_35])
        assert statuses == [AccessStatus(SONNET_35, True, AccessState.GRANTED, True)]

    def test_client_construction_failure(self):
        def factory(region, credentials, timeout=None):
            raise TransportFailure("no credentials")

        source, _ = AccessStatusResolver(http_client_factory=factory).check_with_source(None, 'us-west-2', [SONNET_35])
        assert source == 'heuristic'

    def test_malformed_payload_falls_back(self, fake_signed_factory):
        """响应不是字典时同样降级"""
        resolver = AccessStatusResolver(http_client_factory=fake_signed_factory(['unexpected']))
        source, _ = resolver.check_with_source(None, 'us-west-2', [SONNET_35])
        assert source == 'heuristic'


class TestAccessStatus:
    """AccessStatus 不变量测试"""

    @pytest.mark.parametrize("state", [AccessState.PENDING, AccessState.DENIED, AccessState.NOT_REQUESTED])
    def test_has_access_requires_granted(self, state):
        with pytest.raises(ValueError):
            AccessStatus('x.model', True, state, True)

    def test_gap(self):
        assert AccessStatus('x.model', False, AccessState.NOT_REQUESTED, True).is_gap() is True
        assert AccessStatus('x.model', False, AccessState.DENIED, False).is_gap() is False
        assert AccessStatus('x.model', True, AccessState.GRANTED, True).is_gap() is False
