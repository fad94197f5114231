# -*- coding: utf-8 -*-
"""
AWS Bedrock 控制面 API 客户端模块

功能：
- 封装 ListFoundationModels / ListInferenceProfiles 调用
- 只返回可以立即调用的文本模型 ID 和 ACTIVE 状态的推理 profile ID
"""

import logging
from typing import Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

DEFAULT_INFERENCE_TYPE = 'ON_DEMAND'

# 过滤条件 -> ListFoundationModels 参数名
FILTER_PARAMS = {
    'provider': 'byProvider',
    'output_modality': 'byOutputModality',
    'inference_type': 'byInferenceType',
    'customization_type': 'byCustomizationType',
}


def create_session(credentials: Optional[Dict[str, str]] = None) -> boto3.Session:
    """
    创建 boto3 Session

    Args:
        credentials: {'access_key', 'secret_key', 'session_token'(可选)}，
                     为空时使用默认凭证链（环境变量、配置文件、IAM 角色等）
    """
    if credentials and credentials.get('access_key') and credentials.get('secret_key'):
        return boto3.Session(
            aws_access_key_id=credentials['access_key'],
            aws_secret_access_key=credentials['secret_key'],
            aws_session_token=credentials.get('session_token'),
        )
    return boto3.Session()


class BedrockClient:
    """
    AWS Bedrock 控制面客户端（单区域）

    每次调用都受 botocore 的连接 / 读取超时约束
    """

    def __init__(self,
                 region: str,
                 credentials: Optional[Dict[str, str]] = None,
                 connect_timeout: float = 5.0,
                 read_timeout: float = 10.0,
                 max_retries: int = 2):
        """
        初始化 Bedrock 客户端

        Args:
            region: AWS 区域
            credentials: 凭证字典（可选，为空时使用默认凭证链）
            connect_timeout: 连接超时（秒）
            read_timeout: 读取超时（秒）
            max_retries: botocore 最大重试次数
        """
        self.region = region
        boto_config = Config(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={'max_attempts': max_retries, 'mode': 'standard'},
        )
        try:
            session = create_session(credentials)
            self.client = session.client('bedrock', region_name=region, config=boto_config)
            logger.debug(f"Bedrock 客户端初始化成功，区域: {region}")
        except Exception as e:
            logger.error(f"初始化 Bedrock 客户端失败，区域 {region}: {e}")
            raise

    def list_foundation_models(self, filters: Optional[Dict[str, str]] = None) -> List[str]:
        """
        列出可以按需调用的文本基础模型

        Args:
            filters: 过滤条件（provider / output_modality / inference_type / customization_type），
                     原样传给 API，不在本地校验

        Returns:
            输出包含 TEXT 且生命周期为 ACTIVE 的模型 ID 列表
        """
        filters = filters or {}
        params = {'byInferenceType': filters.get('inference_type') or DEFAULT_INFERENCE_TYPE}
        for key, param in FILTER_PARAMS.items():
            value = filters.get(key)
            if value and param not in params:
                params[param] = value

        try:
            logger.debug(f"调用 ListFoundationModels (region: {self.region}, params: {params})")
            response = self.client.list_foundation_models(**params)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.warning(f"ListFoundationModels 失败，区域 {self.region}: {error_code}: {e}")
            raise
        except BotoCoreError as e:
            logger.warning(f"ListFoundationModels 失败（BotoCoreError），区域 {self.region}: {e}")
            raise

        model_ids = []
        for model in response.get('modelSummaries', []):
            status = (model.get('modelLifecycle') or {}).get('status')
            if 'TEXT' in (model.get('outputModalities') or []) and status == 'ACTIVE':
                logger.debug(f"[Region Query] 发现模型: {model.get('modelId')} (status: {status})")
                model_ids.append(model['modelId'])
        return model_ids

    def list_inference_profiles(self) -> List[str]:
        """
        列出 ACTIVE 状态的跨区域推理 profile

        Returns:
            推理 profile ID 列表
        """
        profile_ids = []
        params = {}
        try:
            while True:
                logger.debug(f"调用 ListInferenceProfiles (region: {self.region})")
                response = self.client.list_inference_profiles(**params)
                for profile in response.get('inferenceProfileSummaries', []):
                    if profile.get('status') == 'ACTIVE':
                        logger.debug(f"[Region Query] 发现推理 profile: {profile.get('inferenceProfileId')}")
                        profile_ids.append(profile['inferenceProfileId'])

                next_token = response.get('nextToken')
                if not next_token:
                    break
                params['nextToken'] = next_token
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.warning(f"ListInferenceProfiles 失败，区域 {self.region}: {error_code}: {e}")
            raise
        except BotoCoreError as e:
            logger.warning(f"ListInferenceProfiles 失败（BotoCoreError），区域 {self.region}: {e}")
            raise

        return profile_ids
