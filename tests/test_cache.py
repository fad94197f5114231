"""
tests/test_cache.py - 内存缓存和目录缓存测试
"""

import json
import os
import time
from datetime import date
from unittest.mock import patch

from cache.cache import MemoryCache
from cache.catalog_cache import FileCatalogCache, MemoryCatalogCache
from provider.bedrock.models import LifecycleState, ResourceDescriptor

DESCRIPTOR = ResourceDescriptor(
    model_id='anthropic.claude-sonnet-4-5-20250929-v1:0',
    model_name='Claude Sonnet 4.5',
    provider='Anthropic',
    regions=('us-west-2', 'us-east-1'),
    input_modalities=('Text', 'Image'),
    output_modalities=('Text',),
    streaming_supported=True,
    requires_access=True,
    status=LifecycleState.ACTIVE,
    release_date=date(2025, 9, 29),
)


class TestMemoryCache:
    """MemoryCache 测试"""

    def test_get_missing(self):
        assert MemoryCache().get('missing') == (None, False)

    def test_set_get(self):
        cache = MemoryCache()
        cache.set('key', [1, 2])
        assert cache.get('key') == ([1, 2], True)

    def test_falsy_value_exists(self):
        cache = MemoryCache()
        cache.set('key', [])
        assert cache.get('key') == ([], True)

    def test_expiration(self):
        cache = MemoryCache()
        with patch('cache.cache.time.time', return_value=1000.0):
            cache.set('key', 'value', ttl=10)
        with patch('cache.cache.time.time', return_value=1005.0):
            assert cache.get('key') == ('value', True)
        with patch('cache.cache.time.time', return_value=1011.0):
            assert cache.get('key') == (None, False)

    def test_no_ttl_never_expires(self):
        cache = MemoryCache()
        with patch('cache.cache.time.time', return_value=0.0):
            cache.set('key', 'value')
        with patch('cache.cache.time.time', return_value=10 ** 9):
            assert cache.get('key') == ('value', True)

    def test_default_ttl(self):
        cache = MemoryCache(default_ttl=5)
        with patch('cache.cache.time.time', return_value=100.0):
            cache.set('key', 'value')
        with patch('cache.cache.time.time', return_value=106.0):
            assert cache.get('key') == (None, False)

    def test_delete_and_clear(self):
        cache = MemoryCache()
        cache.set('a', 1)
        cache.set('b', 2)
        cache.delete('a')
        cache.delete('missing')
        assert cache.get('a') == (None, False)
        assert cache.get('b') == (2, True)
        cache.clear()
        assert cache.get('b') == (None, False)


class TestMemoryCatalogCache:
    """MemoryCatalogCache 测试"""

    def test_empty(self):
        assert MemoryCatalogCache().read() is None

    def test_write_read_invalidate(self):
        cache = MemoryCatalogCache()
        cache.write([DESCRIPTOR])
        assert cache.read() == [DESCRIPTOR]
        cache.invalidate()
        assert cache.read() is None

    def test_shared_backing_cache(self):
        backing = MemoryCache()
        MemoryCatalogCache(cache=backing).write([DESCRIPTOR])
        assert backing.get(MemoryCatalogCache.KEY)[1] is True

    def test_ttl(self):
        cache = MemoryCatalogCache(ttl=60)
        with patch('cache.cache.time.time', return_value=0.0):
            cache.write([DESCRIPTOR])
        with patch('cache.cache.time.time', return_value=61.0):
            assert cache.read() is None


class TestFileCatalogCache:
    """FileCatalogCache 测试"""

    def test_missing_file(self, tmp_path):
        assert FileCatalogCache(cache_dir=str(tmp_path), ttl=60).read() is None

    def test_write_read(self, tmp_path):
        cache = FileCatalogCache(cache_dir=str(tmp_path), ttl=60)
        cache.write([DESCRIPTOR])

        assert os.path.exists(tmp_path / 'catalog.json')
        assert cache.read() == [DESCRIPTOR]

    def test_expired(self, tmp_path):
        cache = FileCatalogCache(cache_dir=str(tmp_path), ttl=60)
        cache.write([DESCRIPTOR])
        with patch('cache.catalog_cache.time.time', return_value=time.time() + 120):
            assert cache.read() is None

    def test_corrupt_file(self, tmp_path):
        (tmp_path / 'catalog.json').write_text('{not json', encoding='utf-8')
        assert FileCatalogCache(cache_dir=str(tmp_path), ttl=60).read() is None

    def test_file_layout(self, tmp_path):
        FileCatalogCache(cache_dir=str(tmp_path), ttl=60).write([DESCRIPTOR])
        data = json.loads((tmp_path / 'catalog.json').read_text(encoding='utf-8'))

        assert 'timestamp' in data
        assert data['models'][0]['modelId'] == DESCRIPTOR.model_id
        assert data['models'][0]['releaseDate'] == '2025-09-29'

    def test_write_leaves_no_temp_files(self, tmp_path):
        cache = FileCatalogCache(cache_dir=str(tmp_path), ttl=60)
        cache.write([DESCRIPTOR])
        cache.write([DESCRIPTOR, DESCRIPTOR])

        assert sorted(os.listdir(tmp_path)) == ['catalog.json']
        assert len(cache.read()) == 2

    def test_failed_write_keeps_previous_file(self, tmp_path):
        """替换失败时旧缓存保持完整，临时文件被清理"""
        cache = FileCatalogCache(cache_dir=str(tmp_path), ttl=60)
        cache.write([DESCRIPTOR])

        with patch('cache.catalog_cache.os.replace', side_effect=OSError('disk full')):
            cache.write([])

        assert sorted(os.listdir(tmp_path)) == ['catalog.json']
        assert cache.read() == [DESCRIPTOR]

    def test_invalidate(self, tmp_path):
        cache = FileCatalogCache(cache_dir=str(tmp_path), ttl=60)
        cache.write([DESCRIPTOR])
        cache.invalidate()
        assert cache.read() is None
        cache.invalidate()

    def test_env_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv('CATALOG_CACHE_DIR', str(tmp_path / 'from-env'))
        monkeypatch.setenv('CATALOG_CACHE_TTL', '120')

        cache = FileCatalogCache()

        assert cache.cache_dir == str(tmp_path / 'from-env')
        assert cache.ttl == 120
        assert os.path.isdir(cache.cache_dir)
