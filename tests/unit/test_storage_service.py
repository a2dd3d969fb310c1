"""
Unit Tests for the Image Upload URL Issuer
"""

from datetime import timedelta

import pytest

from models.constants import EntityKind
from services.storage_service import StorageService, file_extension, object_key
from utils.errors import StorageFault


class TestObjectKey:

    def test_main_image_key(self):
        key = object_key(EntityKind.CATEGORY, 'c1', 'logo.png', None, 1700000000123)
        assert key == 'public/news/news-categories/c1-main-1700000000123.png'

    def test_gallery_image_key(self):
        key = object_key(EntityKind.ARTICLE, 'a1', 'shot.JPEG', 3, 42)
        assert key == 'public/news/news-articles/a1-img-3-42.jpeg'

    @pytest.mark.parametrize('file_name,expected', [
        ('photo.webp', 'webp'),
        ('archive.tar.gz', 'gz'),
        ('noextension', 'jpg'),
        ('weird.!!', 'jpg'),
    ])
    def test_extension(self, file_name, expected):
        assert file_extension(file_name) == expected


class TestStorageService:

    def test_signed_put_url(self, storage_service, storage_client):
        urls = storage_service.image_upload_url(EntityKind.ARTICLE, 'a1', 'shot.jpg', 'image/jpeg', 0)

        key = 'public/news/news-articles/a1-img-0-1700000000500.jpg'
        assert urls == {
            'url': f'https://storage.googleapis.com/test-bucket/{key}?X-Goog-Signature=fake',
            'publicUrl': f'https://media.example.test/{key}',
        }
        signed_key, kwargs = storage_client.signed[0]
        assert signed_key == key
        assert kwargs['method'] == 'PUT'
        assert kwargs['version'] == 'v4'
        assert kwargs['content_type'] == 'image/jpeg'
        assert kwargs['expiration'] == timedelta(seconds=3600)

    def test_public_url_empty_when_unset(self, storage_client):
        service = StorageService('test-bucket', public_url='', client_factory=lambda: storage_client)
        urls = service.image_upload_url(EntityKind.CATEGORY, 'c1', 'a.png', 'image/png')
        assert urls['publicUrl'] == ''

    def test_missing_bucket(self):
        service = StorageService(bucket_name='', client_factory=lambda: pytest.fail('client built'))
        with pytest.raises(StorageFault):
            service.image_upload_url(EntityKind.CATEGORY, 'c1', 'a.png', 'image/png')

    def test_signing_failure_is_generic(self):
        class Unsignable:
            def bucket(self, name):
                raise RuntimeError('no credentials')

        service = StorageService('test-bucket', client_factory=Unsignable)
        with pytest.raises(StorageFault) as excinfo:
            service.image_upload_url(EntityKind.CATEGORY, 'c1', 'a.png', 'image/png')
        assert excinfo.value.message == 'Error generating upload URL'
