"""
Tests para el almacén de subidas temporales
"""

import io
import os

import pytest

from quickwp.models import UploadedFile
from quickwp.uploads import UploadStore


@pytest.mark.unit
class TestUploadStore:

    def test_save(self, upload_store):
        upload = upload_store.save(io.BytesIO(b"hola"), "saludo.txt", "text/plain")

        assert upload.name == "saludo.txt"
        assert upload.content_type == "text/plain"
        assert os.path.dirname(upload.tmp_path) == os.path.realpath(upload_store.directory)
        with open(upload.tmp_path, "rb") as f:
            assert f.read() == b"hola"
        assert upload_store.is_uploaded(upload)

    def test_default_content_type(self, upload_store):
        upload = upload_store.save(io.BytesIO(b""), "x.bin")
        assert upload.content_type == "application/octet-stream"

    def test_foreign_path_is_not_an_upload(self, upload_store, tmp_path):
        other = tmp_path / "other.txt"
        other.write_bytes(b"x")
        assert not upload_store.is_uploaded(UploadedFile(name="other.txt", tmp_path=str(other)))

    def test_other_store_is_not_trusted(self, upload_store, tmp_path):
        other_dir = tmp_path / "other"
        other_dir.mkdir()
        upload = UploadStore(str(other_dir)).save(io.BytesIO(b"x"), "a.txt")

        assert not upload_store.is_uploaded(upload)

    def test_discard(self, upload_store):
        upload = upload_store.save(io.BytesIO(b"x"), "a.txt")

        upload_store.discard(upload)

        assert not os.path.exists(upload.tmp_path)
        assert not upload_store.is_uploaded(upload)

    def test_none(self, upload_store):
        assert not upload_store.is_uploaded(None)
