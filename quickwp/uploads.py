"""
Almacén temporal de archivos subidos
Solo los archivos que este almacén ha escrito se consideran subidas legítimas
"""

import logging
import os
import shutil
import tempfile
from typing import BinaryIO, Optional, Set

from .models import UploadedFile

logger = logging.getLogger(__name__)


class UploadStore:
    """Guarda las subidas multipart en un directorio temporal propio"""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or tempfile.mkdtemp(prefix='quickwp-uploads-')
        self._issued: Set[str] = set()

    def save(self, stream: BinaryIO, filename: str, content_type: Optional[str] = None) -> UploadedFile:
        """Copia el stream a un archivo temporal y devuelve su descriptor"""
        fd, path = tempfile.mkstemp(dir=self.directory, prefix='upload-')
        with os.fdopen(fd, 'wb') as f:
            shutil.copyfileobj(stream, f)

        path = os.path.realpath(path)
        self._issued.add(path)
        logger.debug(f"Archivo temporal creado para {filename}: {path}")

        return UploadedFile(
            name=filename or 'upload',
            tmp_path=path,
            content_type=content_type or 'application/octet-stream',
        )

    def is_uploaded(self, upload: Optional[UploadedFile]) -> bool:
        """True solo si el archivo fue creado por este almacén y sigue existiendo"""
        if upload is None or not upload.tmp_path:
            return False
        path = os.path.realpath(upload.tmp_path)
        return path in self._issued and os.path.isfile(path)

    def discard(self, upload: UploadedFile) -> None:
        path = os.path.realpath(upload.tmp_path)
        self._issued.discard(path)
        if os.path.isfile(path):
            os.remove(path)
