"""
Cliente REST mínimo para el API de WordPress
Centraliza toda la comunicación HTTP y normaliza las respuestas en RequestResult
"""

import json
import logging
import unicodedata
from base64 import b64encode
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .models import RequestResult, UploadedFile
from .uploads import UploadStore

logger = logging.getLogger(__name__)


def content_disposition(filename: str) -> str:
    """
    Cabecera Content-Disposition apta para ASCII

    Los nombres con acentos van en filename* (RFC 5987) con un respaldo ASCII.
    """
    fallback = unicodedata.normalize('NFKD', filename).encode('ascii', 'ignore').decode('ascii')
    fallback = fallback.replace('"', '').replace('\\', '').strip() or 'upload'
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class RestClient:
    """Cliente HTTP síncrono con Basic Auth (Application Passwords)"""

    def __init__(
        self,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        upload_timeout: float = 60.0,
        upload_connect_timeout: float = 15.0,
        uploads: Optional[UploadStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
        debug: bool = False,
    ):
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.upload_timeout = upload_timeout
        self.upload_connect_timeout = upload_connect_timeout
        self.uploads = uploads or UploadStore()
        self.transport = transport
        self.debug = debug

    def set_timeout(self, seconds: float) -> "RestClient":
        self.timeout = seconds
        return self

    def set_connect_timeout(self, seconds: float) -> "RestClient":
        self.connect_timeout = seconds
        return self

    @staticmethod
    def build_auth_header(username: str, app_password: str) -> str:
        """Valor de la cabecera Authorization para Basic Auth"""
        credentials = f"{username}:{app_password}"
        token = b64encode(credentials.encode('utf-8')).decode('ascii')
        return f"Basic {token}"

    def _client(self, verify_ssl: bool, upload: bool = False) -> httpx.Client:
        if upload:
            timeout = httpx.Timeout(self.upload_timeout, connect=self.upload_connect_timeout)
        else:
            timeout = httpx.Timeout(self.timeout, connect=self.connect_timeout)

        kwargs: Dict[str, Any] = {'timeout': timeout, 'verify': verify_ssl}
        if self.transport is not None:
            kwargs['transport'] = self.transport
        return httpx.Client(**kwargs)

    def _send(
        self,
        method: str,
        url: str,
        verify_ssl: bool,
        capture_headers: bool = False,
        upload: bool = False,
        **kwargs: Any,
    ) -> RequestResult:
        """Ejecuta la petición y convierte cualquier resultado en RequestResult"""
        try:
            with self._client(verify_ssl, upload=upload) as client:
                response = client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError cubre cabeceras no codificables (UnicodeEncodeError)
            message = str(e) or e.__class__.__name__
            logger.warning(f"⚠️ Error de transporte en {method} {url}: {message}")
            return RequestResult.transport_failure(message)

        headers: Dict[str, str] = {}
        if capture_headers:
            headers = {name.lower(): value for name, value in response.headers.items()}

        if self.debug:
            logger.debug(f"{method} {url} -> {response.status_code}: {response.text[:500]}")

        return RequestResult.from_response(response.status_code, response.text, headers)

    @staticmethod
    def _encode(payload: Dict[str, Any]) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode('utf-8')

    def get(self, url: str, username: str, app_password: str, verify_ssl: bool = True) -> RequestResult:
        """GET; es la única operación que captura las cabeceras (x-wp-total...)"""
        headers = {
            'Authorization': self.build_auth_header(username, app_password),
            'Accept': 'application/json',
        }
        return self._send('GET', url, verify_ssl, capture_headers=True, headers=headers)

    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        username: str,
        app_password: str,
        verify_ssl: bool = True,
    ) -> RequestResult:
        """POST con JSON (crear en la colección, o actualizar en la URL del elemento)"""
        return self.put_json(url, payload, username, app_password, verify_ssl, method='POST')

    def put_json(
        self,
        url: str,
        payload: Dict[str, Any],
        username: str,
        app_password: str,
        verify_ssl: bool = True,
        method: str = 'POST',
    ) -> RequestResult:
        """Envío JSON con verbo configurable (PUT/PATCH)"""
        headers = {
            'Content-Type': 'application/json; charset=utf-8',
            'Authorization': self.build_auth_header(username, app_password),
        }
        return self._send(method.upper(), url, verify_ssl, headers=headers, content=self._encode(payload))

    def options(self, url: str, username: str, app_password: str, verify_ssl: bool = True) -> RequestResult:
        """OPTIONS para obtener el schema JSON del recurso"""
        headers = {
            'Authorization': self.build_auth_header(username, app_password),
            'Accept': 'application/json',
        }
        return self._send('OPTIONS', url, verify_ssl, headers=headers)

    def delete(
        self,
        url: str,
        username: str,
        app_password: str,
        verify_ssl: bool = True,
        force: bool = False,
    ) -> RequestResult:
        """DELETE; force=True borra definitivamente (sin papelera)"""
        if force:
            url += ('&' if '?' in url else '?') + 'force=true'

        headers = {'Authorization': self.build_auth_header(username, app_password)}
        return self._send('DELETE', url, verify_ssl, headers=headers)

    def upload_file(
        self,
        url: str,
        upload: Optional[UploadedFile],
        additional_fields: Dict[str, Any],
        username: str,
        app_password: str,
        verify_ssl: bool = True,
    ) -> RequestResult:
        """Sube un archivo (multipart/form-data) con campos adicionales"""
        if not self.uploads.is_uploaded(upload):
            logger.warning("⚠️ Descriptor de archivo rechazado: no es una subida válida")
            return RequestResult.config_error('No valid file uploaded.')

        filename = upload.name or 'upload'
        headers = {
            'Authorization': self.build_auth_header(username, app_password),
            'Content-Disposition': content_disposition(filename),
        }
        data = {key: str(value) for key, value in additional_fields.items()}

        with open(upload.tmp_path, 'rb') as f:
            files = {'file': (filename, f, upload.content_type)}
            return self._send('POST', url, verify_ssl, upload=True, headers=headers, data=data, files=files)
