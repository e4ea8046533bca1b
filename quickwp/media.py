"""
Servicio de media de QuickWP
Subida de archivos, metadatos e imagen destacada
"""

import logging
from typing import Any, Dict, Optional

from .endpoints import item_url
from .models import RequestResult, UploadedFile
from .services import ContentService, to_int

logger = logging.getLogger(__name__)

MEDIA_FIELDS = ('title', 'alt_text', 'caption', 'description')


class MediaService(ContentService):
    """Subir archivos y asignar imágenes destacadas"""

    not_configured_message = 'Media endpoint not configured.'

    @property
    def endpoint(self) -> str:
        return self.config.media_endpoint

    def upload(self, upload: Optional[UploadedFile], data: Optional[Dict[str, Any]] = None,
               username: Optional[str] = None, app_password: Optional[str] = None) -> RequestResult:
        """Sube un archivo a la biblioteca de medios"""
        error, user, password = self._preflight(self.endpoint, username, app_password)
        if error:
            return error

        fields = self.build_fields(data or {})
        result = self.client.upload_file(self.endpoint, upload, fields, user, password, self.config.verify_ssl)
        if result.ok:
            logger.info(f"✅ Archivo subido: {upload.name}")
        return result

    def set_featured_image(self, post_id: int, media_id: int, username: Optional[str] = None,
                           app_password: Optional[str] = None) -> RequestResult:
        """
        Asigna la imagen destacada de un post

        Es una modificación del post (featured_media), no del recurso media.
        """
        if post_id <= 0 or media_id <= 0:
            return RequestResult.config_error('Invalid post ID or media ID.')

        endpoint = self.config.posts_endpoint
        if endpoint == '':
            return RequestResult.config_error('Posts endpoint not configured.')

        user, password = self._credentials(username, app_password)
        if user == '' or password == '':
            return RequestResult.config_error('WordPress credentials not configured.')

        return self.client.post_json(
            item_url(endpoint, post_id),
            {'featured_media': media_id},
            user,
            password,
            self.config.verify_ssl,
        )

    def get(self, media_id: int, username: Optional[str] = None,
            app_password: Optional[str] = None) -> RequestResult:
        return self._get(self.endpoint, media_id, username, app_password)

    def list(self, params: Optional[Dict[str, Any]] = None, username: Optional[str] = None,
             app_password: Optional[str] = None) -> RequestResult:
        return self._list(self.endpoint, params, username, app_password)

    def update(self, media_id: int, data: Dict[str, Any], username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._update(self.endpoint, media_id, self.build_fields(data), username, app_password)

    def delete(self, media_id: int, force: bool = True, username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        # WordPress no admite papelera para media: force por defecto
        return self._delete(self.endpoint, media_id, force, username, app_password)

    @staticmethod
    def build_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        fields = {name: data[name] for name in MEDIA_FIELDS if data.get(name)}

        # Adjuntar a un post
        post_id = to_int(data.get('post'))
        if post_id > 0:
            fields['post'] = post_id

        return fields
