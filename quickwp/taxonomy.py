"""
Servicio de taxonomías de QuickWP
Categorías, etiquetas y taxonomías personalizadas
"""

from typing import Any, Dict, Optional

from .models import RequestResult
from .services import ContentService, to_int

TERM_FIELDS = ('name', 'slug', 'description', 'parent', 'meta')


def _missing(taxonomy: str) -> str:
    return f"Endpoint for taxonomy '{taxonomy}' could not be determined."


class TaxonomyService(ContentService):
    """Gestión de términos en cualquier taxonomía"""

    def endpoint(self, taxonomy: str) -> str:
        """Endpoint explícito para categorías/etiquetas, si no derivado de posts"""
        if taxonomy == 'categories':
            return self.config.categories_endpoint
        if taxonomy == 'tags':
            return self.config.tags_endpoint
        return self.config.derive_endpoint(self.config.posts_endpoint, taxonomy)

    def create(self, taxonomy: str, data: Dict[str, Any], username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._create(self.endpoint(taxonomy), self.build_payload(data),
                            username, app_password, _missing(taxonomy))

    def update(self, taxonomy: str, term_id: int, data: Dict[str, Any], username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._update(self.endpoint(taxonomy), term_id, self.build_payload(data),
                            username, app_password, _missing(taxonomy))

    def get(self, taxonomy: str, term_id: int, username: Optional[str] = None,
            app_password: Optional[str] = None) -> RequestResult:
        return self._get(self.endpoint(taxonomy), term_id, username, app_password, _missing(taxonomy))

    def list(self, taxonomy: str, params: Optional[Dict[str, Any]] = None, username: Optional[str] = None,
             app_password: Optional[str] = None) -> RequestResult:
        """Lista términos (per_page, page, search, orderby, order, hide_empty...)"""
        return self._list(self.endpoint(taxonomy), params, username, app_password, _missing(taxonomy))

    def delete(self, taxonomy: str, term_id: int, force: bool = False, username: Optional[str] = None,
               app_password: Optional[str] = None) -> RequestResult:
        return self._delete(self.endpoint(taxonomy), term_id, force, username, app_password, _missing(taxonomy))

    def create_category(self, data: Dict[str, Any], **kwargs: Any) -> RequestResult:
        return self.create('categories', data, **kwargs)

    def create_tag(self, data: Dict[str, Any], **kwargs: Any) -> RequestResult:
        return self.create('tags', data, **kwargs)

    def list_categories(self, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> RequestResult:
        return self.list('categories', params, **kwargs)

    def list_tags(self, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> RequestResult:
        return self.list('tags', params, **kwargs)

    @staticmethod
    def build_payload(data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {}
        for name in TERM_FIELDS:
            if data.get(name) is None:
                continue
            payload[name] = to_int(data[name]) if name == 'parent' else data[name]
        return payload
