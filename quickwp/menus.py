"""
Servicio de menús de QuickWP

El REST API de WordPress solo expone menús desde la versión 5.9
(menus, menu-items, menu-locations); en versiones anteriores hace falta
un plugin que añada esas rutas.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .endpoints import append_query
from .models import RequestResult
from .services import ContentService, to_int


def split_classes(classes: Any) -> List[str]:
    """Clases CSS como lista (WordPress no acepta el texto separado por espacios)"""
    if isinstance(classes, (list, tuple)):
        return [str(c) for c in classes]
    return str(classes).split()


class MenuService(ContentService):
    """Menús de navegación, ubicaciones y elementos de menú"""

    not_configured_message = 'Posts endpoint not configured; menu endpoints cannot be derived.'

    def _url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        base = self.config.base_endpoint
        if base == '':
            return ''
        return append_query(f"{base}/{path}", params)

    def _fetch(self, url: str) -> RequestResult:
        error, user, password = self._preflight(url, None, None)
        if error:
            return error
        return self.client.get(url, user, password, self.config.verify_ssl)

    # === Ubicaciones ===

    def get_menu_locations(self) -> RequestResult:
        """Ubicaciones de menú registradas por el tema"""
        return self._fetch(self._url('menu-locations'))

    def get_menu_by_location(self, location: str) -> RequestResult:
        return self._fetch(self._url(f"menu-locations/{quote(location, safe='')}"))

    # === Elementos de menú ===

    def get_menu_items(self, menu_id: int) -> RequestResult:
        return self._fetch(self._url('menu-items', {'menus': menu_id, 'per_page': 100}))

    def create_menu_item(self, menu_id: int, data: Dict[str, Any]) -> RequestResult:
        return self._create(self._url('menu-items'), self.build_menu_item_payload(menu_id, data))

    def update_menu_item(self, item_id: int, data: Dict[str, Any]) -> RequestResult:
        payload = dict(data)
        if payload.get('classes'):
            payload['classes'] = split_classes(payload['classes'])
        return self._update(self._url('menu-items'), item_id, payload)

    def delete_menu_item(self, item_id: int, force: bool = False) -> RequestResult:
        return self._delete(self._url('menu-items'), item_id, force)

    # === Menús de navegación ===

    def get_nav_menus(self) -> RequestResult:
        return self._fetch(self._url('menus', {'per_page': 100}))

    def get_nav_menu(self, menu_id: int) -> RequestResult:
        return self._fetch(self._url(f"menus/{menu_id}"))

    def create_nav_menu(self, name: str, slug: str = '') -> RequestResult:
        payload = {'name': name}
        if slug != '':
            payload['slug'] = slug
        return self._create(self._url('menus'), payload)

    def delete_nav_menu(self, menu_id: int, force: bool = True) -> RequestResult:
        return self._delete(self._url('menus'), menu_id, force)

    @staticmethod
    def build_menu_item_payload(menu_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """Traduce los campos del formulario al schema de menu-items"""
        payload: Dict[str, Any] = {
            'menus': menu_id,
            'status': 'publish',
        }

        if data.get('title'):
            payload['title'] = data['title']

        # Enlace personalizado
        if data.get('url'):
            payload['url'] = data['url']
            payload['type'] = 'custom'

        # Un tipo explícito (post_type, taxonomy...) gana sobre 'custom'
        if data.get('type'):
            payload['type'] = data['type']

        if data.get('object_id'):
            payload['object_id'] = to_int(data['object_id'])
        if data.get('object'):
            payload['object'] = data['object']
        if data.get('parent'):
            payload['parent'] = to_int(data['parent'])
        if data.get('menu_order') is not None:
            payload['menu_order'] = to_int(data['menu_order'])
        if data.get('target'):
            payload['target'] = data['target']

        classes = data.get('classes')
        if classes:
            payload['classes'] = split_classes(classes)

        if data.get('description'):
            payload['description'] = data['description']
        if data.get('attr_title'):
            payload['attr_title'] = data['attr_title']

        return payload
