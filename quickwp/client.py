"""
QuickWP: punto de entrada para operar con el REST API de WordPress

Uso:
    qwp = QuickWP.from_loader(ConfigLoader("/etc/quickwp"), "main")
    result = qwp.posts().create({"title": "Hola", "content": "Mundo"})
    if QuickWP.is_success(result):
        print(QuickWP.get_id(result), QuickWP.get_link(result))
"""

from typing import Any, Dict, Mapping, MutableMapping, Optional

from .config import ConfigLoader, SiteConfig
from .media import MediaService
from .menus import MenuService
from .models import (
    RequestResult,
    UploadedFile,
    get_created_id,
    get_created_link,
    get_error_message,
    is_success,
)
from .rest_client import RestClient
from .services import CptService, PageService, PostService
from .taxonomy import TaxonomyService
from .templates import TemplateService


class QuickWP:
    """Fachada con servicios creados bajo demanda para un sitio"""

    def __init__(
        self,
        config: SiteConfig,
        client: Optional[RestClient] = None,
        template_cache: Optional[MutableMapping[str, Dict[str, str]]] = None,
    ):
        self.config = config
        self.client = client or RestClient(debug=config.debug_http)
        self.template_cache = template_cache if template_cache is not None else {}
        self._services: Dict[str, Any] = {}

    @classmethod
    def from_loader(cls, loader: ConfigLoader, site_key: str = '', **kwargs: Any) -> "QuickWP":
        """Crea la instancia para un sitio (o el sitio por defecto)"""
        if site_key == '':
            site_key = loader.resolve_site_key()
        return cls(loader.create_site_config(site_key), **kwargs)

    @classmethod
    def with_config(cls, config: Mapping[str, Any], **kwargs: Any) -> "QuickWP":
        return cls(SiteConfig(config), **kwargs)

    def _service(self, name: str, factory):
        if name not in self._services:
            self._services[name] = factory()
        return self._services[name]

    def posts(self) -> PostService:
        return self._service('posts', lambda: PostService(self.config, self.client))

    def pages(self) -> PageService:
        return self._service('pages', lambda: PageService(self.config, self.client))

    def cpt(self) -> CptService:
        return self._service('cpt', lambda: CptService(self.config, self.client))

    def media(self) -> MediaService:
        return self._service('media', lambda: MediaService(self.config, self.client))

    def taxonomy(self) -> TaxonomyService:
        return self._service('taxonomy', lambda: TaxonomyService(self.config, self.client))

    def menus(self) -> MenuService:
        return self._service('menus', lambda: MenuService(self.config, self.client))

    def templates(self) -> TemplateService:
        return self._service(
            'templates',
            lambda: TemplateService(self.config, self.client, self.template_cache),
        )

    # === Atajos ===

    def create_post(self, data: Dict[str, Any]) -> RequestResult:
        return self.posts().create(data)

    def create_page(self, data: Dict[str, Any]) -> RequestResult:
        return self.pages().create(data)

    def create_cpt_item(self, slug: str, data: Dict[str, Any]) -> RequestResult:
        return self.cpt().create(slug, data)

    def upload_media(self, upload: UploadedFile, data: Optional[Dict[str, Any]] = None) -> RequestResult:
        return self.media().upload(upload, data or {})

    def create_category(self, data: Dict[str, Any]) -> RequestResult:
        return self.taxonomy().create_category(data)

    def create_tag(self, data: Dict[str, Any]) -> RequestResult:
        return self.taxonomy().create_tag(data)

    # === Helpers de resultado ===

    is_success = staticmethod(is_success)
    get_error = staticmethod(get_error_message)
    get_id = staticmethod(get_created_id)
    get_link = staticmethod(get_created_link)
