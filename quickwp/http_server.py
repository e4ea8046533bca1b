#!/usr/bin/env python3
"""
Servidor HTTP (REST API) de QuickWP
Crear, editar, listar y borrar contenido de varios sitios WordPress
Cada ruta acepta ?site=<clave> para elegir el sitio configurado
"""

import logging
import math
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .access import AccessControl
from .bulk import BULK_ACTIONS, run_bulk_action
from .client import QuickWP
from .config import ConfigLoader, SiteConfig
from .models import (
    BulkActionRequest,
    CptInput,
    ErrorKind,
    FeaturedMediaRequest,
    MediaUpdateInput,
    MenuItemInput,
    NavMenuInput,
    PageInput,
    PostInput,
    RequestResult,
    TermInput,
    get_created_id,
    get_created_link,
    get_error_message,
)
from .rest_client import RestClient
from .uploads import UploadStore

# Cargar variables de entorno
load_dotenv()

# Configurar logging
logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "2.0.0"
DEFAULT_PER_PAGE = 20

# Crear aplicación FastAPI
app = FastAPI(
    title="QuickWP",
    description="API HTTP para gestionar contenido de WordPress mediante Application Passwords",
    version=VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv('CORS_ORIGINS', '*').split(','),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

basic_security = HTTPBasic(auto_error=False)

# Estado del proceso: la caché de plantillas vive lo que vive el proceso
config_loader: Optional[ConfigLoader] = None
upload_store: Optional[UploadStore] = None
template_cache: Dict[str, Dict[str, str]] = {}


@app.on_event("startup")
async def startup_event():
    """Inicializa el cargador de configuración y el almacén de subidas"""
    global config_loader, upload_store

    config_loader = ConfigLoader()
    upload_store = UploadStore()

    sites = config_loader.get_sites()
    if sites:
        logger.info(f"✅ {len(sites)} sitio(s) configurado(s): {', '.join(sites)}")
    elif config_loader.load_base_config().get('posts_endpoint'):
        logger.info("✅ Configuración de sitio único cargada")
    else:
        logger.warning("⚠️ Sin configuración de WordPress (quick-config.json, quick-sites.json o WP_URL)")


def get_loader() -> ConfigLoader:
    if config_loader is None:
        raise HTTPException(status_code=500, detail="QuickWP no inicializado")
    return config_loader


def get_qwp(
    site: Optional[str] = None,
    token: Optional[str] = None,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_security),
    wp_username: Optional[str] = Header(default=None, alias="X-WP-Username"),
    wp_app_password: Optional[str] = Header(default=None, alias="X-WP-App-Password"),
    loader: ConfigLoader = Depends(get_loader),
) -> QuickWP:
    """Resuelve el sitio de la petición, aplica el control de acceso y crea la fachada"""
    site_key = loader.resolve_site_key(site)
    config = loader.create_site_config(site_key)

    AccessControl(config).enforce(
        credentials.username if credentials else None,
        credentials.password if credentials else None,
        token,
    )

    # Credenciales por petición solo si el formulario de auth está habilitado
    if config.show_auth_form:
        overrides = {}
        if wp_username:
            overrides[SiteConfig.KEY_USERNAME] = wp_username
        if wp_app_password:
            overrides[SiteConfig.KEY_APP_PASSWORD] = wp_app_password
        if overrides:
            config = config.merge(overrides)

    client = RestClient(uploads=upload_store, debug=config.debug_http)
    return QuickWP(config, client=client, template_cache=template_cache)


# === Conversión de resultados ===

def _unwrap(result: RequestResult) -> Any:
    """Cuerpo JSON si la llamada fue bien; HTTPException si no"""
    if result.ok:
        return result.parsed_body

    message = get_error_message(result)
    if result.kind == ErrorKind.CONFIG:
        status = 500
    elif result.kind == ErrorKind.HTTP and 400 <= result.http_status < 500:
        status = result.http_status
    else:
        status = 502
    logger.error(f"❌ {message}")
    raise HTTPException(status_code=status, detail=message)


def _item_response(result: RequestResult) -> Dict[str, Any]:
    body = _unwrap(result)
    return {
        "success": True,
        "id": get_created_id(result),
        "link": get_created_link(result),
        "item": body,
    }


def _list_response(result: RequestResult, per_page: int) -> Dict[str, Any]:
    items = _unwrap(result) or []
    total = int(result.headers.get('x-wp-total', len(items)))
    fallback_pages = math.ceil(total / per_page) if per_page > 0 else 1
    total_pages = int(result.headers.get('x-wp-totalpages', fallback_pages))
    return {
        "success": True,
        "items": items,
        "total": total,
        "total_pages": total_pages,
    }


def _list_params(page: int, per_page: int, status: Optional[str], search: Optional[str],
                 fields: Optional[str] = None) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        'per_page': per_page,
        'page': page,
        'orderby': 'date',
        'order': 'desc',
    }
    if status:
        params['status'] = status
    if search:
        params['search'] = search
    if fields:
        params['_fields'] = fields
    return params


def _data(model) -> Dict[str, Any]:
    return model.model_dump(exclude_none=True)


# === Endpoints de Salud ===

@app.get("/")
def root():
    """Información del servidor"""
    return {
        "name": "QuickWP",
        "version": VERSION,
        "status": "running",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "configured": config_loader is not None}


@app.get("/sites")
def list_sites(loader: ConfigLoader = Depends(get_loader)):
    """Sitios configurados (para el selector ?site=)"""
    default_site = loader.get_default_site_key()
    return {
        "default_site": default_site,
        "sites": [
            {"key": key, "label": loader.get_site_label(key), "default": key == default_site}
            for key in loader.get_sites()
        ],
    }


# === Posts y páginas ===

def _bulk_response(service, request: BulkActionRequest) -> Dict[str, Any]:
    """Acción masiva (trash, delete, publish, draft) sobre posts o páginas"""
    if request.action not in BULK_ACTIONS:
        raise HTTPException(status_code=400, detail=f"Acción desconocida: {request.action}")

    result = run_bulk_action(service, request.action, request.ids)
    return {
        "success": result.fail_count == 0,
        "success_count": result.success_count,
        "fail_count": result.fail_count,
        "failed_ids": result.failed_ids,
        **result.summary(),
    }


@app.post("/posts/bulk")
def bulk_posts(request: BulkActionRequest, qwp: QuickWP = Depends(get_qwp)):
    return _bulk_response(qwp.posts(), request)


@app.post("/pages/bulk")
def bulk_pages(request: BulkActionRequest, qwp: QuickWP = Depends(get_qwp)):
    return _bulk_response(qwp.pages(), request)


@app.get("/posts")
def list_posts(page: int = 1, per_page: int = DEFAULT_PER_PAGE, status: str = 'any',
               search: Optional[str] = None, qwp: QuickWP = Depends(get_qwp)):
    params = _list_params(page, per_page, status, search, 'id,title,status,date,modified,link,slug')
    return _list_response(qwp.posts().list(params), per_page)


@app.post("/posts")
def create_post(request: PostInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.posts().create(_data(request)))


@app.get("/posts/{post_id}")
def get_post(post_id: int, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.posts().get(post_id))


@app.post("/posts/{post_id}")
def update_post(post_id: int, request: PostInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.posts().update(post_id, _data(request)))


@app.delete("/posts/{post_id}")
def delete_post(post_id: int, force: bool = False, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.posts().delete(post_id, force))


@app.get("/pages")
def list_pages(page: int = 1, per_page: int = DEFAULT_PER_PAGE, status: str = 'any',
               search: Optional[str] = None, parent: Optional[int] = None,
               qwp: QuickWP = Depends(get_qwp)):
    params = _list_params(page, per_page, status, search, 'id,title,status,date,modified,link,slug,parent')
    if parent is not None:
        params['parent'] = parent
    return _list_response(qwp.pages().list(params), per_page)


@app.post("/pages")
def create_page(request: PageInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.pages().create(_data(request)))


@app.get("/pages/{page_id}")
def get_page(page_id: int, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.pages().get(page_id))


@app.post("/pages/{page_id}")
def update_page(page_id: int, request: PageInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.pages().update(page_id, _data(request)))


@app.delete("/pages/{page_id}")
def delete_page(page_id: int, force: bool = False, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.pages().delete(page_id, force))


# === Custom Post Types ===

@app.get("/cpt/{slug}")
def list_cpt_items(slug: str, page: int = 1, per_page: int = DEFAULT_PER_PAGE, status: str = 'any',
                   search: Optional[str] = None, endpoint: Optional[str] = None,
                   qwp: QuickWP = Depends(get_qwp)):
    params = _list_params(page, per_page, status, search)
    return _list_response(qwp.cpt().list(slug, params, endpoint), per_page)


@app.post("/cpt/{slug}")
def create_cpt_item(slug: str, request: CptInput, endpoint: Optional[str] = None,
                    qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.cpt().create(slug, _data(request), endpoint))


@app.get("/cpt/{slug}/{item_id}")
def get_cpt_item(slug: str, item_id: int, endpoint: Optional[str] = None, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.cpt().get(slug, item_id, endpoint))


@app.post("/cpt/{slug}/{item_id}")
def update_cpt_item(slug: str, item_id: int, request: CptInput, endpoint: Optional[str] = None,
                    qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.cpt().update(slug, item_id, _data(request), endpoint))


@app.delete("/cpt/{slug}/{item_id}")
def delete_cpt_item(slug: str, item_id: int, force: bool = False, endpoint: Optional[str] = None,
                    qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.cpt().delete(slug, item_id, force, endpoint))


# === Media ===

@app.post("/media")
def upload_media(
    media_file: UploadFile = File(...),
    title: str = Form(""),
    alt_text: str = Form(""),
    caption: str = Form(""),
    description: str = Form(""),
    attach_post_id: int = Form(0),
    featured_for_post_id: int = Form(0),
    qwp: QuickWP = Depends(get_qwp),
):
    """Sube un archivo y opcionalmente lo asigna como imagen destacada"""
    if not media_file.filename:
        raise HTTPException(status_code=400, detail="Please select a file to upload.")

    store = qwp.client.uploads
    upload = store.save(media_file.file, media_file.filename, media_file.content_type)
    try:
        data = {
            'title': title.strip(),
            'alt_text': alt_text.strip(),
            'caption': caption.strip(),
            'description': description.strip(),
            'post': attach_post_id,
        }
        result = qwp.media().upload(upload, data)
    finally:
        store.discard(upload)

    response = _item_response(result)
    body = result.parsed_body or {}
    response["source_url"] = body.get('source_url') or (body.get('guid') or {}).get('rendered')

    media_id = response["id"]
    if featured_for_post_id > 0 and media_id:
        featured = qwp.media().set_featured_image(featured_for_post_id, media_id)
        response["featured_image_set"] = featured.ok
        if not featured.ok:
            response["featured_image_error"] = get_error_message(featured)

    return response


@app.get("/media")
def list_media(page: int = 1, per_page: int = DEFAULT_PER_PAGE, search: Optional[str] = None,
               media_type: Optional[str] = None, qwp: QuickWP = Depends(get_qwp)):
    params = _list_params(page, per_page, None, search)
    if media_type:
        params['media_type'] = media_type
    return _list_response(qwp.media().list(params), per_page)


@app.get("/media/{media_id}")
def get_media(media_id: int, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.media().get(media_id))


@app.post("/media/{media_id}")
def update_media(media_id: int, request: MediaUpdateInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.media().update(media_id, _data(request)))


@app.delete("/media/{media_id}")
def delete_media(media_id: int, force: bool = True, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.media().delete(media_id, force))


@app.post("/posts/{post_id}/featured-media")
def set_featured_media(post_id: int, request: FeaturedMediaRequest, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.media().set_featured_image(post_id, request.media_id))


# === Taxonomías ===

@app.get("/taxonomies/{taxonomy}")
def list_terms(taxonomy: str, page: int = 1, per_page: int = 100, search: Optional[str] = None,
               hide_empty: bool = False, qwp: QuickWP = Depends(get_qwp)):
    params: Dict[str, Any] = {'per_page': per_page, 'page': page, 'orderby': 'name', 'order': 'asc',
                              'hide_empty': hide_empty}
    if search:
        params['search'] = search
    return _list_response(qwp.taxonomy().list(taxonomy, params), per_page)


@app.post("/taxonomies/{taxonomy}")
def create_term(taxonomy: str, request: TermInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.taxonomy().create(taxonomy, _data(request)))


@app.get("/taxonomies/{taxonomy}/{term_id}")
def get_term(taxonomy: str, term_id: int, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.taxonomy().get(taxonomy, term_id))


@app.post("/taxonomies/{taxonomy}/{term_id}")
def update_term(taxonomy: str, term_id: int, request: TermInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.taxonomy().update(taxonomy, term_id, _data(request)))


@app.delete("/taxonomies/{taxonomy}/{term_id}")
def delete_term(taxonomy: str, term_id: int, force: bool = True, qwp: QuickWP = Depends(get_qwp)):
    # Los términos no tienen papelera: WordPress exige force=true
    return _item_response(qwp.taxonomy().delete(taxonomy, term_id, force))


# === Menús ===

@app.get("/menus")
def list_nav_menus(qwp: QuickWP = Depends(get_qwp)):
    return {"success": True, "items": _unwrap(qwp.menus().get_nav_menus())}


@app.post("/menus")
def create_nav_menu(request: NavMenuInput, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.menus().create_nav_menu(request.name, request.slug))


@app.get("/menus/{menu_id}")
def get_nav_menu(menu_id: int, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.menus().get_nav_menu(menu_id))


@app.delete("/menus/{menu_id}")
def delete_nav_menu(menu_id: int, force: bool = True, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.menus().delete_nav_menu(menu_id, force))


@app.get("/menus/{menu_id}/items")
def list_menu_items(menu_id: int, qwp: QuickWP = Depends(get_qwp)):
    return {"success": True, "items": _unwrap(qwp.menus().get_menu_items(menu_id))}


@app.post("/menus/{menu_id}/items")
def create_menu_item(menu_id: int, request: MenuItemInput, qwp: QuickWP = Depends(get_qwp)):
    data = _data(request)
    data.pop('menu_id', None)
    return _item_response(qwp.menus().create_menu_item(menu_id, data))


@app.post("/menu-items/{item_id}")
def update_menu_item(item_id: int, request: MenuItemInput, qwp: QuickWP = Depends(get_qwp)):
    data = _data(request)
    menu_id = data.pop('menu_id', None)
    if menu_id:
        data['menus'] = menu_id
    return _item_response(qwp.menus().update_menu_item(item_id, data))


@app.delete("/menu-items/{item_id}")
def delete_menu_item(item_id: int, force: bool = False, qwp: QuickWP = Depends(get_qwp)):
    return _item_response(qwp.menus().delete_menu_item(item_id, force))


@app.get("/menu-locations")
def list_menu_locations(qwp: QuickWP = Depends(get_qwp)):
    return {"success": True, "locations": _unwrap(qwp.menus().get_menu_locations())}


@app.get("/menu-locations/{location}")
def get_menu_location(location: str, qwp: QuickWP = Depends(get_qwp)):
    return {"success": True, "location": _unwrap(qwp.menus().get_menu_by_location(location))}


# === Plantillas ===

@app.get("/templates/{kind}")
def list_templates(kind: str, qwp: QuickWP = Depends(get_qwp)):
    """Plantillas disponibles para el desplegable (page o post)"""
    if kind == 'page':
        templates = qwp.templates().get_page_templates()
    elif kind == 'post':
        templates = qwp.templates().get_post_templates()
    else:
        raise HTTPException(status_code=404, detail=f"Tipo de plantilla desconocido: {kind}")

    return {
        "success": True,
        "templates": [{"file": file, "label": label} for file, label in templates.items()],
    }


# === Main ===

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv('PORT', 8000))

    print("=" * 60)
    print("🚀 QuickWP HTTP Server")
    print("=" * 60)
    print(f"Puerto: {port}")
    print(f"Configuración: {os.path.abspath(os.getenv('QUICKWP_CONFIG_DIR', '.'))}")
    print()

    uvicorn.run(app, host="0.0.0.0", port=port)
