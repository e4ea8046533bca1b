"""
Modelos de QuickWP
Contrato uniforme de resultados del REST API y modelos de petición HTTP
"""

import json
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any, Union
from dataclasses import dataclass, field


class ErrorKind(str, Enum):
    """Tipo de fallo de una llamada al REST API"""
    CONFIG = "config"
    TRANSPORT = "transport"
    HTTP = "http"


@dataclass
class RequestResult:
    """
    Resultado normalizado de cualquier llamada al REST API de WordPress

    Nunca se lanza una excepción por fallos esperados: credenciales erróneas,
    host inalcanzable o un 404 se devuelven como valor con ok=False.
    """
    ok: bool
    http_status: int = 0
    transport_error: Optional[str] = None
    raw_body: Optional[str] = None
    parsed_body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    kind: Optional[ErrorKind] = None

    @property
    def json(self) -> Any:
        """Alias del cuerpo JSON parseado"""
        return self.parsed_body

    @classmethod
    def config_error(cls, message: str) -> "RequestResult":
        """Error de configuración detectado antes de hacer la petición"""
        return cls(ok=False, http_status=0, transport_error=message, kind=ErrorKind.CONFIG)

    @classmethod
    def transport_failure(cls, message: str) -> "RequestResult":
        """Fallo de DNS, conexión, TLS o timeout"""
        return cls(ok=False, http_status=0, transport_error=message, kind=ErrorKind.TRANSPORT)

    @classmethod
    def from_response(cls, status: int, body: str, headers: Optional[Dict[str, str]] = None) -> "RequestResult":
        """Construye el resultado a partir de una respuesta HTTP recibida"""
        ok = 200 <= status < 300
        return cls(
            ok=ok,
            http_status=status,
            raw_body=body,
            parsed_body=parse_json_body(body),
            headers=headers or {},
            kind=None if ok else ErrorKind.HTTP,
        )


def parse_json_body(body: Optional[str]) -> Any:
    """JSON del cuerpo, o None si está vacío o no es válido"""
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def is_success(result: RequestResult) -> bool:
    """Indica si la llamada terminó correctamente"""
    return bool(result.ok)


def get_error_message(result: RequestResult) -> str:
    """Mensaje de error legible: estado HTTP | error de transporte | message"""
    parts = []

    if result.http_status and result.http_status >= 400:
        parts.append(f"HTTP {result.http_status}")

    if result.transport_error:
        parts.append(result.transport_error)

    body = result.parsed_body
    if isinstance(body, dict) and body.get('message'):
        parts.append(str(body['message']))

    return ' | '.join(parts) or 'Unknown error'


def get_created_id(result: RequestResult) -> Optional[int]:
    """ID del elemento devuelto por WordPress"""
    body = result.parsed_body
    if isinstance(body, dict):
        return body.get('id')
    return None


def get_created_link(result: RequestResult) -> Optional[str]:
    """Enlace público del elemento (link, o source_url para media)"""
    body = result.parsed_body
    if not isinstance(body, dict):
        return None
    return body.get('link') or body.get('source_url')


@dataclass
class UploadedFile:
    """Descriptor de un archivo subido y guardado en disco temporal"""
    name: str
    tmp_path: str
    content_type: str = "application/octet-stream"


BULK_LABELS = {
    'trash': 'trashed',
    'delete': 'deleted',
    'publish': 'published',
    'draft': 'drafted',
}


@dataclass
class BulkResult:
    """Recuento de una acción masiva"""
    action: str
    success_count: int = 0
    fail_count: int = 0
    failed_ids: List[int] = field(default_factory=list)

    def summary(self) -> Dict[str, Optional[str]]:
        message = None
        error = None
        if self.success_count > 0:
            label = BULK_LABELS.get(self.action, self.action)
            message = f"{self.success_count} item(s) {label} successfully."
        if self.fail_count > 0:
            error = f"{self.fail_count} item(s) failed."
        return {"message": message, "error": error}


# === Modelos de Request ===

IdList = Union[List[int], str]


class PostInput(BaseModel):
    """Datos de un post (todos opcionales para permitir updates parciales)"""
    title: Optional[str] = Field(default=None, description="Título del post")
    content: Optional[str] = Field(default=None, description="Contenido (HTML permitido)")
    excerpt: Optional[str] = Field(default=None, description="Extracto")
    status: Optional[str] = Field(default=None, description="Estado: draft, publish, pending, private, future")
    slug: Optional[str] = None
    date: Optional[str] = None
    author: Optional[int] = None
    featured_media: Optional[int] = None
    comment_status: Optional[str] = None
    ping_status: Optional[str] = None
    format: Optional[str] = None
    sticky: Optional[bool] = None
    categories: Optional[IdList] = Field(default=None, description="IDs de categorías (lista o '1,2,3')")
    tags: Optional[IdList] = Field(default=None, description="IDs de etiquetas (lista o '1,2,3')")
    template: Optional[str] = Field(default=None, description="Archivo de plantilla")
    meta: Optional[Dict[str, Any]] = None


class PageInput(PostInput):
    """Datos de una página"""
    parent: Optional[int] = Field(default=None, description="ID de la página padre")
    parent_id: Optional[int] = None
    menu_order: Optional[int] = None


class CptInput(PostInput):
    """Datos de un CPT; se aceptan taxonomías personalizadas como campos extra"""
    model_config = ConfigDict(extra="allow")


class MediaUpdateInput(BaseModel):
    """Metadatos de un archivo multimedia"""
    title: Optional[str] = None
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    post: Optional[int] = Field(default=None, description="ID del post al que se adjunta")


class FeaturedMediaRequest(BaseModel):
    media_id: int


class TermInput(BaseModel):
    """Datos de un término de taxonomía"""
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    parent: Optional[int] = None
    meta: Optional[Dict[str, Any]] = None


class MenuItemInput(BaseModel):
    """Datos de un elemento de menú"""
    menu_id: Optional[int] = Field(default=None, description="Menú al que se añade (solo creación)")
    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    object: Optional[str] = None
    object_id: Optional[int] = None
    parent: Optional[int] = None
    menu_order: Optional[int] = None
    target: Optional[str] = None
    classes: Optional[Union[List[str], str]] = None
    description: Optional[str] = None
    attr_title: Optional[str] = None


class NavMenuInput(BaseModel):
    name: str
    slug: str = ""


class BulkActionRequest(BaseModel):
    """Petición de acción masiva"""
    action: str = Field(description="trash, delete, publish o draft")
    ids: List[int] = Field(description="IDs de los elementos")
