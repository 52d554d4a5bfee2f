"""Shared constants for the category catalog."""

PAGE_SIZE: int = 10

SORT_FIELDS: tuple[str, ...] = ("name", "id")
SORT_DEFAULT = "default"
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS: tuple[str, ...] = (SORT_DEFAULT, SORT_ASC, SORT_DESC)

CATEGORY_PLACEHOLDER_IMAGE = "/static/images/category-placeholder.svg"

# Store messages that signal a name collision when no structured code is sent.
DUPLICATE_NAME_MARKERS: tuple[str, ...] = (
    "duplicate",
    "duplicat",
    "already exists",
    "unique constraint",
    "já existe",
)

EXPORT_HEADER: tuple[str, str] = ("id", "name")
EXPORT_INDENT = "  "

FACTORY_CATEGORIES: tuple[dict, ...] = (
    {"name": "Cordas", "parent": None},
    {"name": "Guitarras", "parent": "Cordas"},
    {"name": "Guitarras Elétricas", "parent": "Guitarras"},
    {"name": "Violões", "parent": "Cordas"},
    {"name": "Baixos", "parent": "Cordas"},
    {"name": "Teclas", "parent": None},
    {"name": "Pianos Digitais", "parent": "Teclas"},
    {"name": "Sintetizadores", "parent": "Teclas"},
    {"name": "Percussão", "parent": None},
    {"name": "Baterias Acústicas", "parent": "Percussão"},
    {"name": "Acessórios", "parent": None},
)
