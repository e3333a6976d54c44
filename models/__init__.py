"""
Models Package
==============
Este paquete contiene todos los modelos del sistema organizados por funcionalidad.

Estructura:
- core: Zona, Escuela
- projects: Obra, Tarea
- catalogs: Rubro, Empresa, Inspector
"""

from extensions import db

# Jerarquía territorial
from models.core import Zona, Escuela

# Obras y tareas
from models.projects import Obra, Tarea, ESTADOS_OBRA, ESTADOS_TAREA

# Catálogos
from models.catalogs import Rubro, Empresa, Inspector


__all__ = [
    'db',
    'Zona',
    'Escuela',
    'Obra',
    'Tarea',
    'ESTADOS_OBRA',
    'ESTADOS_TAREA',
    'Rubro',
    'Empresa',
    'Inspector',
]
