"""
Services Package
================
Capa de servicios para la lógica de negocio del seguimiento de obras.

Estructura:
-----------
- base: Clase base CRUD y excepciones
- avance: Cálculo de avances por obra, escuela y zona
- jerarquia_service: CRUD de zonas, escuelas, obras y tareas; lecturas agrupadas
- catalogos_service: Rubros, empresas e inspectores
- reporte_obra: Composición del resumen de obra (bloques y paginado)
- reporte_pdf: Dibujo del resumen con reportlab

Uso:
----
    from services import JerarquiaService, ZonaService

    zonas = ZonaService().get_all(order_by='nombre')
    avances = JerarquiaService().avances_zonas(zonas)
"""

# Base service and exceptions
from services.base import (
    BaseService,
    ServiceException,
    ValidationException,
    NotFoundException,
    MissingRelationException,
)

# Domain services
from services.jerarquia_service import (
    JerarquiaService,
    ZonaService,
    EscuelaService,
    ObraService,
    TareaService,
)
from services.catalogos_service import RubroService, EmpresaService, InspectorService


__all__ = [
    'BaseService',
    'ServiceException',
    'ValidationException',
    'NotFoundException',
    'MissingRelationException',
    'JerarquiaService',
    'ZonaService',
    'EscuelaService',
    'ObraService',
    'TareaService',
    'RubroService',
    'EmpresaService',
    'InspectorService',
]
