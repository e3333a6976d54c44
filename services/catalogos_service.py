"""
Catálogos Service - Rubros, empresas e inspectores
"""

from typing import List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import Rubro, Empresa, Inspector
from services.base import BaseService, ServiceException


class RubroService(BaseService[Rubro]):
    model_class = Rubro
    editable_fields = ('nombre',)
    protected_relations = ('tareas',)

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'nombre')
        return values


class EmpresaService(BaseService[Empresa]):
    model_class = Empresa
    editable_fields = ('nombre', 'cuit', 'telefono', 'email', 'direccion', 'rubro_principal')
    protected_relations = ('tareas',)

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'nombre')
        return values


class InspectorService(BaseService[Inspector]):
    model_class = Inspector
    editable_fields = ('nombre', 'email', 'telefono', 'rol')

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'nombre')
        if instance is None:
            values.setdefault('rol', 'inspector')
        self._check_choice(values, 'rol', Inspector.ROLES)
        return values


def listado_opcional(service: BaseService) -> List[dict]:
    """Lista para desplegables: ante un error se registra y devuelve []"""
    try:
        return [item.to_dict() for item in service.get_all(order_by='nombre')]
    except (ServiceException, SQLAlchemyError) as exc:
        current_app.logger.warning(
            "No se pudo cargar %s: %s", service.model_class.__tablename__, exc
        )
        return []


__all__ = ['EmpresaService', 'InspectorService', 'RubroService', 'listado_opcional']
