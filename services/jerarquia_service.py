"""
Jerarquía Service - Zonas, escuelas, obras y tareas
====================================================
Servicios CRUD de cada nivel de la jerarquía y lecturas agrupadas para el
cálculo de avances.

Las lecturas para avances se hacen con una consulta por nivel (todas las
escuelas de las zonas pedidas, todas las obras de esas escuelas, todas las
tareas de esas obras) y se unen en memoria por id de padre, en lugar de
consultar hijo por hijo.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Zona, Escuela, Obra, Tarea, Rubro, Empresa, ESTADOS_OBRA, ESTADOS_TAREA
from services.avance import (
    agrupar_por,
    calcular_avance_escuela,
    calcular_avance_obra,
    calcular_avance_zona,
    emparejar,
)
from services.base import BaseService, ServiceException, ValidationException
from utils import parse_fecha, safe_decimal


def _parse_fechas(values: Dict[str, Any], *fields: str) -> None:
    for field in fields:
        if field in values:
            try:
                values[field] = parse_fecha(values[field])
            except ValueError:
                raise ValidationException(f"Fecha inválida en {field}: {values[field]!r}")


def _check_orden_fechas(values: Dict[str, Any], instance, inicio: str, fin: str) -> None:
    fecha_inicio = values.get(inicio, getattr(instance, inicio, None) if instance else None)
    fecha_fin = values.get(fin, getattr(instance, fin, None) if instance else None)
    if fecha_inicio and fecha_fin and fecha_inicio > fecha_fin:
        raise ValidationException(
            f"La fecha {inicio} no puede ser posterior a {fin}"
        )


def _check_existe(model, id_value, campo: str) -> None:
    if id_value is not None and db.session.get(model, id_value) is None:
        raise ValidationException(
            f"{model.__name__} con id {id_value} no existe",
            details={'field': campo}
        )


class ZonaService(BaseService[Zona]):
    model_class = Zona
    editable_fields = ('nombre',)
    protected_relations = ('escuelas',)

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'nombre')
        return values


class EscuelaService(BaseService[Escuela]):
    model_class = Escuela
    editable_fields = ('nombre', 'direccion', 'zona_id')
    protected_relations = ('obras',)

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'nombre', 'zona_id')
        if 'zona_id' in values:
            _check_existe(Zona, values['zona_id'], 'zona_id')
        return values


class ObraService(BaseService[Obra]):
    model_class = Obra
    editable_fields = (
        'nombre', 'numero_obra', 'nro_expediente', 'estado', 'escuela_id',
        'fecha_inicio_prevista', 'fecha_fin_prevista', 'fecha_inicio_real', 'fecha_fin_real',
    )

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        if instance is None:
            values.setdefault('estado', 'planificada')
        self._check_choice(values, 'estado', ESTADOS_OBRA)
        _parse_fechas(values, 'fecha_inicio_prevista', 'fecha_fin_prevista',
                      'fecha_inicio_real', 'fecha_fin_real')
        _check_orden_fechas(values, instance, 'fecha_inicio_prevista', 'fecha_fin_prevista')
        _check_orden_fechas(values, instance, 'fecha_inicio_real', 'fecha_fin_real')
        if values.get('escuela_id') in ('', 0):
            values['escuela_id'] = None
        if values.get('escuela_id') is not None:
            _check_existe(Escuela, values['escuela_id'], 'escuela_id')
        return values


class TareaService(BaseService[Tarea]):
    model_class = Tarea
    editable_fields = (
        'obra_id', 'rubro_id', 'empresa_id', 'nombre', 'descripcion', 'unidad_medida',
        'cantidad_total', 'cantidad_inicial', 'presupuesto', 'avance_planificado_porcentaje',
        'observaciones_plan', 'fecha_inicio_prevista', 'fecha_fin_prevista',
        'fecha_inicio', 'fecha_fin', 'avance', 'estado', 'prioridad',
    )
    numeric_fields = ('cantidad_total', 'cantidad_inicial', 'presupuesto', 'avance_planificado_porcentaje')

    def validate(self, data, instance=None):
        values = super().validate(data, instance)
        self._require(values, instance, 'obra_id', 'rubro_id', 'descripcion')
        if instance is None:
            values.setdefault('avance', 0)
            values.setdefault('estado', 'pendiente')

        if 'avance' in values:
            values['avance'] = self._validar_avance(values['avance'])
        self._check_choice(values, 'estado', ESTADOS_TAREA)

        for field in self.numeric_fields:
            if field in values:
                raw = values[field]
                numero = safe_decimal(raw)
                if numero is None and raw not in (None, ''):
                    raise ValidationException(f"Valor numérico inválido en {field}: {raw!r}")
                if numero is not None and numero < 0:
                    raise ValidationException(f"{field} no puede ser negativo")
                values[field] = numero

        _parse_fechas(values, 'fecha_inicio_prevista', 'fecha_fin_prevista', 'fecha_inicio', 'fecha_fin')
        _check_orden_fechas(values, instance, 'fecha_inicio_prevista', 'fecha_fin_prevista')
        _check_orden_fechas(values, instance, 'fecha_inicio', 'fecha_fin')

        if 'obra_id' in values:
            _check_existe(Obra, values['obra_id'], 'obra_id')
        if 'rubro_id' in values:
            _check_existe(Rubro, values['rubro_id'], 'rubro_id')
        if values.get('empresa_id') in ('', 0):
            values['empresa_id'] = None
        if values.get('empresa_id') is not None:
            _check_existe(Empresa, values['empresa_id'], 'empresa_id')
        return values

    @staticmethod
    def _validar_avance(valor) -> Decimal:
        if valor is None or valor == '':
            return Decimal('0')
        try:
            avance = Decimal(str(valor))
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationException(f"Avance inválido: {valor!r}")
        if not avance.is_finite() or avance < 0 or avance > 100:
            raise ValidationException("El avance debe estar entre 0 y 100")
        return avance.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def tareas_de_obra(self, obra_id: int) -> List[Tarea]:
        return self.get_all(order_by='nombre', obra_id=obra_id)


class JerarquiaService:
    """
    Lecturas agrupadas de la jerarquía y avances por nivel.

    Cada método hace a lo sumo una consulta por nivel, sin importar la
    cantidad de nodos.
    """

    def _query(self, descripcion: str, query) -> list:
        try:
            return query.all()
        except SQLAlchemyError as e:
            if has_app_context():
                current_app.logger.error(f"[{self.__class__.__name__}] Error leyendo {descripcion}: {e}")
            raise ServiceException(f"Error al leer {descripcion}: {e}")

    # ===== Lecturas por nivel =====

    def tareas_de_obras(self, obra_ids: Iterable[int]) -> Dict[int, list]:
        ids = [i for i in obra_ids if i is not None]
        if not ids:
            return {}
        filas = self._query(
            'tareas',
            db.session.query(Tarea.obra_id, Tarea.avance).filter(Tarea.obra_id.in_(ids))
        )
        return agrupar_por(filas, 'obra_id')

    def obras_de_escuelas(self, escuela_ids: Iterable[int]) -> Dict[int, list]:
        ids = [i for i in escuela_ids if i is not None]
        if not ids:
            return {}
        obras = self._query(
            'obras',
            Obra.query.filter(Obra.escuela_id.in_(ids)).order_by(Obra.nombre)
        )
        return agrupar_por(obras, 'escuela_id')

    def escuelas_de_zonas(self, zona_ids: Iterable[int]) -> Dict[int, list]:
        ids = [i for i in zona_ids if i is not None]
        if not ids:
            return {}
        escuelas = self._query(
            'escuelas',
            Escuela.query.filter(Escuela.zona_id.in_(ids)).order_by(Escuela.nombre)
        )
        return agrupar_por(escuelas, 'zona_id')

    # ===== Uniones en memoria =====

    def obras_con_tareas(self, obras: Sequence[Obra]) -> List[Tuple[Obra, list]]:
        tareas = self.tareas_de_obras(o.id for o in obras)
        return emparejar(obras, tareas)

    def escuelas_con_obras(self, escuelas: Sequence[Escuela]) -> List[Tuple[Escuela, list]]:
        obras_por_escuela = self.obras_de_escuelas(e.id for e in escuelas)
        todas = [o for obras in obras_por_escuela.values() for o in obras]
        tareas = self.tareas_de_obras(o.id for o in todas)
        return [
            (escuela, emparejar(obras_por_escuela.get(escuela.id, []), tareas))
            for escuela in escuelas
        ]

    def zonas_con_escuelas(self, zonas: Sequence[Zona]) -> List[Tuple[Zona, list]]:
        escuelas_por_zona = self.escuelas_de_zonas(z.id for z in zonas)
        todas = [e for escuelas in escuelas_por_zona.values() for e in escuelas]
        arbol = dict((e.id, obras) for e, obras in self.escuelas_con_obras(todas))
        return [
            (zona, [(e, arbol.get(e.id, [])) for e in escuelas_por_zona.get(zona.id, [])])
            for zona in zonas
        ]

    # ===== Avances =====

    def avances_obras(self, obras: Sequence[Obra]) -> Dict[int, int]:
        return {obra.id: calcular_avance_obra(tareas) for obra, tareas in self.obras_con_tareas(obras)}

    def avances_escuelas(self, escuelas: Sequence[Escuela]) -> Dict[int, int]:
        return {
            escuela.id: calcular_avance_escuela(obras)
            for escuela, obras in self.escuelas_con_obras(escuelas)
        }

    def avances_zonas(self, zonas: Sequence[Zona]) -> Dict[int, int]:
        return {
            zona.id: calcular_avance_zona(escuelas)
            for zona, escuelas in self.zonas_con_escuelas(zonas)
        }


__all__ = [
    'EscuelaService',
    'JerarquiaService',
    'ObraService',
    'TareaService',
    'ZonaService',
]
