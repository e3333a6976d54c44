"""
Catálogos de configuración: rubros, empresas contratistas e inspectores.

Las tres colecciones comparten la misma forma de endpoints, así que se
registran con un único helper.
"""

from flask import Blueprint, jsonify

from services.catalogos_service import EmpresaService, InspectorService, RubroService
from utils.vistas import payload

configuracion_bp = Blueprint('configuracion', __name__)


def _registrar_crud(ruta, clave, service_class):
    """Registra listar/crear/detalle/editar/eliminar para un catálogo"""

    def listar():
        items = service_class().get_all(order_by='nombre')
        return jsonify({'ok': True, ruta: [i.to_dict() for i in items]})

    def crear():
        item = service_class().create(payload())
        return jsonify({'ok': True, clave: item.to_dict()}), 201

    def detalle(item_id):
        item = service_class().get_by_id_or_fail(item_id)
        return jsonify({'ok': True, clave: item.to_dict()})

    def editar(item_id):
        item = service_class().update(item_id, payload())
        return jsonify({'ok': True, clave: item.to_dict()})

    def eliminar(item_id):
        service_class().delete(item_id)
        return jsonify({'ok': True})

    configuracion_bp.add_url_rule(f'/{ruta}', f'{ruta}_listar', listar, methods=['GET'])
    configuracion_bp.add_url_rule(f'/{ruta}', f'{ruta}_crear', crear, methods=['POST'])
    configuracion_bp.add_url_rule(f'/{ruta}/<int:item_id>', f'{ruta}_detalle', detalle, methods=['GET'])
    configuracion_bp.add_url_rule(f'/{ruta}/<int:item_id>', f'{ruta}_editar', editar,
                                  methods=['PUT', 'PATCH'])
    configuracion_bp.add_url_rule(f'/{ruta}/<int:item_id>', f'{ruta}_eliminar', eliminar,
                                  methods=['DELETE'])


_registrar_crud('rubros', 'rubro', RubroService)
_registrar_crud('empresas', 'empresa', EmpresaService)
_registrar_crud('inspectores', 'inspector', InspectorService)
