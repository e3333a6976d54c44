from flask import Blueprint, jsonify, request

from services.avance import calcular_avance_escuela, calcular_avance_zona
from services.jerarquia_service import EscuelaService, JerarquiaService, ZonaService
from utils.vistas import coincide, payload

zonas_bp = Blueprint('zonas', __name__, url_prefix='/zonas')


@zonas_bp.route('', methods=['GET'])
def listar():
    """Zonas ordenadas por nombre con su avance"""
    q = request.args.get('q', '').strip()
    zonas = [z for z in ZonaService().get_all(order_by='nombre') if coincide(q, z.nombre)]
    avances = JerarquiaService().avances_zonas(zonas)
    return jsonify({
        'ok': True,
        'zonas': [dict(zona.to_dict(), avance=avances.get(zona.id, 0)) for zona in zonas],
    })


@zonas_bp.route('', methods=['POST'])
def crear():
    zona = ZonaService().create(payload())
    return jsonify({'ok': True, 'zona': zona.to_dict()}), 201


@zonas_bp.route('/<int:zona_id>', methods=['GET'])
def detalle(zona_id):
    """Zona con sus escuelas, el avance de cada una y el de la zona"""
    q = request.args.get('q', '').strip()
    zona = ZonaService().get_by_id_or_fail(zona_id)
    escuelas = EscuelaService().get_all(order_by='nombre', zona_id=zona_id)

    # El avance de la zona usa todas sus escuelas, el filtro solo afecta al listado
    arbol = JerarquiaService().escuelas_con_obras(escuelas)
    return jsonify({
        'ok': True,
        'zona': zona.to_dict(),
        'avance': calcular_avance_zona(arbol),
        'escuelas': [
            dict(escuela.to_dict(), avance=calcular_avance_escuela(obras), total_obras=len(obras))
            for escuela, obras in arbol
            if coincide(q, escuela.nombre, escuela.direccion)
        ],
    })


@zonas_bp.route('/<int:zona_id>', methods=['PUT', 'PATCH'])
def editar(zona_id):
    zona = ZonaService().update(zona_id, payload())
    return jsonify({'ok': True, 'zona': zona.to_dict()})


@zonas_bp.route('/<int:zona_id>', methods=['DELETE'])
def eliminar(zona_id):
    ZonaService().delete(zona_id)
    return jsonify({'ok': True})
