from flask import Blueprint, jsonify, request

from services.avance import calcular_avance_escuela, calcular_avance_obra
from services.jerarquia_service import EscuelaService, JerarquiaService, ObraService
from utils.vistas import coincide, int_arg, payload

escuelas_bp = Blueprint('escuelas', __name__, url_prefix='/escuelas')


@escuelas_bp.route('', methods=['GET'])
def listar():
    """Escuelas con su zona y avance; filtros opcionales ?zona_id= y ?q="""
    q = request.args.get('q', '').strip()
    filtros = {}
    zona_id = int_arg('zona_id')
    if zona_id is not None:
        filtros['zona_id'] = zona_id

    escuelas = [
        e for e in EscuelaService().get_all(order_by='nombre', **filtros)
        if coincide(q, e.nombre, e.direccion)
    ]
    avances = JerarquiaService().avances_escuelas(escuelas)
    return jsonify({
        'ok': True,
        'escuelas': [dict(e.to_dict(), avance=avances.get(e.id, 0)) for e in escuelas],
    })


@escuelas_bp.route('', methods=['POST'])
def crear():
    escuela = EscuelaService().create(payload())
    return jsonify({'ok': True, 'escuela': escuela.to_dict()}), 201


@escuelas_bp.route('/<int:escuela_id>', methods=['GET'])
def detalle(escuela_id):
    """Escuela con sus obras, el avance de cada obra y el de la escuela"""
    escuela = EscuelaService().get_by_id_or_fail(escuela_id)
    obras = ObraService().get_all(order_by='nombre', escuela_id=escuela_id)
    obras_con_tareas = JerarquiaService().obras_con_tareas(obras)

    return jsonify({
        'ok': True,
        'escuela': escuela.to_dict(),
        'avance': calcular_avance_escuela(obras_con_tareas),
        'obras': [
            dict(obra.to_dict(), etiqueta=obra.etiqueta, avance=calcular_avance_obra(tareas),
                 total_tareas=len(tareas))
            for obra, tareas in obras_con_tareas
        ],
    })


@escuelas_bp.route('/<int:escuela_id>', methods=['PUT', 'PATCH'])
def editar(escuela_id):
    escuela = EscuelaService().update(escuela_id, payload())
    return jsonify({'ok': True, 'escuela': escuela.to_dict()})


@escuelas_bp.route('/<int:escuela_id>', methods=['DELETE'])
def eliminar(escuela_id):
    EscuelaService().delete(escuela_id)
    return jsonify({'ok': True})
