from flask import Blueprint, current_app, jsonify, make_response, request

from services.avance import calcular_avance_obra
from services.catalogos_service import EmpresaService, RubroService, listado_opcional
from services.jerarquia_service import JerarquiaService, ObraService, TareaService
from services.reporte_pdf import generar_resumen_obra
from utils.vistas import coincide, int_arg, payload

obras_bp = Blueprint('obras', __name__)


def _breadcrumb(obra):
    """Zona → Escuela → Obra, con etiquetas de respaldo si falta un eslabón"""
    escuela = obra.escuela
    zona = escuela.zona if escuela else None
    return {
        'zona': zona.nombre if zona else 'Sin zona',
        'zona_id': zona.id if zona else None,
        'escuela': escuela.nombre if escuela else 'Sin escuela',
        'escuela_id': escuela.id if escuela else None,
        'obra': obra.etiqueta,
    }


# ==== Obras ====

@obras_bp.route('/obras', methods=['GET'])
def lista():
    """Obras con su avance; filtros ?escuela_id=, ?estado= y ?q="""
    q = request.args.get('q', '').strip()
    filtros = {}
    escuela_id = int_arg('escuela_id')
    if escuela_id is not None:
        filtros['escuela_id'] = escuela_id
    estado = request.args.get('estado')
    if estado:
        filtros['estado'] = estado

    obras = [
        o for o in ObraService().get_all(order_by='nombre', **filtros)
        if coincide(q, o.nombre, o.numero_obra, o.nro_expediente, o.estado)
    ]
    avances = JerarquiaService().avances_obras(obras)
    return jsonify({
        'ok': True,
        'obras': [
            dict(o.to_dict(), etiqueta=o.etiqueta, avance=avances.get(o.id, 0))
            for o in obras
        ],
    })


@obras_bp.route('/obras', methods=['POST'])
def crear():
    obra = ObraService().create(payload())
    return jsonify({'ok': True, 'obra': obra.to_dict()}), 201


@obras_bp.route('/obras/<int:id>', methods=['GET'])
def detalle(id):
    obra = ObraService().get_by_id_or_fail(id)
    tareas = TareaService().tareas_de_obra(id)
    return jsonify({
        'ok': True,
        'obra': dict(obra.to_dict(), etiqueta=obra.etiqueta),
        'breadcrumb': _breadcrumb(obra),
        'avance': calcular_avance_obra(tareas),
        'tareas': [t.to_dict() for t in tareas],
    })


@obras_bp.route('/obras/<int:id>', methods=['PUT', 'PATCH'])
def editar(id):
    obra = ObraService().update(id, payload())
    return jsonify({'ok': True, 'obra': obra.to_dict()})


@obras_bp.route('/obras/<int:obra_id>', methods=['DELETE'])
def eliminar_obra(obra_id):
    ObraService().delete(obra_id)
    return jsonify({'ok': True})


# ==== Tareas ====

@obras_bp.route('/obras/<int:id>/tareas', methods=['GET'])
def listar_tareas(id):
    """Tareas de la obra con el avance total y las listas para los desplegables"""
    q = request.args.get('q', '').strip()
    ObraService().get_by_id_or_fail(id)
    tareas = TareaService().tareas_de_obra(id)
    return jsonify({
        'ok': True,
        # El avance se calcula sobre todas las tareas, el filtro solo afecta al listado
        'avance': calcular_avance_obra(tareas),
        'tareas': [
            t.to_dict() for t in tareas
            if coincide(q, t.nombre, t.descripcion, t.estado)
        ],
        'rubros': listado_opcional(RubroService()),
        'empresas': listado_opcional(EmpresaService()),
    })


@obras_bp.route('/obras/<int:id>/tareas', methods=['POST'])
def agregar_tarea(id):
    ObraService().get_by_id_or_fail(id)
    data = dict(payload(), obra_id=id)
    tarea = TareaService().create(data)
    return jsonify({'ok': True, 'tarea': tarea.to_dict()}), 201


@obras_bp.route('/tareas/<int:tarea_id>', methods=['PUT', 'PATCH'])
def editar_tarea(tarea_id):
    data = payload()
    data.pop('obra_id', None)
    tarea = TareaService().update(tarea_id, data)
    return jsonify({'ok': True, 'tarea': tarea.to_dict()})


@obras_bp.route('/tareas/<int:tarea_id>', methods=['DELETE'])
def eliminar_tarea(tarea_id):
    TareaService().delete(tarea_id)
    return jsonify({'ok': True})


# ==== Resumen PDF ====

@obras_bp.route('/obras/<int:id>/resumen.pdf', methods=['GET'])
def resumen_pdf(id):
    nombre_archivo, contenido = generar_resumen_obra(id)
    current_app.logger.info(f"Resumen PDF de obra {id} descargado como {nombre_archivo}")

    response = make_response(contenido)
    response.headers['Content-Type'] = 'application/pdf'
    response.headers['Content-Disposition'] = f'attachment; filename={nombre_archivo}'
    return response
