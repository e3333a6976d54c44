"""
Tests for the obra summary composer (block sequence and pagination).
"""
from datetime import date
from decimal import Decimal

import pytest
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from services.base import MissingRelationException
from services.reporte_obra import (
    ANCHO_CONTENIDO,
    DATO,
    ENCABEZADO,
    FUENTE,
    INTERLINEADO,
    LIMITE_CONTENIDO,
    PARRAFO,
    SALTO_PAGINA,
    TAMANO_TEXTO,
    TITULO,
    DatosReporte,
    EscuelaReporte,
    ObraReporte,
    TareaReporte,
    ZonaReporte,
    componer_reporte_obra,
    datos_desde_obra,
    envolver_texto,
)

HOY = date(2024, 7, 3)


def _datos(tareas=None, escuela=True, zona=True, **obra):
    obra.setdefault('nombre', 'Ampliación')
    return DatosReporte(
        zona=ZonaReporte('Zona Norte') if zona else None,
        escuela=EscuelaReporte('Escuela N°1') if escuela else None,
        obra=ObraReporte(**obra),
        tareas=tareas or [],
        avance_total=0,
    )


def _textos(documento):
    return [b.texto for b in documento.bloques if b.tipo in (ENCABEZADO, DATO)]


def _saltos(documento):
    return sum(1 for b in documento.bloques if b.tipo == SALTO_PAGINA)


@pytest.mark.unit
def test_orden_de_los_bloques():
    datos = DatosReporte(
        zona=ZonaReporte('Zona Norte'),
        escuela=EscuelaReporte('Escuela N°1', direccion='Calle 1 123'),
        obra=ObraReporte(
            nombre='Ampliación', numero_obra='12', nro_expediente='EX-2024-1',
            estado='en_progreso', fecha_inicio_prevista=date(2024, 3, 1),
        ),
        tareas=[
            TareaReporte(
                nombre='Excavación', descripcion='Pozo para bases', estado='completada',
                avance=100, unidad_medida='m3', cantidad_total=Decimal('25.500'),
                presupuesto=Decimal('150000'), empresa='Constructora Sur',
                fecha_inicio_prevista='2024-03-04',
            ),
            TareaReporte(nombre='Pintura'),
        ],
        avance_total=50,
    )
    documento = componer_reporte_obra(datos, hoy=HOY)

    assert _textos(documento) == [
        TITULO,
        'Zona: Zona Norte',
        'Escuela: Escuela N°1',
        'Dirección: Calle 1 123',
        'Obra: Ampliación',
        'Número: 12',
        'Expediente: EX-2024-1',
        'Estado: en_progreso',
        'Inicio Previsto: 01/03/2024',
        'AVANCE TOTAL DE LA OBRA: 50%',
        'TAREAS (2)',
        '1. Excavación',
        'Estado: completada',
        'Avance: 100%',
        'Unidad: m3',
        'Cantidad: 0/25.5',
        'Presupuesto: $150.000',
        'Empresa: Constructora Sur',
        'Inicio Prev: 04/03/2024',
        '2. Pintura',
        'Estado: pendiente',
        'Avance: 0%',
    ]
    assert _saltos(documento) == 0
    assert documento.nombre_archivo == 'Resumen_Obra_Ampliaci_n_2024-07-03.pdf'


@pytest.mark.unit
def test_campos_ausentes_se_omiten():
    tarea = TareaReporte(nombre='Sin presupuesto', avance=20)
    documento = componer_reporte_obra(_datos([tarea]), hoy=HOY)

    etiquetas = [b.etiqueta for b in documento.bloques if b.tipo == DATO]
    assert 'Presupuesto' not in etiquetas
    assert 'Empresa' not in etiquetas
    assert 'Unidad' not in etiquetas
    assert not any(t.startswith('Dirección') for t in _textos(documento))


@pytest.mark.unit
def test_dos_saltos_de_pagina_con_descripciones_largas():
    """Cinco tareas de 96 mm: saltos antes de la 2.ª y de la 4.ª."""
    descripcion = '\n'.join(['linea'] * 20)
    tareas = [TareaReporte(nombre=f'Tarea {i}', descripcion=descripcion) for i in range(5)]
    documento = componer_reporte_obra(_datos(tareas), hoy=HOY)

    assert _saltos(documento) == 2
    assert documento.total_paginas == 3

    titulos = [b for b in documento.bloques if b.tipo == ENCABEZADO and b.texto[0].isdigit()]
    assert [b.pagina for b in titulos] == [1, 2, 2, 3, 3]


@pytest.mark.unit
def test_tarea_mas_alta_que_una_pagina_se_parte():
    descripcion = '\n'.join(['renglon'] * 70)
    documento = componer_reporte_obra(
        _datos([TareaReporte(nombre='Enorme', descripcion=descripcion)]), hoy=HOY
    )

    assert documento.total_paginas >= 2
    parrafos = [b for b in documento.bloques if b.tipo == PARRAFO]
    assert sum(len(b.lineas) for b in parrafos) == 70
    assert len({b.pagina for b in parrafos}) >= 2
    for bloque in documento.bloques:
        if bloque.tipo == SALTO_PAGINA:
            continue
        assert bloque.y <= LIMITE_CONTENIDO
        if bloque.tipo == PARRAFO:
            assert bloque.y + (len(bloque.lineas) - 1) * INTERLINEADO <= LIMITE_CONTENIDO


@pytest.mark.unit
def test_pie_en_cada_pagina():
    descripcion = '\n'.join(['linea'] * 20)
    tareas = [TareaReporte(nombre=f'T{i}', descripcion=descripcion) for i in range(5)]
    documento = componer_reporte_obra(_datos(tareas), hoy=HOY)

    assert sorted(documento.pies) == [1, 2, 3]
    assert [b.texto for b in documento.pies[2]] == ['Página 2 de 3', 'Generado el 03/07/2024']
    assert all(b.alineacion == 'centro' for pie in documento.pies.values() for b in pie)


@pytest.mark.unit
def test_obra_sin_escuela_no_se_compone():
    with pytest.raises(MissingRelationException):
        componer_reporte_obra(_datos(escuela=False), hoy=HOY)


@pytest.mark.unit
def test_escuela_sin_zona_no_se_compone():
    with pytest.raises(MissingRelationException):
        componer_reporte_obra(_datos(zona=False), hoy=HOY)


@pytest.mark.unit
def test_envolver_texto_respeta_el_ancho():
    texto = ' '.join(['palabra'] * 120) + ' ' + 'x' * 400
    lineas = envolver_texto(texto)

    assert len(lineas) > 3
    for linea in lineas:
        assert stringWidth(linea, FUENTE, TAMANO_TEXTO) <= ANCHO_CONTENIDO * mm
    assert ''.join(lineas).count('x') == 400


@pytest.mark.integration
def test_datos_desde_obra_aplica_valores_por_defecto(app, fabrica):
    zona = fabrica.zona()
    escuela = fabrica.escuela(zona, direccion='')
    obra = fabrica.obra(escuela, nombre=None)
    tarea = fabrica.tarea(obra, avance=40, nombre=None, presupuesto=0)
    tarea.estado = None

    datos = datos_desde_obra(obra, [tarea])

    assert datos.obra.nombre == 'Sin nombre'
    assert datos.escuela.direccion is None
    assert datos.avance_total == 40
    assert datos.tareas[0].nombre == 'Sin nombre'
    assert datos.tareas[0].estado == 'pendiente'
    assert datos.tareas[0].presupuesto is None


@pytest.mark.integration
def test_datos_desde_obra_sin_escuela(app, fabrica):
    obra = fabrica.obra(None)
    with pytest.raises(MissingRelationException):
        datos_desde_obra(obra, [])
