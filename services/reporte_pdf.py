"""
Resumen de Obra - Generación del PDF con reportlab
"""

import logging
from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from services.jerarquia_service import ObraService, TareaService
from services.reporte_obra import (
    componer_reporte_obra,
    datos_desde_obra,
    DATO,
    ENCABEZADO,
    LINEA,
    MARGEN_DERECHO,
    PARRAFO,
    SALTO_PAGINA,
    TITULO,
    DocumentoReporte,
)


logger = logging.getLogger('reportes')

_ALTO_HOJA = A4[1]


def _y(y_mm):
    """Convierte una coordenada vertical (mm desde arriba) a puntos reportlab"""
    return _ALTO_HOJA - y_mm * mm


def _rgb(color):
    r, g, b = color
    return r / 255.0, g / 255.0, b / 255.0


class _CanvasConPie(canvas.Canvas):
    """Canvas que difiere el cierre de páginas para dibujar el pie al final.

    El pie necesita el total de páginas, que recién se conoce cuando se
    terminó todo el contenido.
    """

    def __init__(self, *args, documento: DocumentoReporte = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._documento = documento
        self._paginas = []

    def showPage(self):
        self._paginas.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._paginas)
        for numero, estado in enumerate(self._paginas, start=1):
            self.__dict__.update(estado)
            for bloque in self._documento.pie(numero, total):
                _dibujar_texto(self, bloque)
            super().showPage()
        super().save()


def _dibujar_texto(c, bloque):
    c.setFont(bloque.fuente, bloque.tamano)
    c.setFillColorRGB(*_rgb(bloque.color))
    if bloque.alineacion == 'centro':
        c.drawCentredString(bloque.x * mm, _y(bloque.y), bloque.texto)
    else:
        c.drawString(bloque.x * mm, _y(bloque.y), bloque.texto)


def _dibujar_fondo(c, bloque):
    c.saveState()
    c.setFillColorRGB(*_rgb(bloque.fondo))
    alto = bloque.tamano * 0.5
    c.rect((bloque.x - 2) * mm, _y(bloque.y + 2.5), (MARGEN_DERECHO - bloque.x + 2) * mm,
           alto * mm, stroke=0, fill=1)
    c.restoreState()


def renderizar_pdf(documento: DocumentoReporte) -> bytes:
    """Dibuja los bloques del documento y devuelve los bytes del PDF"""
    buffer = BytesIO()
    c = _CanvasConPie(buffer, pagesize=A4, documento=documento)
    c.setTitle(TITULO)

    for bloque in documento.bloques:
        if bloque.tipo == SALTO_PAGINA:
            c.showPage()
        elif bloque.tipo == LINEA:
            c.setStrokeColorRGB(*_rgb(bloque.color))
            c.setLineWidth(0.5 * mm)
            c.line(bloque.x * mm, _y(bloque.y), bloque.x2 * mm, _y(bloque.y))
        elif bloque.tipo == PARRAFO:
            c.setFont(bloque.fuente, bloque.tamano)
            c.setFillColorRGB(*_rgb(bloque.color))
            for i, linea in enumerate(bloque.lineas):
                c.drawString(bloque.x * mm, _y(bloque.y + i * bloque.interlineado), linea)
        elif bloque.tipo in (ENCABEZADO, DATO):
            if bloque.fondo:
                _dibujar_fondo(c, bloque)
            _dibujar_texto(c, bloque)

    c.showPage()
    c.save()

    contenido = buffer.getvalue()
    logger.info(
        "Reporte %s generado (%d páginas, %d bytes)",
        documento.nombre_archivo, documento.total_paginas, len(contenido)
    )
    return contenido


def generar_resumen_obra(obra_id: int, hoy=None):
    """Carga la obra con sus tareas y devuelve ``(nombre_archivo, pdf_bytes)``.

    Raises:
        NotFoundException: si la obra no existe
        MissingRelationException: si la obra no tiene escuela o zona
    """
    obra = ObraService().get_by_id_or_fail(obra_id)
    tareas = TareaService().tareas_de_obra(obra_id)
    datos = datos_desde_obra(obra, tareas)
    documento = componer_reporte_obra(datos, hoy=hoy)
    return documento.nombre_archivo, renderizar_pdf(documento)
