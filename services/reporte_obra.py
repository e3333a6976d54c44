"""
Resumen de Obra - Composición del reporte
=========================================
Convierte una obra resuelta (zona, escuela, obra, tareas y avance total) en
una secuencia ordenada de bloques listos para imprimir, con los saltos de
página ya decididos. No realiza I/O: el dibujo del PDF lo hace
``services.reporte_pdf``.

Las coordenadas están en milímetros con origen en la esquina superior
izquierda de una hoja A4.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from services.avance import calcular_avance_obra
from services.base import MissingRelationException
from utils.formato import formatear_fecha, formatear_moneda, nombre_archivo_reporte


TITULO = 'RESUMEN COMPLETO DE OBRA'

CENTRO_PAGINA = 105
MARGEN_IZQUIERDO = 20
MARGEN_DERECHO = 190
SANGRIA = 25
ANCHO_CONTENIDO = 170
MARGEN_SUPERIOR = 20
LIMITE_CONTENIDO = 270
Y_PIE = (285, 290)

INTERLINEADO = 4
ALTO_TITULO_TAREA = 6
ESPACIO_TRAS_DESCRIPCION = 2
ESPACIO_ENTRE_TAREAS = 6

FUENTE = 'Helvetica'
FUENTE_NEGRITA = 'Helvetica-Bold'
TAMANO_TEXTO = 10

AZUL = (0, 51, 102)
NEGRO = (0, 0, 0)
VERDE = (0, 102, 0)
GRIS = (128, 128, 128)
FONDO_AVANCE = (226, 240, 226)

# Tipos de bloque
ENCABEZADO = 'encabezado'
DATO = 'dato'
PARRAFO = 'parrafo'
LINEA = 'linea'
SALTO_PAGINA = 'salto_pagina'


@dataclass
class Bloque:
    tipo: str
    texto: str = ''
    x: float = MARGEN_IZQUIERDO
    y: float = 0
    fuente: str = FUENTE
    tamano: float = TAMANO_TEXTO
    color: Tuple[int, int, int] = NEGRO
    alineacion: str = 'izquierda'
    etiqueta: Optional[str] = None
    valor: Optional[str] = None
    lineas: List[str] = field(default_factory=list)
    interlineado: float = INTERLINEADO
    x2: Optional[float] = None
    fondo: Optional[Tuple[int, int, int]] = None
    pagina: int = 1


# ===== Datos de entrada =====

@dataclass
class ZonaReporte:
    nombre: str


@dataclass
class EscuelaReporte:
    nombre: str
    direccion: Optional[str] = None


@dataclass
class ObraReporte:
    nombre: str
    numero_obra: Optional[str] = None
    nro_expediente: Optional[str] = None
    estado: str = 'sin estado'
    fecha_inicio_prevista: Optional[object] = None
    fecha_fin_prevista: Optional[object] = None
    fecha_inicio_real: Optional[object] = None
    fecha_fin_real: Optional[object] = None


@dataclass
class TareaReporte:
    nombre: str
    descripcion: str = ''
    estado: str = 'pendiente'
    avance: float = 0
    cantidad_total: Optional[object] = None
    cantidad_inicial: Optional[object] = None
    presupuesto: Optional[object] = None
    unidad_medida: Optional[str] = None
    empresa: Optional[str] = None
    fecha_inicio_prevista: Optional[object] = None
    fecha_fin_prevista: Optional[object] = None
    fecha_inicio: Optional[object] = None
    fecha_fin: Optional[object] = None


@dataclass
class DatosReporte:
    zona: Optional[ZonaReporte]
    escuela: Optional[EscuelaReporte]
    obra: ObraReporte
    tareas: List[TareaReporte]
    avance_total: int


@dataclass
class DocumentoReporte:
    bloques: List[Bloque]
    nombre_archivo: str
    generado: date
    pies: Dict[int, List[Bloque]] = field(default_factory=dict)

    @property
    def total_paginas(self) -> int:
        return 1 + sum(1 for b in self.bloques if b.tipo == SALTO_PAGINA)

    def pie(self, pagina: int, total: Optional[int] = None) -> List[Bloque]:
        """Las dos líneas centradas del pie de la página ``pagina``"""
        total = total or self.total_paginas
        estilo = dict(x=CENTRO_PAGINA, tamano=8, color=GRIS, alineacion='centro', pagina=pagina)
        return [
            Bloque(DATO, texto=f'Página {pagina} de {total}', y=Y_PIE[0], **estilo),
            Bloque(DATO, texto=f'Generado el {formatear_fecha(self.generado)}', y=Y_PIE[1], **estilo),
        ]


# ===== Helpers =====

def _presente(valor) -> bool:
    return valor is not None and valor != ''


def _cantidad(valor) -> str:
    try:
        texto = format(Decimal(str(valor)), 'f')
    except (InvalidOperation, ValueError, TypeError):
        return str(valor)
    if '.' in texto:
        texto = texto.rstrip('0').rstrip('.')
    return texto


def _porcentaje(valor) -> str:
    return f"{_cantidad(valor if valor is not None else 0)}%"


def envolver_texto(texto: str, tamano: float = TAMANO_TEXTO, ancho: float = ANCHO_CONTENIDO,
                   fuente: str = FUENTE) -> List[str]:
    """Parte ``texto`` en líneas que entran en ``ancho`` milímetros.

    Respeta los saltos de línea explícitos y corta por caracteres las
    palabras que no entran solas en una línea.
    """
    ancho_pt = ancho * mm
    lineas = []
    for linea in simpleSplit(texto or '', fuente, tamano, ancho_pt):
        while stringWidth(linea, fuente, tamano) > ancho_pt and len(linea) > 1:
            corte = len(linea) - 1
            while corte > 1 and stringWidth(linea[:corte], fuente, tamano) > ancho_pt:
                corte -= 1
            lineas.append(linea[:corte])
            linea = linea[corte:]
        lineas.append(linea)
    return lineas


def datos_tarea(tarea: TareaReporte) -> List[Tuple[str, str]]:
    """Pares (etiqueta, valor) de una tarea; los campos ausentes se omiten"""
    datos = [
        ('Estado', tarea.estado),
        ('Avance', _porcentaje(tarea.avance)),
    ]
    if _presente(tarea.unidad_medida):
        datos.append(('Unidad', tarea.unidad_medida))
    if _presente(tarea.cantidad_total):
        inicial = tarea.cantidad_inicial if _presente(tarea.cantidad_inicial) else 0
        datos.append(('Cantidad', f"{_cantidad(inicial)}/{_cantidad(tarea.cantidad_total)}"))
    if _presente(tarea.presupuesto):
        datos.append(('Presupuesto', formatear_moneda(tarea.presupuesto)))
    if _presente(tarea.empresa):
        datos.append(('Empresa', tarea.empresa))
    for etiqueta, fecha in (
        ('Inicio Prev', tarea.fecha_inicio_prevista),
        ('Fin Prev', tarea.fecha_fin_prevista),
        ('Inicio Real', tarea.fecha_inicio),
        ('Fin Real', tarea.fecha_fin),
    ):
        if _presente(fecha):
            datos.append((etiqueta, formatear_fecha(fecha)))
    return datos


def alto_tarea(lineas_descripcion: Sequence[str], datos: Sequence) -> float:
    """Alto en mm de un bloque de tarea, sin el espacio final entre tareas"""
    return (
        ALTO_TITULO_TAREA
        + len(lineas_descripcion) * INTERLINEADO
        + ESPACIO_TRAS_DESCRIPCION
        + len(datos) * INTERLINEADO
    )


# ===== Composición =====

class _Compositor:

    def __init__(self):
        self.bloques: List[Bloque] = []
        self.y = MARGEN_SUPERIOR
        self.pagina = 1

    def agregar(self, bloque: Bloque) -> Bloque:
        bloque.pagina = self.pagina
        self.bloques.append(bloque)
        return bloque

    def salto(self):
        self.agregar(Bloque(SALTO_PAGINA))
        self.pagina += 1
        self.y = MARGEN_SUPERIOR

    def asegurar_espacio(self, alto: float):
        if self.y + alto > LIMITE_CONTENIDO and self.y > MARGEN_SUPERIOR:
            self.salto()

    def encabezado(self, texto, avance_y, **estilo):
        estilo.setdefault('fuente', FUENTE_NEGRITA)
        self.agregar(Bloque(ENCABEZADO, texto=texto, y=self.y, **estilo))
        self.y += avance_y

    def dato(self, etiqueta, valor, avance_y, **estilo):
        self.agregar(Bloque(DATO, texto=f'{etiqueta}: {valor}', etiqueta=etiqueta,
                            valor=str(valor), y=self.y, **estilo))
        self.y += avance_y

    def linea(self):
        self.agregar(Bloque(LINEA, x=MARGEN_IZQUIERDO, x2=MARGEN_DERECHO, y=self.y, color=AZUL))

    def parrafo(self, lineas: Sequence[str]):
        actuales: List[str] = []
        inicio = self.y
        for texto in lineas:
            if self.y + INTERLINEADO > LIMITE_CONTENIDO and self.y > MARGEN_SUPERIOR:
                if actuales:
                    self.agregar(Bloque(PARRAFO, x=SANGRIA, y=inicio, lineas=actuales))
                actuales = []
                self.salto()
            if not actuales:
                inicio = self.y
            actuales.append(texto)
            self.y += INTERLINEADO
        if actuales:
            self.agregar(Bloque(PARRAFO, x=SANGRIA, y=inicio, lineas=actuales))


def _validar_jerarquia(datos: DatosReporte) -> None:
    if datos.escuela is None:
        raise MissingRelationException(
            'No se puede generar el PDF: la obra no tiene escuela asociada',
            details={'obra': datos.obra.nombre if datos.obra else None},
        )
    if datos.zona is None:
        raise MissingRelationException(
            'No se puede generar el PDF: la escuela de la obra no tiene zona asociada',
            details={'escuela': datos.escuela.nombre},
        )


def componer_reporte_obra(datos: DatosReporte, hoy: Optional[date] = None) -> DocumentoReporte:
    """Arma la secuencia de bloques del resumen de una obra.

    Raises:
        MissingRelationException: si falta la escuela o la zona de la obra
    """
    _validar_jerarquia(datos)
    hoy = hoy or date.today()
    c = _Compositor()
    obra = datos.obra

    c.agregar(Bloque(ENCABEZADO, texto=TITULO, x=CENTRO_PAGINA, y=20, fuente=FUENTE_NEGRITA,
                     tamano=20, color=AZUL, alineacion='centro'))
    c.y = 25
    c.linea()
    c.y = 35

    c.encabezado(f'Zona: {datos.zona.nombre}', 10, tamano=14)
    c.encabezado(f'Escuela: {datos.escuela.nombre}', 7, tamano=14)
    if _presente(datos.escuela.direccion):
        c.dato('Dirección', datos.escuela.direccion, 10, tamano=12)

    c.encabezado(f'Obra: {obra.nombre}', 7, tamano=14)
    if _presente(obra.numero_obra):
        c.dato('Número', obra.numero_obra, 6, tamano=12)
    if _presente(obra.nro_expediente):
        c.dato('Expediente', obra.nro_expediente, 6, tamano=12)
    c.dato('Estado', obra.estado, 6, tamano=12)
    for etiqueta, fecha in (
        ('Inicio Previsto', obra.fecha_inicio_prevista),
        ('Fin Previsto', obra.fecha_fin_prevista),
        ('Inicio Real', obra.fecha_inicio_real),
        ('Fin Real', obra.fecha_fin_real),
    ):
        if _presente(fecha):
            c.dato(etiqueta, formatear_fecha(fecha), 6, tamano=12)
    c.y += 5

    c.encabezado(f'AVANCE TOTAL DE LA OBRA: {datos.avance_total}%', 10,
                 tamano=14, color=VERDE, fondo=FONDO_AVANCE)
    c.linea()
    c.y += 10
    c.encabezado(f'TAREAS ({len(datos.tareas)})', 10, tamano=16, color=AZUL)

    for indice, tarea in enumerate(datos.tareas, start=1):
        lineas = envolver_texto(tarea.descripcion) if tarea.descripcion else []
        datos_t = datos_tarea(tarea)
        c.asegurar_espacio(alto_tarea(lineas, datos_t))
        c.encabezado(f'{indice}. {tarea.nombre}', ALTO_TITULO_TAREA, tamano=12)
        c.parrafo(lineas)
        c.y += ESPACIO_TRAS_DESCRIPCION
        for etiqueta, valor in datos_t:
            c.asegurar_espacio(INTERLINEADO)
            c.dato(etiqueta, valor, INTERLINEADO, x=SANGRIA)
        c.y += ESPACIO_ENTRE_TAREAS

    documento = DocumentoReporte(
        bloques=c.bloques,
        nombre_archivo=nombre_archivo_reporte(obra.nombre, hoy),
        generado=hoy,
    )
    total = documento.total_paginas
    documento.pies = {pagina: documento.pie(pagina, total) for pagina in range(1, total + 1)}
    return documento


# ===== Mapeo desde los modelos =====

def _o_none(valor):
    return valor or None


def datos_desde_obra(obra, tareas, avance_total: Optional[int] = None) -> DatosReporte:
    """Arma ``DatosReporte`` a partir de una ``Obra`` y sus ``Tarea``.

    Raises:
        MissingRelationException: si la obra no tiene escuela o la escuela
            no tiene zona
    """
    escuela = obra.escuela
    if escuela is None:
        raise MissingRelationException(
            'No se puede generar el PDF: la obra no tiene escuela asociada',
            details={'obra_id': obra.id},
        )
    zona = escuela.zona
    if zona is None:
        raise MissingRelationException(
            'No se puede generar el PDF: la escuela de la obra no tiene zona asociada',
            details={'obra_id': obra.id, 'escuela_id': escuela.id},
        )

    tareas = list(tareas)
    if avance_total is None:
        avance_total = calcular_avance_obra(tareas)

    return DatosReporte(
        zona=ZonaReporte(nombre=zona.nombre),
        escuela=EscuelaReporte(nombre=escuela.nombre, direccion=_o_none(escuela.direccion)),
        obra=ObraReporte(
            nombre=obra.nombre or 'Sin nombre',
            numero_obra=_o_none(obra.numero_obra),
            nro_expediente=_o_none(obra.nro_expediente),
            estado=obra.estado or 'sin estado',
            fecha_inicio_prevista=obra.fecha_inicio_prevista,
            fecha_fin_prevista=obra.fecha_fin_prevista,
            fecha_inicio_real=obra.fecha_inicio_real,
            fecha_fin_real=obra.fecha_fin_real,
        ),
        tareas=[
            TareaReporte(
                nombre=t.nombre or 'Sin nombre',
                descripcion=t.descripcion or '',
                estado=t.estado or 'pendiente',
                avance=t.avance or 0,
                cantidad_total=_o_none(t.cantidad_total),
                cantidad_inicial=_o_none(t.cantidad_inicial),
                presupuesto=_o_none(t.presupuesto),
                unidad_medida=_o_none(t.unidad_medida),
                empresa=t.empresa.nombre if t.empresa else None,
                fecha_inicio_prevista=t.fecha_inicio_prevista,
                fecha_fin_prevista=t.fecha_fin_prevista,
                fecha_inicio=t.fecha_inicio,
                fecha_fin=t.fecha_fin,
            )
            for t in tareas
        ],
        avance_total=avance_total,
    )
