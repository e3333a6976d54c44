"""
Helpers de formato para vistas y reportes.

Fechas en convención día/mes/año, montos con separador de miles argentino
y nombres de archivo seguros para descargas.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation


FORMATO_FECHA = '%d/%m/%Y'

_NO_ALFANUMERICO = re.compile(r'[^A-Za-z0-9]')


def formatear_fecha(valor):
    """Formatea una fecha como dd/mm/aaaa.

    Acepta ``date``, ``datetime``, cadenas ISO (``2024-03-05`` o
    ``2024-03-05T10:00:00Z``) o sin ceros (``2024-3-5``). Si no se puede
    interpretar devuelve el valor recibido sin modificar.
    """
    if valor is None or valor == '':
        return ''
    if isinstance(valor, (date, datetime)):
        return valor.strftime(FORMATO_FECHA)

    texto = str(valor).strip()
    if texto.endswith('Z'):
        texto = texto[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(texto).strftime(FORMATO_FECHA)
    except ValueError:
        pass
    # Fechas sin ceros a la izquierda: 2024-3-5
    try:
        return datetime.strptime(texto, '%Y-%m-%d').strftime(FORMATO_FECHA)
    except ValueError:
        return str(valor)


def formatear_numero(valor):
    """Número con separador de miles ``.`` y coma decimal, sin redondear"""
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, ValueError, TypeError):
        return str(valor)
    if not numero.is_finite():
        return str(valor)

    signo = '-' if numero < 0 else ''
    entero, _, decimales = format(abs(numero), 'f').partition('.')
    decimales = decimales.rstrip('0')
    entero = f"{int(entero):,}".replace(',', '.')
    if decimales:
        return f"{signo}{entero},{decimales}"
    return f"{signo}{entero}"


def formatear_moneda(cantidad):
    """Formatea cantidad como moneda argentina"""
    if cantidad is None:
        return "$0"
    return f"${formatear_numero(cantidad)}"


def nombre_seguro(texto):
    """Reemplaza cada caracter fuera de [A-Za-z0-9] por un guión bajo"""
    return _NO_ALFANUMERICO.sub('_', texto or '')


def nombre_archivo_reporte(nombre_obra, hoy=None):
    """Nombre del PDF de resumen: Resumen_Obra_<nombre>_<AAAA-MM-DD>.pdf"""
    hoy = hoy or date.today()
    return f"Resumen_Obra_{nombre_seguro(nombre_obra)}_{hoy.isoformat()}.pdf"
