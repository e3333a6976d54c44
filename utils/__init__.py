"""
Utils package
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from utils.formato import (
    formatear_fecha,
    formatear_moneda,
    formatear_numero,
    nombre_archivo_reporte,
    nombre_seguro,
)


def safe_decimal(value, default=None):
    """Convierte a Decimal de forma segura

    Args:
        value: Valor a convertir
        default: Valor por defecto si falla la conversión

    Returns:
        Decimal: Valor convertido o default
    """
    try:
        if value is None or value == '':
            return default
        result = Decimal(str(value))
        return result if result.is_finite() else default
    except (ValueError, InvalidOperation, TypeError):
        return default


def parse_fecha(value):
    """Convierte 'YYYY-MM-DD' (o date/datetime) a date; None si viene vacío.

    Raises:
        ValueError: si la cadena no es una fecha ISO válida
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()


__all__ = [
    'formatear_fecha',
    'formatear_moneda',
    'formatear_numero',
    'nombre_archivo_reporte',
    'nombre_seguro',
    'parse_fecha',
    'safe_decimal',
]
