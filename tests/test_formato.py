"""
Tests for formatting helpers.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from utils import parse_fecha, safe_decimal
from utils.formato import (
    formatear_fecha,
    formatear_moneda,
    formatear_numero,
    nombre_archivo_reporte,
    nombre_seguro,
)


@pytest.mark.unit
@pytest.mark.parametrize('valor, esperado', [
    ('2024-03-05', '05/03/2024'),
    ('2024-03-05T10:30:00Z', '05/03/2024'),
    ('2024-3-5', '05/03/2024'),
    (date(2024, 12, 1), '01/12/2024'),
    (datetime(2023, 1, 9, 8, 0), '09/01/2023'),
    (None, ''),
])
def test_formatear_fecha(valor, esperado):
    assert formatear_fecha(valor) == esperado


@pytest.mark.unit
def test_fecha_invalida_devuelve_el_texto_original():
    assert formatear_fecha('no es fecha') == 'no es fecha'
    assert formatear_fecha('2024-13-45') == '2024-13-45'


@pytest.mark.unit
@pytest.mark.parametrize('valor, esperado', [
    (1234567, '$1.234.567'),
    (Decimal('1500.50'), '$1.500,5'),
    (Decimal('999.99'), '$999,99'),
    (0, '$0'),
    (None, '$0'),
])
def test_formatear_moneda(valor, esperado):
    assert formatear_moneda(valor) == esperado


@pytest.mark.unit
def test_formatear_numero_negativo_y_valor_invalido():
    assert formatear_numero(-2500) == '-2.500'
    assert formatear_numero('abc') == 'abc'


@pytest.mark.unit
def test_nombre_seguro_reemplaza_uno_a_uno():
    assert nombre_seguro('Escuela N°12 / Ampliación') == 'Escuela_N_12___Ampliaci_n'


@pytest.mark.unit
def test_nombre_archivo_reporte():
    nombre = nombre_archivo_reporte('Escuela N°12 / Ampliación', date(2024, 7, 3))
    assert nombre == 'Resumen_Obra_Escuela_N_12___Ampliaci_n_2024-07-03.pdf'


@pytest.mark.unit
def test_parse_fecha():
    assert parse_fecha('2024-02-29') == date(2024, 2, 29)
    assert parse_fecha('') is None
    assert parse_fecha(datetime(2024, 1, 2, 3, 4)) == date(2024, 1, 2)
    with pytest.raises(ValueError):
        parse_fecha('29/02/2024')


@pytest.mark.unit
def test_safe_decimal():
    assert safe_decimal('12.5') == Decimal('12.5')
    assert safe_decimal('x', default=Decimal('0')) == Decimal('0')
    assert safe_decimal(None) is None
