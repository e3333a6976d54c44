"""
Tests del cálculo de avance por obra, escuela y zona.
"""
from types import SimpleNamespace

import pytest

from services.avance import (
    agrupar_por,
    calcular_avance_escuela,
    calcular_avance_obra,
    calcular_avance_zona,
    emparejar,
    redondear_porcentaje,
)


def _tareas(*avances):
    return [{'avance': a} for a in avances]


def _obra(*avances):
    return (SimpleNamespace(id=None), _tareas(*avances))


@pytest.mark.unit
def test_obra_sin_tareas_es_cero():
    assert calcular_avance_obra([]) == 0


@pytest.mark.unit
def test_obra_promedio_simple():
    assert calcular_avance_obra(_tareas(10, 20, 60)) == 30


@pytest.mark.unit
def test_avance_nulo_cuenta_como_cero():
    tareas = [{'avance': 100}, {'avance': None}, {}]
    assert calcular_avance_obra(tareas) == 33


@pytest.mark.unit
def test_obra_acepta_objetos_con_atributo_avance():
    tareas = [SimpleNamespace(avance=50), SimpleNamespace(avance=100)]
    assert calcular_avance_obra(tareas) == 75


@pytest.mark.unit
def test_escuela_es_promedio_de_promedios():
    """Una obra al 100% con 1 tarea y otra al 0% con 10 tareas dan 50%."""
    obras = [_obra(100), _obra(*([0] * 10))]
    assert calcular_avance_escuela(obras) == 50


@pytest.mark.unit
def test_obra_sin_tareas_aporta_cero_a_la_escuela():
    obras = [_obra(80), _obra()]
    assert calcular_avance_escuela(obras) == 40


@pytest.mark.unit
def test_escuela_sin_obras_es_cero():
    assert calcular_avance_escuela([]) == 0


@pytest.mark.unit
def test_zona_promedia_sus_escuelas():
    escuelas = [
        ('a', [_obra(100)]),
        ('b', [_obra(0)]),
        ('c', [_obra(50)]),
    ]
    assert calcular_avance_zona(escuelas) == 50


@pytest.mark.unit
def test_zona_sin_escuelas_es_cero():
    assert calcular_avance_zona([]) == 0


@pytest.mark.unit
def test_zona_usa_promedios_intermedios_sin_redondear():
    """Escuelas en 33.5 y 33 promedian 33.25; redondeando antes daría 34."""
    escuelas = [
        ('a', [_obra(33, 34)]),
        ('b', [_obra(33)]),
    ]
    assert calcular_avance_zona(escuelas) == 33


@pytest.mark.unit
def test_recalcular_es_idempotente():
    escuelas = [('a', [_obra(10, 95), _obra()]), ('b', [_obra(70)])]
    assert calcular_avance_zona(escuelas) == calcular_avance_zona(escuelas)


@pytest.mark.unit
@pytest.mark.parametrize('avances, esperado', [
    ((33, 33, 34), 33),
    ((33, 34), 34),
    ((32, 33), 33),
    ((0, 1), 1),
    ((99, 100), 100),
])
def test_redondeo_mitad_hacia_arriba(avances, esperado):
    assert calcular_avance_obra(_tareas(*avances)) == esperado


@pytest.mark.unit
def test_redondear_porcentaje_valor_invalido():
    assert redondear_porcentaje(float('nan')) == 0


@pytest.mark.unit
def test_agrupar_por_descarta_claves_nulas():
    filas = [
        {'obra_id': 1, 'avance': 10},
        {'obra_id': None, 'avance': 90},
        {'obra_id': 2, 'avance': 20},
        {'obra_id': 1, 'avance': 30},
    ]
    grupos = agrupar_por(filas, 'obra_id')
    assert set(grupos) == {1, 2}
    assert [f['avance'] for f in grupos[1]] == [10, 30]


@pytest.mark.unit
def test_emparejar_ignora_hijos_huerfanos():
    padres = [SimpleNamespace(id=1), SimpleNamespace(id=2)]
    hijos = {1: ['x'], 99: ['huerfano']}
    pares = emparejar(padres, hijos)
    assert [h for _p, h in pares] == [['x'], []]
