"""
Avance jerárquico
=================
Cálculo del porcentaje de avance en cada nivel de la jerarquía
Zona → Escuela → Obra → Tarea a partir de los registros de tareas.

- Obra: promedio simple del ``avance`` de sus tareas.
- Escuela: promedio de los promedios de sus obras (una obra sin tareas
  aporta 0).
- Zona: promedio de los promedios de sus escuelas.

Los promedios intermedios se mantienen en punto flotante; el redondeo a
entero (mitad hacia arriba) se aplica solo al valor publicado. Ninguna
función lanza excepciones por colecciones vacías, avances nulos o claves
foráneas sin correspondencia: esos casos aportan 0.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Callable, Dict, Hashable, Iterable, List, Sequence, Tuple, Union


def _campo(fila: Any, nombre: str, default: Any = None) -> Any:
    """Lee un campo de un modelo, un ``Row`` de SQLAlchemy o un dict"""
    if isinstance(fila, dict):
        return fila.get(nombre, default)
    return getattr(fila, nombre, default)


def valor_avance(tarea: Any) -> float:
    """Avance de una tarea como float; nulo o inválido cuenta como 0"""
    valor = _campo(tarea, 'avance')
    if valor is None:
        return 0.0
    try:
        return float(valor)
    except (TypeError, ValueError):
        return 0.0


def redondear_porcentaje(valor: float) -> int:
    """Redondea al entero más cercano; los empates van hacia arriba (33.5 → 34)"""
    try:
        return int(Decimal(str(valor)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0


def _promedio(valores: Sequence[float]) -> float:
    if not valores:
        return 0.0
    return sum(valores) / len(valores)


def promedio_obra(tareas: Iterable[Any]) -> float:
    return _promedio([valor_avance(t) for t in tareas])


def promedio_escuela(obras_con_tareas: Iterable[Tuple[Any, Iterable[Any]]]) -> float:
    return _promedio([promedio_obra(tareas) for _obra, tareas in obras_con_tareas])


def promedio_zona(escuelas_con_obras: Iterable[Tuple[Any, Iterable[Tuple[Any, Iterable[Any]]]]]) -> float:
    return _promedio([promedio_escuela(obras) for _escuela, obras in escuelas_con_obras])


def calcular_avance_obra(tareas: Iterable[Any]) -> int:
    """Avance de una obra (0-100): promedio de sus tareas, 0 si no tiene"""
    return redondear_porcentaje(promedio_obra(tareas))


def calcular_avance_escuela(obras_con_tareas: Iterable[Tuple[Any, Iterable[Any]]]) -> int:
    """Avance de una escuela a partir de pares ``(obra, tareas)``"""
    return redondear_porcentaje(promedio_escuela(obras_con_tareas))


def calcular_avance_zona(escuelas_con_obras: Iterable[Tuple[Any, Iterable[Tuple[Any, Iterable[Any]]]]]) -> int:
    """Avance de una zona a partir de pares ``(escuela, [(obra, tareas), ...])``"""
    return redondear_porcentaje(promedio_zona(escuelas_con_obras))


Clave = Union[str, Callable[[Any], Hashable]]


def agrupar_por(filas: Iterable[Any], clave: Clave) -> Dict[Hashable, List[Any]]:
    """Agrupa filas por la clave foránea de su padre.

    ``clave`` es el nombre del campo (``'obra_id'``) o una función. Las filas
    con clave nula se descartan.
    """
    obtener = clave if callable(clave) else (lambda fila: _campo(fila, clave))
    grupos: Dict[Hashable, List[Any]] = defaultdict(list)
    for fila in filas:
        valor = obtener(fila)
        if valor is None:
            continue
        grupos[valor].append(fila)
    return dict(grupos)


def emparejar(padres: Iterable[Any], hijos_por_padre: Dict[Hashable, List[Any]],
              clave_padre: str = 'id') -> List[Tuple[Any, List[Any]]]:
    """Une cada padre con su lista de hijos (vacía si no tiene ninguno).

    Los hijos agrupados bajo ids que no corresponden a ningún padre quedan
    fuera del resultado.
    """
    return [(padre, hijos_por_padre.get(_campo(padre, clave_padre), [])) for padre in padres]


__all__ = [
    'agrupar_por',
    'calcular_avance_escuela',
    'calcular_avance_obra',
    'calcular_avance_zona',
    'emparejar',
    'promedio_escuela',
    'promedio_obra',
    'promedio_zona',
    'redondear_porcentaje',
    'valor_avance',
]
