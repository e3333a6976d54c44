"""Helpers compartidos por los blueprints"""

from flask import request


def payload():
    """Cuerpo del request como dict: JSON si viene, si no el formulario"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def coincide(q, *campos):
    """True si ``q`` aparece (sin distinguir mayúsculas) en alguno de los campos.

    Una búsqueda vacía coincide con todo.
    """
    if not q:
        return True
    q = q.lower()
    return any(q in str(campo).lower() for campo in campos if campo)


def int_arg(nombre):
    """Argumento entero opcional del query string"""
    return request.args.get(nombre, type=int)
