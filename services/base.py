"""
Base Service Class
==================
Clase base para todos los servicios del sistema.
Proporciona el acceso CRUD al almacenamiento y las excepciones comunes.
"""

from typing import TypeVar, Generic, Type, Optional, List, Any, Dict, Iterable
from flask import current_app, has_app_context
from extensions import db
from sqlalchemy.exc import SQLAlchemyError


T = TypeVar('T')


class ServiceException(Exception):
    """Excepción base para errores de servicios"""
    def __init__(self, message: str, code: str = 'SERVICE_ERROR', details: Optional[dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(ServiceException):
    """Excepción para errores de validación"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, code='VALIDATION_ERROR', details=details)


class NotFoundException(ServiceException):
    """Excepción cuando no se encuentra un recurso"""
    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} con id {identifier} no encontrado"
        super().__init__(message, code='NOT_FOUND', details={'resource': resource, 'id': identifier})


class MissingRelationException(ServiceException):
    """La cadena Obra → Escuela → Zona está incompleta"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, code='MISSING_RELATION', details=details)


class BaseService(Generic[T]):
    """
    Servicio base con operaciones CRUD comunes.

    Los servicios específicos deben heredar de esta clase y definir:
    - model_class: La clase del modelo SQLAlchemy
    - editable_fields: Campos aceptados en create/update
    """

    model_class: Type[T] = None
    editable_fields: tuple = ()
    # Relaciones que deben estar vacías para poder eliminar
    protected_relations: tuple = ()

    def __init__(self):
        if self.model_class is None:
            raise NotImplementedError("model_class debe estar definido en la subclase")

    # ===== Read Operations =====

    def get_by_id(self, id: int) -> Optional[T]:
        """Obtiene un registro por ID"""
        try:
            return db.session.get(self.model_class, id)
        except SQLAlchemyError as e:
            self._log_error(f"Error reading {self.model_class.__name__} {id}: {str(e)}")
            raise ServiceException(f"Error al leer {self.model_class.__name__}: {str(e)}")

    def get_by_id_or_fail(self, id: int) -> T:
        """Obtiene un registro por ID o lanza excepción"""
        instance = self.get_by_id(id)
        if not instance:
            raise NotFoundException(self.model_class.__name__, id)
        return instance

    def get_all(self, order_by: Optional[str] = None, in_filters: Optional[Dict[str, Iterable]] = None,
                **filters) -> List[T]:
        """Obtiene registros con filtros de igualdad, de inclusión y orden opcional"""
        query = self.model_class.query
        if filters:
            query = query.filter_by(**filters)
        for field, values in (in_filters or {}).items():
            values = list(values)
            if not values:
                return []
            query = query.filter(getattr(self.model_class, field).in_(values))
        if order_by:
            query = query.order_by(getattr(self.model_class, order_by))
        try:
            return query.all()
        except SQLAlchemyError as e:
            self._log_error(f"Error listing {self.model_class.__name__}: {str(e)}")
            raise ServiceException(f"Error al listar {self.model_class.__name__}: {str(e)}")

    def count(self, **filters) -> int:
        """Cuenta registros con filtros opcionales"""
        query = self.model_class.query
        if filters:
            query = query.filter_by(**filters)
        return query.count()

    # ===== Write Operations =====

    def validate(self, data: Dict[str, Any], instance: Optional[T] = None) -> Dict[str, Any]:
        """Normaliza y valida los datos de entrada. Las subclases la extienden."""
        return {key: value for key, value in data.items() if key in self.editable_fields}

    def create(self, data: Dict[str, Any]) -> T:
        """Crea un nuevo registro"""
        values = self.validate(data)
        try:
            instance = self.model_class(**values)
            db.session.add(instance)
            db.session.commit()
            self._log_info(f"Created {self.model_class.__name__} with id {instance.id}")
            return instance
        except SQLAlchemyError as e:
            db.session.rollback()
            self._log_error(f"Error creating {self.model_class.__name__}: {str(e)}")
            raise ServiceException(f"Error al crear {self.model_class.__name__}: {str(e)}")

    def update(self, id: int, data: Dict[str, Any]) -> T:
        """Actualiza un registro existente"""
        instance = self.get_by_id_or_fail(id)
        values = self.validate(data, instance=instance)
        try:
            for key, value in values.items():
                setattr(instance, key, value)
            db.session.commit()
            self._log_info(f"Updated {self.model_class.__name__} with id {id}")
            return instance
        except SQLAlchemyError as e:
            db.session.rollback()
            self._log_error(f"Error updating {self.model_class.__name__}: {str(e)}")
            raise ServiceException(f"Error al actualizar {self.model_class.__name__}: {str(e)}")

    def delete(self, id: int) -> bool:
        """Elimina un registro"""
        instance = self.get_by_id_or_fail(id)
        for relation in self.protected_relations:
            if getattr(instance, relation).count():
                self._log_warning(f"Refused to delete {self.model_class.__name__} {id}: has {relation}")
                raise ValidationException(
                    f"No se puede eliminar {self.model_class.__name__} {id}: tiene {relation} asociadas",
                    details={"relation": relation}
                )
        try:
            db.session.delete(instance)
            db.session.commit()
            self._log_info(f"Deleted {self.model_class.__name__} with id {id}")
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            self._log_error(f"Error deleting {self.model_class.__name__}: {str(e)}")
            raise ServiceException(f"Error al eliminar {self.model_class.__name__}: {str(e)}")

    # ===== Validation Helpers =====

    def _require(self, values: Dict[str, Any], instance: Optional[T], *fields: str):
        missing = []
        for field in fields:
            value = values.get(field, getattr(instance, field, None) if instance else None)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)
        if missing:
            raise ValidationException(
                f"Campos requeridos faltantes: {', '.join(missing)}",
                details={'missing_fields': missing}
            )

    def _check_choice(self, values: Dict[str, Any], field: str, choices: Iterable[str]):
        if field in values and values[field] is not None and values[field] not in choices:
            raise ValidationException(
                f"{field} inválido. Debe ser uno de: {', '.join(choices)}"
            )

    # ===== Logging Helpers =====

    def _log_info(self, message: str):
        """Log de información"""
        if has_app_context():
            current_app.logger.info(f"[{self.__class__.__name__}] {message}")

    def _log_error(self, message: str):
        """Log de error"""
        if has_app_context():
            current_app.logger.error(f"[{self.__class__.__name__}] {message}")

    def _log_warning(self, message: str):
        """Log de advertencia"""
        if has_app_context():
            current_app.logger.warning(f"[{self.__class__.__name__}] {message}")
