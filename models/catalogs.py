"""Catálogos auxiliares: rubros, empresas contratistas e inspectores"""
from extensions import db


class Rubro(db.Model):
    __tablename__ = 'rubros'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(150), nullable=False)

    tareas = db.relationship('Tarea', back_populates='rubro', lazy='dynamic')

    def __repr__(self):
        return f'<Rubro {self.nombre}>'

    def to_dict(self):
        return {'id': self.id, 'nombre': self.nombre}


class Empresa(db.Model):
    __tablename__ = 'empresas'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(200), nullable=False)
    cuit = db.Column(db.String(20))
    telefono = db.Column(db.String(50))
    email = db.Column(db.String(120))
    direccion = db.Column(db.String(300))
    rubro_principal = db.Column(db.String(150))

    tareas = db.relationship('Tarea', back_populates='empresa', lazy='dynamic')

    def __repr__(self):
        return f'<Empresa {self.nombre}>'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'cuit': self.cuit,
            'telefono': self.telefono,
            'email': self.email,
            'direccion': self.direccion,
            'rubro_principal': self.rubro_principal,
        }


class Inspector(db.Model):
    __tablename__ = 'inspectores'

    ROLES = ('inspector', 'jefe')

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120))
    telefono = db.Column(db.String(50))
    rol = db.Column(db.String(20), nullable=False, default='inspector')

    def __repr__(self):
        return f'<Inspector {self.nombre} ({self.rol})>'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'email': self.email,
            'telefono': self.telefono,
            'rol': self.rol,
        }
