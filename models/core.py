"""Modelos de la jerarquía territorial: Zonas y Escuelas"""
from extensions import db


class Zona(db.Model):
    __tablename__ = 'zonas'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(150), nullable=False)

    escuelas = db.relationship('Escuela', back_populates='zona', lazy='dynamic')

    def __repr__(self):
        return f'<Zona {self.nombre}>'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
        }


class Escuela(db.Model):
    __tablename__ = 'escuelas'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(200), nullable=False)
    direccion = db.Column(db.String(300))
    zona_id = db.Column(db.Integer, db.ForeignKey('zonas.id'), nullable=False, index=True)

    zona = db.relationship('Zona', back_populates='escuelas')
    obras = db.relationship('Obra', back_populates='escuela', lazy='dynamic')

    def __repr__(self):
        return f'<Escuela {self.nombre}>'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'direccion': self.direccion,
            'zona_id': self.zona_id,
            'zona': self.zona.nombre if self.zona else None,
        }
