"""Modelos de Obras y Tareas"""
from extensions import db


ESTADOS_OBRA = ('planificada', 'en_progreso', 'finalizada', 'suspendida', 'pausada', 'cancelada')
ESTADOS_TAREA = ('pendiente', 'en_progreso', 'bloqueada', 'completada')


def _iso(valor):
    return valor.isoformat() if valor else None


def _num(valor):
    return float(valor) if valor is not None else None


class Obra(db.Model):
    __tablename__ = 'obras'

    id = db.Column(db.Integer, primary_key=True)
    nombre = db.Column(db.String(200))
    numero_obra = db.Column(db.String(50))
    nro_expediente = db.Column(db.String(80))
    estado = db.Column(db.String(20), nullable=False, default='planificada')
    fecha_inicio_prevista = db.Column(db.Date)
    fecha_fin_prevista = db.Column(db.Date)
    fecha_inicio_real = db.Column(db.Date)
    fecha_fin_real = db.Column(db.Date)
    # Una obra puede quedar sin escuela
    escuela_id = db.Column(db.Integer, db.ForeignKey('escuelas.id'), nullable=True, index=True)

    escuela = db.relationship('Escuela', back_populates='obras')
    tareas = db.relationship('Tarea', back_populates='obra', cascade='all, delete-orphan',
                             lazy='dynamic', order_by='Tarea.nombre')

    def __repr__(self):
        return f'<Obra {self.nombre}>'

    @property
    def etiqueta(self):
        """Nombre visible de la obra (cae al número si no tiene nombre)"""
        if self.nombre:
            return self.nombre
        if self.numero_obra:
            return f'Obra {self.numero_obra}'
        return 'Sin nombre'

    def to_dict(self):
        return {
            'id': self.id,
            'nombre': self.nombre,
            'numero_obra': self.numero_obra,
            'nro_expediente': self.nro_expediente,
            'estado': self.estado,
            'fecha_inicio_prevista': _iso(self.fecha_inicio_prevista),
            'fecha_fin_prevista': _iso(self.fecha_fin_prevista),
            'fecha_inicio_real': _iso(self.fecha_inicio_real),
            'fecha_fin_real': _iso(self.fecha_fin_real),
            'escuela_id': self.escuela_id,
        }


class Tarea(db.Model):
    __tablename__ = 'tareas'

    id = db.Column(db.Integer, primary_key=True)
    obra_id = db.Column(db.Integer, db.ForeignKey('obras.id'), nullable=False, index=True)
    rubro_id = db.Column(db.Integer, db.ForeignKey('rubros.id'), nullable=False)
    empresa_id = db.Column(db.Integer, db.ForeignKey('empresas.id'), nullable=True)
    nombre = db.Column(db.String(200))
    descripcion = db.Column(db.Text, nullable=False, default='')
    unidad_medida = db.Column(db.String(30))
    cantidad_total = db.Column(db.Numeric(14, 3))
    cantidad_inicial = db.Column(db.Numeric(14, 3))
    presupuesto = db.Column(db.Numeric(15, 2))
    avance_planificado_porcentaje = db.Column(db.Numeric(5, 2))
    observaciones_plan = db.Column(db.Text)
    fecha_inicio_prevista = db.Column(db.Date)
    fecha_fin_prevista = db.Column(db.Date)
    fecha_inicio = db.Column(db.Date)
    fecha_fin = db.Column(db.Date)
    avance = db.Column(db.Numeric(5, 2), nullable=False, default=0)  # 0-100
    estado = db.Column(db.String(20))  # pendiente, en_progreso, bloqueada, completada
    prioridad = db.Column(db.String(30))

    obra = db.relationship('Obra', back_populates='tareas')
    rubro = db.relationship('Rubro', back_populates='tareas')
    empresa = db.relationship('Empresa', back_populates='tareas')

    __table_args__ = (
        db.CheckConstraint('avance >= 0 AND avance <= 100', name='avance_rango'),
    )

    def __repr__(self):
        return f'<Tarea {self.nombre or self.id} ({self.avance}%)>'

    def to_dict(self):
        return {
            'id': self.id,
            'obra_id': self.obra_id,
            'rubro_id': self.rubro_id,
            'rubro': self.rubro.nombre if self.rubro else None,
            'empresa_id': self.empresa_id,
            'empresa': self.empresa.nombre if self.empresa else None,
            'nombre': self.nombre,
            'descripcion': self.descripcion,
            'unidad_medida': self.unidad_medida,
            'cantidad_total': _num(self.cantidad_total),
            'cantidad_inicial': _num(self.cantidad_inicial),
            'presupuesto': _num(self.presupuesto),
            'avance_planificado_porcentaje': _num(self.avance_planificado_porcentaje),
            'observaciones_plan': self.observaciones_plan,
            'fecha_inicio_prevista': _iso(self.fecha_inicio_prevista),
            'fecha_fin_prevista': _iso(self.fecha_fin_prevista),
            'fecha_inicio': _iso(self.fecha_inicio),
            'fecha_fin': _iso(self.fecha_fin),
            'avance': _num(self.avance),
            'estado': self.estado,
            'prioridad': self.prioridad,
        }
