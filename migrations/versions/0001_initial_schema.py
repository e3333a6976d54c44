"""Initial database schema: jerarquía de obras y catálogos."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'zonas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_zonas'),
    )
    op.create_table(
        'rubros',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_rubros'),
    )
    op.create_table(
        'empresas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=200), nullable=False),
        sa.Column('cuit', sa.String(length=20), nullable=True),
        sa.Column('telefono', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('direccion', sa.String(length=300), nullable=True),
        sa.Column('rubro_principal', sa.String(length=150), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_empresas'),
    )
    op.create_table(
        'inspectores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('telefono', sa.String(length=50), nullable=True),
        sa.Column('rol', sa.String(length=20), nullable=False, server_default='inspector'),
        sa.PrimaryKeyConstraint('id', name='pk_inspectores'),
    )
    op.create_table(
        'escuelas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=200), nullable=False),
        sa.Column('direccion', sa.String(length=300), nullable=True),
        sa.Column('zona_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['zona_id'], ['zonas.id'], name='fk_escuelas_zona_id_zonas'),
        sa.PrimaryKeyConstraint('id', name='pk_escuelas'),
    )
    op.create_index('ix_escuelas_zona_id', 'escuelas', ['zona_id'])

    op.create_table(
        'obras',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=200), nullable=True),
        sa.Column('numero_obra', sa.String(length=50), nullable=True),
        sa.Column('nro_expediente', sa.String(length=80), nullable=True),
        sa.Column('estado', sa.String(length=20), nullable=False, server_default='planificada'),
        sa.Column('fecha_inicio_prevista', sa.Date(), nullable=True),
        sa.Column('fecha_fin_prevista', sa.Date(), nullable=True),
        sa.Column('fecha_inicio_real', sa.Date(), nullable=True),
        sa.Column('fecha_fin_real', sa.Date(), nullable=True),
        sa.Column('escuela_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['escuela_id'], ['escuelas.id'], name='fk_obras_escuela_id_escuelas'),
        sa.PrimaryKeyConstraint('id', name='pk_obras'),
    )
    op.create_index('ix_obras_escuela_id', 'obras', ['escuela_id'])

    op.create_table(
        'tareas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('obra_id', sa.Integer(), nullable=False),
        sa.Column('rubro_id', sa.Integer(), nullable=False),
        sa.Column('empresa_id', sa.Integer(), nullable=True),
        sa.Column('nombre', sa.String(length=200), nullable=True),
        sa.Column('descripcion', sa.Text(), nullable=False, server_default=''),
        sa.Column('unidad_medida', sa.String(length=30), nullable=True),
        sa.Column('cantidad_total', sa.Numeric(14, 3), nullable=True),
        sa.Column('cantidad_inicial', sa.Numeric(14, 3), nullable=True),
        sa.Column('presupuesto', sa.Numeric(15, 2), nullable=True),
        sa.Column('avance_planificado_porcentaje', sa.Numeric(5, 2), nullable=True),
        sa.Column('observaciones_plan', sa.Text(), nullable=True),
        sa.Column('fecha_inicio_prevista', sa.Date(), nullable=True),
        sa.Column('fecha_fin_prevista', sa.Date(), nullable=True),
        sa.Column('fecha_inicio', sa.Date(), nullable=True),
        sa.Column('fecha_fin', sa.Date(), nullable=True),
        sa.Column('avance', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('estado', sa.String(length=20), nullable=True),
        sa.Column('prioridad', sa.String(length=30), nullable=True),
        sa.CheckConstraint('avance >= 0 AND avance <= 100', name='ck_tareas_avance_rango'),
        sa.ForeignKeyConstraint(['obra_id'], ['obras.id'], name='fk_tareas_obra_id_obras'),
        sa.ForeignKeyConstraint(['rubro_id'], ['rubros.id'], name='fk_tareas_rubro_id_rubros'),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresas.id'], name='fk_tareas_empresa_id_empresas'),
        sa.PrimaryKeyConstraint('id', name='pk_tareas'),
    )
    op.create_index('ix_tareas_obra_id', 'tareas', ['obra_id'])


def downgrade() -> None:
    op.drop_index('ix_tareas_obra_id', table_name='tareas')
    op.drop_table('tareas')
    op.drop_index('ix_obras_escuela_id', table_name='obras')
    op.drop_table('obras')
    op.drop_index('ix_escuelas_zona_id', table_name='escuelas')
    op.drop_table('escuelas')
    op.drop_table('inspectores')
    op.drop_table('empresas')
    op.drop_table('rubros')
    op.drop_table('zonas')
