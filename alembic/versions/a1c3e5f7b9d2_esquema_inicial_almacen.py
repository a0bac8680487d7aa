"""Esquema inicial del almacén: lotes, insumos, ajustes, préstamos y conteos

Revision ID: a1c3e5f7b9d2
Revises: 
Create Date: 2026-10-18 10:12:31.204118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('roles',
        sa.Column('id_rol', sa.Integer(), nullable=False),
        sa.Column('nombre_rol', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id_rol'),
        sa.UniqueConstraint('nombre_rol')
    )
    op.create_index(op.f('ix_roles_id_rol'), 'roles', ['id_rol'], unique=False)

    op.create_table('empleado',
        sa.Column('id_empleado', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.Column('puesto', sa.String(length=100), nullable=True),
        sa.Column('nombre_usuario', sa.String(length=50), nullable=True),
        sa.Column('contrasena_hash', sa.String(length=255), nullable=True),
        sa.Column('id_rol', sa.Integer(), nullable=True),
        sa.Column('estado_cuenta', sa.Enum('activo', 'inactivo', name='estadocuentaenum'), nullable=False),
        sa.Column('fecha_creacion', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['id_rol'], ['roles.id_rol'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id_empleado')
    )
    op.create_index(op.f('ix_empleado_id_empleado'), 'empleado', ['id_empleado'], unique=False)
    op.create_index(op.f('ix_empleado_nombre_usuario'), 'empleado', ['nombre_usuario'], unique=True)

    op.create_table('sesiones_activas',
        sa.Column('id_sesion', sa.Integer(), nullable=False),
        sa.Column('id_usuario', sa.Integer(), nullable=False),
        sa.Column('token_jwt', sa.Text(), nullable=False),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('fecha_inicio', sa.DateTime(), nullable=False),
        sa.Column('fecha_expiracion_token', sa.DateTime(timezone=True), nullable=True),
        sa.Column('estado', sa.Enum('activo', 'cerrado', 'expirado', name='estadosesionenum'), nullable=False),
        sa.ForeignKeyConstraint(['id_usuario'], ['empleado.id_empleado'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_sesion')
    )
    op.create_index(op.f('ix_sesiones_activas_id_sesion'), 'sesiones_activas', ['id_sesion'], unique=False)

    op.create_table('proveedor',
        sa.Column('id_proveedor', sa.Integer(), nullable=False),
        sa.Column('nombre_proveedor', sa.String(length=150), nullable=False),
        sa.Column('rfc', sa.String(length=20), nullable=True),
        sa.Column('telefono', sa.String(length=30), nullable=True),
        sa.PrimaryKeyConstraint('id_proveedor')
    )
    op.create_index(op.f('ix_proveedor_id_proveedor'), 'proveedor', ['id_proveedor'], unique=False)

    op.create_table('refaccion',
        sa.Column('id_refaccion', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.Column('numero_parte', sa.String(length=80), nullable=True),
        sa.Column('categoria', sa.String(length=80), nullable=True),
        sa.Column('marca', sa.String(length=80), nullable=True),
        sa.Column('unidad_medida', sa.String(length=30), nullable=True),
        sa.Column('ubicacion_almacen', sa.String(length=80), nullable=True),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('stock_minimo', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stock_maximo', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.PrimaryKeyConstraint('id_refaccion')
    )
    op.create_index(op.f('ix_refaccion_id_refaccion'), 'refaccion', ['id_refaccion'], unique=False)

    op.create_table('refaccion_componentes',
        sa.Column('id_componente', sa.Integer(), nullable=False),
        sa.Column('id_refaccion_padre', sa.Integer(), nullable=False),
        sa.Column('id_refaccion_hijo', sa.Integer(), nullable=False),
        sa.Column('cantidad_necesaria', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.CheckConstraint('cantidad_necesaria > 0', name='chk_componente_cantidad_positiva'),
        sa.ForeignKeyConstraint(['id_refaccion_hijo'], ['refaccion.id_refaccion'], ),
        sa.ForeignKeyConstraint(['id_refaccion_padre'], ['refaccion.id_refaccion'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_componente')
    )
    op.create_index(op.f('ix_refaccion_componentes_id_componente'), 'refaccion_componentes', ['id_componente'], unique=False)

    op.create_table('insumo',
        sa.Column('id_insumo', sa.Integer(), nullable=False),
        sa.Column('nombre', sa.String(length=150), nullable=False),
        sa.Column('marca', sa.String(length=80), nullable=True),
        sa.Column('tipo_insumo', sa.String(length=80), nullable=True),
        sa.Column('unidad_medida', sa.String(length=30), nullable=True),
        sa.Column('stock_minimo', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stock_actual', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_promedio', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.CheckConstraint('stock_actual >= 0', name='chk_insumo_stock_no_negativo'),
        sa.CheckConstraint('costo_unitario_promedio >= 0', name='chk_insumo_costo_no_negativo'),
        sa.PrimaryKeyConstraint('id_insumo')
    )
    op.create_index(op.f('ix_insumo_id_insumo'), 'insumo', ['id_insumo'], unique=False)

    op.create_table('entrada_almacen',
        sa.Column('id_entrada', sa.Integer(), nullable=False),
        sa.Column('id_proveedor', sa.Integer(), nullable=True),
        sa.Column('recibido_por_id', sa.Integer(), nullable=False),
        sa.Column('factura_proveedor', sa.String(length=60), nullable=True),
        sa.Column('vale_interno', sa.String(length=60), nullable=True),
        sa.Column('razon_social', sa.String(length=150), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('fecha_operacion', sa.DateTime(), nullable=False),
        sa.Column('fecha_registro', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['id_proveedor'], ['proveedor.id_proveedor'], ),
        sa.ForeignKeyConstraint(['recibido_por_id'], ['empleado.id_empleado'], ),
        sa.PrimaryKeyConstraint('id_entrada')
    )
    op.create_index(op.f('ix_entrada_almacen_id_entrada'), 'entrada_almacen', ['id_entrada'], unique=False)

    op.create_table('detalle_entrada',
        sa.Column('id_detalle_entrada', sa.Integer(), nullable=False),
        sa.Column('id_entrada', sa.Integer(), nullable=False),
        sa.Column('id_refaccion', sa.Integer(), nullable=False),
        sa.Column('cantidad_recibida', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_subtotal', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('monto_iva_unitario', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('costo_unitario_final', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_entrada'], ['entrada_almacen.id_entrada'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_refaccion'], ['refaccion.id_refaccion'], ),
        sa.PrimaryKeyConstraint('id_detalle_entrada')
    )
    op.create_index(op.f('ix_detalle_entrada_id_detalle_entrada'), 'detalle_entrada', ['id_detalle_entrada'], unique=False)

    op.create_table('detalle_entrada_insumo',
        sa.Column('id_detalle_entrada_insumo', sa.Integer(), nullable=False),
        sa.Column('id_entrada', sa.Integer(), nullable=False),
        sa.Column('id_insumo', sa.Integer(), nullable=False),
        sa.Column('cantidad_recibida', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_subtotal', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('monto_iva_unitario', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('costo_unitario_final', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_entrada'], ['entrada_almacen.id_entrada'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_insumo'], ['insumo.id_insumo'], ),
        sa.PrimaryKeyConstraint('id_detalle_entrada_insumo')
    )
    op.create_index(op.f('ix_detalle_entrada_insumo_id_detalle_entrada_insumo'), 'detalle_entrada_insumo', ['id_detalle_entrada_insumo'], unique=False)

    op.create_table('lote_refaccion',
        sa.Column('id_lote', sa.Integer(), nullable=False),
        sa.Column('id_refaccion', sa.Integer(), nullable=False),
        sa.Column('id_detalle_entrada', sa.Integer(), nullable=True),
        sa.Column('cantidad_inicial', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('cantidad_disponible', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_subtotal', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('monto_iva_unitario', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('costo_unitario_final', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('fecha_ingreso', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('cantidad_disponible >= 0', name='chk_lote_disponible_no_negativo'),
        sa.CheckConstraint('costo_unitario_final >= 0', name='chk_lote_costo_no_negativo'),
        sa.ForeignKeyConstraint(['id_detalle_entrada'], ['detalle_entrada.id_detalle_entrada'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_refaccion'], ['refaccion.id_refaccion'], ),
        sa.PrimaryKeyConstraint('id_lote')
    )
    op.create_index(op.f('ix_lote_refaccion_id_lote'), 'lote_refaccion', ['id_lote'], unique=False)
    op.create_index(op.f('ix_lote_refaccion_id_refaccion'), 'lote_refaccion', ['id_refaccion'], unique=False)

    op.create_table('salida_almacen',
        sa.Column('id_salida', sa.Integer(), nullable=False),
        sa.Column('tipo_salida', sa.Enum('mantenimiento', 'consumo_interno', 'traslado', name='tiposalidaenum'), nullable=False),
        sa.Column('id_autobus', sa.Integer(), nullable=True),
        sa.Column('kilometraje_autobus', sa.Integer(), nullable=True),
        sa.Column('solicitado_por_id', sa.Integer(), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('fecha_operacion', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['solicitado_por_id'], ['empleado.id_empleado'], ),
        sa.PrimaryKeyConstraint('id_salida')
    )
    op.create_index(op.f('ix_salida_almacen_id_salida'), 'salida_almacen', ['id_salida'], unique=False)

    op.create_table('detalle_salida',
        sa.Column('id_detalle_salida', sa.Integer(), nullable=False),
        sa.Column('id_salida', sa.Integer(), nullable=False),
        sa.Column('id_refaccion', sa.Integer(), nullable=False),
        sa.Column('id_lote', sa.Integer(), nullable=False),
        sa.Column('cantidad_despachada', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_lote'], ['lote_refaccion.id_lote'], ),
        sa.ForeignKeyConstraint(['id_refaccion'], ['refaccion.id_refaccion'], ),
        sa.ForeignKeyConstraint(['id_salida'], ['salida_almacen.id_salida'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_detalle_salida')
    )
    op.create_index(op.f('ix_detalle_salida_id_detalle_salida'), 'detalle_salida', ['id_detalle_salida'], unique=False)

    op.create_table('detalle_salida_insumo',
        sa.Column('id_detalle_salida_insumo', sa.Integer(), nullable=False),
        sa.Column('id_salida', sa.Integer(), nullable=False),
        sa.Column('id_insumo', sa.Integer(), nullable=False),
        sa.Column('cantidad_usada', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_al_momento', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_insumo'], ['insumo.id_insumo'], ),
        sa.ForeignKeyConstraint(['id_salida'], ['salida_almacen.id_salida'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_detalle_salida_insumo')
    )
    op.create_index(op.f('ix_detalle_salida_insumo_id_detalle_salida_insumo'), 'detalle_salida_insumo', ['id_detalle_salida_insumo'], unique=False)

    op.create_table('ajuste_inventario_maestro',
        sa.Column('id_ajuste', sa.Integer(), nullable=False),
        sa.Column('id_empleado', sa.Integer(), nullable=False),
        sa.Column('tipo_ajuste', sa.Enum('ENTRADA', 'SALIDA', 'REVALORIZACION', name='tipoajusteenum'), nullable=False),
        sa.Column('motivo', sa.Text(), nullable=False),
        sa.Column('fecha_ajuste', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('fecha_modificacion', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['id_empleado'], ['empleado.id_empleado'], ),
        sa.PrimaryKeyConstraint('id_ajuste')
    )
    op.create_index(op.f('ix_ajuste_inventario_maestro_id_ajuste'), 'ajuste_inventario_maestro', ['id_ajuste'], unique=False)

    op.create_table('ajuste_inventario_detalle',
        sa.Column('id_detalle', sa.Integer(), nullable=False),
        sa.Column('id_ajuste', sa.Integer(), nullable=False),
        sa.Column('id_refaccion', sa.Integer(), nullable=True),
        sa.Column('id_insumo', sa.Integer(), nullable=True),
        sa.Column('id_lote_refaccion', sa.Integer(), nullable=True),
        sa.Column('cantidad', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_ajuste', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.CheckConstraint('(id_refaccion IS NULL) <> (id_insumo IS NULL)', name='chk_ajuste_detalle_un_solo_item'),
        sa.ForeignKeyConstraint(['id_ajuste'], ['ajuste_inventario_maestro.id_ajuste'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_insumo'], ['insumo.id_insumo'], ),
        sa.ForeignKeyConstraint(['id_lote_refaccion'], ['lote_refaccion.id_lote'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_refaccion'], ['refaccion.id_refaccion'], ),
        sa.PrimaryKeyConstraint('id_detalle')
    )
    op.create_index(op.f('ix_ajuste_inventario_detalle_id_detalle'), 'ajuste_inventario_detalle', ['id_detalle'], unique=False)

    op.create_table('conteo_inventario_maestro',
        sa.Column('id_conteo', sa.Integer(), nullable=False),
        sa.Column('id_empleado', sa.Integer(), nullable=False),
        sa.Column('fecha_conteo', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('estado', sa.Enum('EN_PROCESO', 'COMPLETADO', 'APLICADO', name='estadoconteoenum'), nullable=False),
        sa.Column('fecha_aplicacion', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['id_empleado'], ['empleado.id_empleado'], ),
        sa.PrimaryKeyConstraint('id_conteo')
    )
    op.create_index(op.f('ix_conteo_inventario_maestro_id_conteo'), 'conteo_inventario_maestro', ['id_conteo'], unique=False)

    op.create_table('conteo_inventario_detalle',
        sa.Column('id_detalle', sa.Integer(), nullable=False),
        sa.Column('id_conteo', sa.Integer(), nullable=False),
        sa.Column('id_refaccion', sa.Integer(), nullable=False),
        sa.Column('id_lote', sa.Integer(), nullable=True),
        sa.Column('cantidad_contada', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_asignado', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_conteo'], ['conteo_inventario_maestro.id_conteo'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_lote'], ['lote_refaccion.id_lote'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_refaccion'], ['refaccion.id_refaccion'], ),
        sa.PrimaryKeyConstraint('id_detalle')
    )
    op.create_index(op.f('ix_conteo_inventario_detalle_id_detalle'), 'conteo_inventario_detalle', ['id_detalle'], unique=False)

    op.create_table('conteo_inventario_detalle_insumo',
        sa.Column('id_detalle', sa.Integer(), nullable=False),
        sa.Column('id_conteo', sa.Integer(), nullable=False),
        sa.Column('id_insumo', sa.Integer(), nullable=False),
        sa.Column('cantidad_contada', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_unitario_asignado', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['id_conteo'], ['conteo_inventario_maestro.id_conteo'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_insumo'], ['insumo.id_insumo'], ),
        sa.PrimaryKeyConstraint('id_detalle')
    )
    op.create_index(op.f('ix_conteo_inventario_detalle_insumo_id_detalle'), 'conteo_inventario_detalle_insumo', ['id_detalle'], unique=False)

    op.create_table('prestamos',
        sa.Column('id_prestamo', sa.Integer(), nullable=False),
        sa.Column('nombre_solicitante_manual', sa.String(length=150), nullable=True),
        sa.Column('id_empleado_solicitante', sa.Integer(), nullable=True),
        sa.Column('id_empleado_almacen', sa.Integer(), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('estado', sa.Enum('ACTIVO', 'CERRADO', name='estadoprestamoenum'), nullable=False),
        sa.Column('fecha_prestamo', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['id_empleado_almacen'], ['empleado.id_empleado'], ),
        sa.ForeignKeyConstraint(['id_empleado_solicitante'], ['empleado.id_empleado'], ),
        sa.PrimaryKeyConstraint('id_prestamo')
    )
    op.create_index(op.f('ix_prestamos_id_prestamo'), 'prestamos', ['id_prestamo'], unique=False)

    op.create_table('detalle_prestamo',
        sa.Column('id_detalle_prestamo', sa.Integer(), nullable=False),
        sa.Column('id_prestamo', sa.Integer(), nullable=False),
        sa.Column('tipo_item', sa.Enum('insumo', 'refaccion', name='tipoitemenum'), nullable=False),
        sa.Column('id_item', sa.Integer(), nullable=False),
        sa.Column('id_lote_origen', sa.Integer(), nullable=True),
        sa.Column('cantidad_prestada', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('cantidad_devuelta', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('estado_devolucion', sa.Enum('BUENO', 'ROTO', 'VACIO', 'PERDIDO', name='estadodevolucionenum'), nullable=True),
        sa.Column('fecha_devolucion', sa.DateTime(), nullable=True),
        sa.CheckConstraint('cantidad_devuelta <= cantidad_prestada', name='chk_devuelto_no_excede_prestado'),
        sa.ForeignKeyConstraint(['id_lote_origen'], ['lote_refaccion.id_lote'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_prestamo'], ['prestamos.id_prestamo'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_detalle_prestamo')
    )
    op.create_index(op.f('ix_detalle_prestamo_id_detalle_prestamo'), 'detalle_prestamo', ['id_detalle_prestamo'], unique=False)

    op.create_table('orden_produccion',
        sa.Column('id_orden', sa.Integer(), nullable=False),
        sa.Column('id_refaccion_producida', sa.Integer(), nullable=False),
        sa.Column('id_lote_generado', sa.Integer(), nullable=True),
        sa.Column('cantidad_producida', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('costo_total_componentes', sa.Numeric(precision=14, scale=4), nullable=False),
        sa.Column('id_empleado_responsable', sa.Integer(), nullable=False),
        sa.Column('fecha_operacion', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['id_empleado_responsable'], ['empleado.id_empleado'], ),
        sa.ForeignKeyConstraint(['id_lote_generado'], ['lote_refaccion.id_lote'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_refaccion_producida'], ['refaccion.id_refaccion'], ),
        sa.PrimaryKeyConstraint('id_orden')
    )
    op.create_index(op.f('ix_orden_produccion_id_orden'), 'orden_produccion', ['id_orden'], unique=False)

    op.create_table('auditoria_acciones',
        sa.Column('id_auditoria', sa.Integer(), nullable=False),
        sa.Column('id_usuario', sa.Integer(), nullable=True),
        sa.Column('tipo_accion', sa.String(length=50), nullable=False),
        sa.Column('recurso_afectado', sa.String(length=80), nullable=False),
        sa.Column('id_recurso_afectado', sa.Integer(), nullable=True),
        sa.Column('detalles_cambio', sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql'), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('fecha', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_usuario'], ['empleado.id_empleado'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id_auditoria')
    )
    op.create_index(op.f('ix_auditoria_acciones_id_auditoria'), 'auditoria_acciones', ['id_auditoria'], unique=False)
    op.create_index(op.f('ix_auditoria_acciones_tipo_accion'), 'auditoria_acciones', ['tipo_accion'], unique=False)
    op.create_index(op.f('ix_auditoria_acciones_recurso_afectado'), 'auditoria_acciones', ['recurso_afectado'], unique=False)
    op.create_index(op.f('ix_auditoria_acciones_fecha'), 'auditoria_acciones', ['fecha'], unique=False)


def downgrade() -> None:
    op.drop_table('auditoria_acciones')
    op.drop_table('orden_produccion')
    op.drop_table('detalle_prestamo')
    op.drop_table('prestamos')
    op.drop_table('conteo_inventario_detalle_insumo')
    op.drop_table('conteo_inventario_detalle')
    op.drop_table('conteo_inventario_maestro')
    op.drop_table('ajuste_inventario_detalle')
    op.drop_table('ajuste_inventario_maestro')
    op.drop_table('detalle_salida_insumo')
    op.drop_table('detalle_salida')
    op.drop_table('salida_almacen')
    op.drop_table('lote_refaccion')
    op.drop_table('detalle_entrada_insumo')
    op.drop_table('detalle_entrada')
    op.drop_table('entrada_almacen')
    op.drop_table('insumo')
    op.drop_table('refaccion_componentes')
    op.drop_table('refaccion')
    op.drop_table('proveedor')
    op.drop_table('sesiones_activas')
    op.drop_table('empleado')
    op.drop_table('roles')
    for enum_name in (
        'estadodevolucionenum', 'tipoitemenum', 'estadoprestamoenum', 'estadoconteoenum',
        'tipoajusteenum', 'tiposalidaenum', 'estadosesionenum', 'estadocuentaenum',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
