# backEnd/app/models/entrada.py

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class EntradaAlmacen(Base):
    __tablename__ = "entrada_almacen"

    id_entrada = Column(Integer, primary_key=True, index=True)
    id_proveedor = Column(Integer, ForeignKey('proveedor.id_proveedor'), nullable=True)
    recibido_por_id = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    factura_proveedor = Column(String(60), nullable=True)
    vale_interno = Column(String(60), nullable=True)
    razon_social = Column(String(150), nullable=False)
    observaciones = Column(Text, nullable=True)
    fecha_operacion = Column(DateTime, nullable=False)
    fecha_registro = Column(DateTime, server_default=func.now(), nullable=False)

    proveedor = relationship("Proveedor", back_populates="entradas")
    recibido_por = relationship("Empleado")
    detalles_refaccion = relationship("DetalleEntrada", back_populates="entrada", cascade="all, delete-orphan")
    detalles_insumo = relationship("DetalleEntradaInsumo", back_populates="entrada", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<EntradaAlmacen(id_entrada={self.id_entrada}, factura='{self.factura_proveedor}')>"


class DetalleEntrada(Base):
    """Línea de refacción recibida. Cada línea origina exactamente un lote."""
    __tablename__ = "detalle_entrada"

    id_detalle_entrada = Column(Integer, primary_key=True, index=True)
    id_entrada = Column(Integer, ForeignKey('entrada_almacen.id_entrada', ondelete='CASCADE'), nullable=False)
    id_refaccion = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False)
    cantidad_recibida = Column(Numeric(12, 2), nullable=False)
    costo_unitario_subtotal = Column(Numeric(12, 4), nullable=False)
    monto_iva_unitario = Column(Numeric(12, 4), nullable=False)
    costo_unitario_final = Column(Numeric(12, 4), nullable=False)

    entrada = relationship("EntradaAlmacen", back_populates="detalles_refaccion")
    refaccion = relationship("Refaccion")
    lote = relationship("LoteRefaccion", back_populates="detalle_entrada", uselist=False)


class DetalleEntradaInsumo(Base):
    __tablename__ = "detalle_entrada_insumo"

    id_detalle_entrada_insumo = Column(Integer, primary_key=True, index=True)
    id_entrada = Column(Integer, ForeignKey('entrada_almacen.id_entrada', ondelete='CASCADE'), nullable=False)
    id_insumo = Column(Integer, ForeignKey('insumo.id_insumo'), nullable=False)
    cantidad_recibida = Column(Numeric(12, 2), nullable=False)
    costo_unitario_subtotal = Column(Numeric(12, 4), nullable=False)
    monto_iva_unitario = Column(Numeric(12, 4), nullable=False)
    costo_unitario_final = Column(Numeric(12, 4), nullable=False)

    entrada = relationship("EntradaAlmacen", back_populates="detalles_insumo")
    insumo = relationship("Insumo")
