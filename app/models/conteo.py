# backEnd/app/models/conteo.py

from sqlalchemy import Column, Integer, Text, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import EstadoConteoEnum


class ConteoInventarioMaestro(Base):
    __tablename__ = "conteo_inventario_maestro"

    id_conteo = Column(Integer, primary_key=True, index=True)
    id_empleado = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    fecha_conteo = Column(DateTime, server_default=func.now(), nullable=False)
    observaciones = Column(Text, nullable=True)
    estado = Column(Enum(EstadoConteoEnum), default=EstadoConteoEnum.EN_PROCESO, nullable=False)
    fecha_aplicacion = Column(DateTime, nullable=True)

    empleado = relationship("Empleado")
    detalles_insumo = relationship("ConteoInventarioDetalleInsumo", back_populates="conteo", cascade="all, delete-orphan")
    detalles_refaccion = relationship("ConteoInventarioDetalle", back_populates="conteo", cascade="all, delete-orphan")


class ConteoInventarioDetalle(Base):
    """Conteo de refacciones; solo lo genera la carga de inventario inicial."""
    __tablename__ = "conteo_inventario_detalle"

    id_detalle = Column(Integer, primary_key=True, index=True)
    id_conteo = Column(Integer, ForeignKey('conteo_inventario_maestro.id_conteo', ondelete='CASCADE'), nullable=False)
    id_refaccion = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False)
    id_lote = Column(Integer, ForeignKey('lote_refaccion.id_lote', ondelete='SET NULL'), nullable=True)
    cantidad_contada = Column(Numeric(12, 2), nullable=False)
    costo_unitario_asignado = Column(Numeric(12, 4), nullable=False)

    conteo = relationship("ConteoInventarioMaestro", back_populates="detalles_refaccion")
    refaccion = relationship("Refaccion")


class ConteoInventarioDetalleInsumo(Base):
    __tablename__ = "conteo_inventario_detalle_insumo"

    id_detalle = Column(Integer, primary_key=True, index=True)
    id_conteo = Column(Integer, ForeignKey('conteo_inventario_maestro.id_conteo', ondelete='CASCADE'), nullable=False)
    id_insumo = Column(Integer, ForeignKey('insumo.id_insumo'), nullable=False)
    cantidad_contada = Column(Numeric(12, 2), nullable=False)
    costo_unitario_asignado = Column(Numeric(12, 4), nullable=False)

    conteo = relationship("ConteoInventarioMaestro", back_populates="detalles_insumo")
    insumo = relationship("Insumo")
