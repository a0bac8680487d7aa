# backEnd/app/models/salida.py

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import TipoSalidaEnum


class SalidaAlmacen(Base):
    __tablename__ = "salida_almacen"

    id_salida = Column(Integer, primary_key=True, index=True)
    tipo_salida = Column(Enum(TipoSalidaEnum), default=TipoSalidaEnum.mantenimiento, nullable=False)
    # El catálogo de autobuses vive fuera de este servicio
    id_autobus = Column(Integer, nullable=True)
    kilometraje_autobus = Column(Integer, nullable=True)
    solicitado_por_id = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    observaciones = Column(Text, nullable=True)
    fecha_operacion = Column(DateTime, server_default=func.now(), nullable=False)

    solicitado_por = relationship("Empleado")
    detalles_refaccion = relationship("DetalleSalida", back_populates="salida", cascade="all, delete-orphan")
    detalles_insumo = relationship("DetalleSalidaInsumo", back_populates="salida", cascade="all, delete-orphan")


class DetalleSalida(Base):
    """Una línea por lote tocado; costo_unitario es el costo del lote al despachar."""
    __tablename__ = "detalle_salida"

    id_detalle_salida = Column(Integer, primary_key=True, index=True)
    id_salida = Column(Integer, ForeignKey('salida_almacen.id_salida', ondelete='CASCADE'), nullable=False)
    id_refaccion = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False)
    id_lote = Column(Integer, ForeignKey('lote_refaccion.id_lote'), nullable=False)
    cantidad_despachada = Column(Numeric(12, 2), nullable=False)
    costo_unitario = Column(Numeric(12, 4), nullable=False)

    salida = relationship("SalidaAlmacen", back_populates="detalles_refaccion")
    refaccion = relationship("Refaccion")
    lote = relationship("LoteRefaccion")


class DetalleSalidaInsumo(Base):
    __tablename__ = "detalle_salida_insumo"

    id_detalle_salida_insumo = Column(Integer, primary_key=True, index=True)
    id_salida = Column(Integer, ForeignKey('salida_almacen.id_salida', ondelete='CASCADE'), nullable=False)
    id_insumo = Column(Integer, ForeignKey('insumo.id_insumo'), nullable=False)
    cantidad_usada = Column(Numeric(12, 2), nullable=False)
    costo_al_momento = Column(Numeric(12, 4), nullable=False) # Foto del promedio al despachar

    salida = relationship("SalidaAlmacen", back_populates="detalles_insumo")
    insumo = relationship("Insumo")
