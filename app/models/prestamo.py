# backEnd/app/models/prestamo.py

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import EstadoPrestamoEnum, TipoItemEnum, EstadoDevolucionEnum


class Prestamo(Base):
    __tablename__ = "prestamos"

    id_prestamo = Column(Integer, primary_key=True, index=True)
    nombre_solicitante_manual = Column(String(150), nullable=True)
    id_empleado_solicitante = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=True)
    id_empleado_almacen = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    observaciones = Column(Text, nullable=True)
    estado = Column(Enum(EstadoPrestamoEnum), default=EstadoPrestamoEnum.ACTIVO, nullable=False)
    fecha_prestamo = Column(DateTime, server_default=func.now(), nullable=False)

    solicitante = relationship("Empleado", foreign_keys=[id_empleado_solicitante])
    almacenista = relationship("Empleado", foreign_keys=[id_empleado_almacen])
    detalles = relationship("DetallePrestamo", back_populates="prestamo", cascade="all, delete-orphan")

    @property
    def nombre_solicitante(self):
        if self.nombre_solicitante_manual:
            return self.nombre_solicitante_manual
        return self.solicitante.nombre if self.solicitante else "Desconocido"


class DetallePrestamo(Base):
    __tablename__ = "detalle_prestamo"

    id_detalle_prestamo = Column(Integer, primary_key=True, index=True)
    id_prestamo = Column(Integer, ForeignKey('prestamos.id_prestamo', ondelete='CASCADE'), nullable=False)
    tipo_item = Column(Enum(TipoItemEnum), nullable=False)
    id_item = Column(Integer, nullable=False)
    id_lote_origen = Column(Integer, ForeignKey('lote_refaccion.id_lote', ondelete='SET NULL'), nullable=True)
    cantidad_prestada = Column(Numeric(12, 2), nullable=False)
    cantidad_devuelta = Column(Numeric(12, 2), default=0, nullable=False)
    estado_devolucion = Column(Enum(EstadoDevolucionEnum), nullable=True) # Última disposición registrada
    fecha_devolucion = Column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint('cantidad_devuelta <= cantidad_prestada', name='chk_devuelto_no_excede_prestado'),
    )

    prestamo = relationship("Prestamo", back_populates="detalles")

    @property
    def pendiente(self):
        return self.cantidad_prestada - self.cantidad_devuelta
