# backEnd/app/models/ajuste.py

from sqlalchemy import Column, Integer, Text, Numeric, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base
from .enums import TipoAjusteEnum


class AjusteInventarioMaestro(Base):
    __tablename__ = "ajuste_inventario_maestro"

    id_ajuste = Column(Integer, primary_key=True, index=True)
    id_empleado = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    tipo_ajuste = Column(Enum(TipoAjusteEnum), nullable=False)
    motivo = Column(Text, nullable=False)
    fecha_ajuste = Column(DateTime, server_default=func.now(), nullable=False)
    fecha_modificacion = Column(DateTime, nullable=True)

    empleado = relationship("Empleado")
    detalles = relationship(
        "AjusteInventarioDetalle",
        back_populates="ajuste",
        cascade="all, delete-orphan",
        order_by="AjusteInventarioDetalle.id_detalle",
    )

    def __repr__(self):
        return f"<AjusteInventarioMaestro(id_ajuste={self.id_ajuste}, tipo='{self.tipo_ajuste}')>"


class AjusteInventarioDetalle(Base):
    """
    Línea de ajuste. Guarda exactamente lo que se aplicó para poder revertirlo:
    cantidad con signo (ENTRADA +, SALIDA -, REVALORIZACION 0) y el lote afectado.
    """
    __tablename__ = "ajuste_inventario_detalle"

    id_detalle = Column(Integer, primary_key=True, index=True)
    id_ajuste = Column(Integer, ForeignKey('ajuste_inventario_maestro.id_ajuste', ondelete='CASCADE'), nullable=False)
    id_refaccion = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=True)
    id_insumo = Column(Integer, ForeignKey('insumo.id_insumo'), nullable=True)
    id_lote_refaccion = Column(Integer, ForeignKey('lote_refaccion.id_lote', ondelete='SET NULL'), nullable=True)
    cantidad = Column(Numeric(12, 2), default=0, nullable=False)
    costo_ajuste = Column(Numeric(12, 4), default=0, nullable=False)

    __table_args__ = (
        CheckConstraint(
            '(id_refaccion IS NULL) <> (id_insumo IS NULL)',
            name='chk_ajuste_detalle_un_solo_item',
        ),
    )

    ajuste = relationship("AjusteInventarioMaestro", back_populates="detalles")
    refaccion = relationship("Refaccion")
    insumo = relationship("Insumo")
