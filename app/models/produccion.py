# backEnd/app/models/produccion.py

from sqlalchemy import Column, Integer, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class OrdenProduccion(Base):
    __tablename__ = "orden_produccion"

    id_orden = Column(Integer, primary_key=True, index=True)
    id_refaccion_producida = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False)
    id_lote_generado = Column(Integer, ForeignKey('lote_refaccion.id_lote', ondelete='SET NULL'), nullable=True)
    cantidad_producida = Column(Numeric(12, 2), nullable=False)
    costo_total_componentes = Column(Numeric(14, 4), nullable=False)
    id_empleado_responsable = Column(Integer, ForeignKey('empleado.id_empleado'), nullable=False)
    fecha_operacion = Column(DateTime, server_default=func.now(), nullable=False)
    observaciones = Column(Text, nullable=True)

    refaccion_producida = relationship("Refaccion")
    lote_generado = relationship("LoteRefaccion")
    responsable = relationship("Empleado")
