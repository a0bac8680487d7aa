# backEnd/app/models/lote_refaccion.py

from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class LoteRefaccion(Base):
    __tablename__ = "lote_refaccion"

    id_lote = Column(Integer, primary_key=True, index=True)
    id_refaccion = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False, index=True)
    # Nulo cuando el lote no proviene de una entrada (ajuste, inventario inicial, producción)
    id_detalle_entrada = Column(Integer, ForeignKey('detalle_entrada.id_detalle_entrada', ondelete='SET NULL'), nullable=True)

    cantidad_inicial = Column(Numeric(12, 2), nullable=False)
    cantidad_disponible = Column(Numeric(12, 2), nullable=False)
    costo_unitario_subtotal = Column(Numeric(12, 4), default=0, nullable=False)
    monto_iva_unitario = Column(Numeric(12, 4), default=0, nullable=False)
    costo_unitario_final = Column(Numeric(12, 4), default=0, nullable=False)
    fecha_ingreso = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint('cantidad_disponible >= 0', name='chk_lote_disponible_no_negativo'),
        CheckConstraint('costo_unitario_final >= 0', name='chk_lote_costo_no_negativo'),
    )

    refaccion = relationship("Refaccion", back_populates="lotes")
    detalle_entrada = relationship("DetalleEntrada", back_populates="lote")

    @property
    def intacto(self) -> bool:
        """True si ninguna salida ha tocado el lote desde su creación."""
        return self.cantidad_disponible == self.cantidad_inicial

    def __repr__(self):
        return f"<LoteRefaccion(id_lote={self.id_lote}, id_refaccion={self.id_refaccion}, disponible={self.cantidad_disponible}, costo={self.costo_unitario_final})>"
