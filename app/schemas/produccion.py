# backEnd/app/schemas/produccion.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class OrdenProduccionCreate(BaseModel):
    id_refaccion_producida: int
    cantidad_producida: Decimal = Field(..., gt=0)
    fecha_operacion: Optional[datetime] = None
    observaciones: Optional[str] = None


class ConsumoComponente(BaseModel):
    id_refaccion: int
    id_lote: int
    cantidad: Decimal
    costo_unitario: Decimal


class OrdenProduccion(BaseModel):
    id_orden: int
    id_refaccion_producida: int
    id_lote_generado: Optional[int] = None
    cantidad_producida: Decimal
    costo_total_componentes: Decimal
    id_empleado_responsable: int
    fecha_operacion: Optional[datetime] = None
    observaciones: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrdenProduccionResultado(OrdenProduccion):
    costo_unitario: Decimal
    consumos: List[ConsumoComponente] = []
