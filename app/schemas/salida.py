# backEnd/app/schemas/salida.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import TipoSalidaEnum


class DetalleSalidaRefaccionCreate(BaseModel):
    id_refaccion: int
    cantidad: Decimal = Field(..., gt=0)
    # Con lote: sale solo de ese lote. Sin lote: PEPS sobre todos los lotes.
    id_lote: Optional[int] = None


class DetalleSalidaInsumoCreate(BaseModel):
    id_insumo: int
    cantidad_usada: Decimal = Field(..., gt=0)


class SalidaCreate(BaseModel):
    tipo_salida: TipoSalidaEnum = TipoSalidaEnum.mantenimiento
    id_autobus: Optional[int] = None
    kilometraje_autobus: Optional[int] = Field(None, ge=0)
    solicitado_por_id: int
    observaciones: Optional[str] = None
    fecha_operacion: Optional[datetime] = None
    detalles_refaccion: List[DetalleSalidaRefaccionCreate] = []
    detalles_insumo: List[DetalleSalidaInsumoCreate] = []


class DetalleSalida(BaseModel):
    id_detalle_salida: int
    id_refaccion: int
    id_lote: int
    cantidad_despachada: Decimal
    costo_unitario: Decimal

    model_config = ConfigDict(from_attributes=True)


class DetalleSalidaInsumo(BaseModel):
    id_detalle_salida_insumo: int
    id_insumo: int
    cantidad_usada: Decimal
    costo_al_momento: Decimal

    model_config = ConfigDict(from_attributes=True)


class Salida(BaseModel):
    id_salida: int
    tipo_salida: TipoSalidaEnum
    id_autobus: Optional[int] = None
    kilometraje_autobus: Optional[int] = None
    solicitado_por_id: int
    observaciones: Optional[str] = None
    fecha_operacion: Optional[datetime] = None
    detalles_refaccion: List[DetalleSalida] = []
    detalles_insumo: List[DetalleSalidaInsumo] = []
    costo_total: Decimal = Decimal(0)

    model_config = ConfigDict(from_attributes=True)
