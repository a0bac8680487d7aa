# backEnd/app/schemas/entrada.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import TipoCostoEnum, TipoItemEnum
from .pagination import Pagination


class LineaEntradaBase(BaseModel):
    cantidad_recibida: Decimal = Field(..., gt=0)
    # Lo que viene en la factura: por unidad ('unitario') o total de la línea ('neto')
    costo_ingresado: Decimal = Field(..., ge=0)
    tipo_costo: TipoCostoEnum = TipoCostoEnum.unitario
    aplica_iva: bool = True


class DetalleEntradaRefaccionCreate(LineaEntradaBase):
    id_refaccion: int


class DetalleEntradaInsumoCreate(LineaEntradaBase):
    id_insumo: int


class EntradaCreate(BaseModel):
    id_proveedor: Optional[int] = None
    factura_proveedor: Optional[str] = None
    vale_interno: Optional[str] = None
    recibido_por_id: int
    razon_social: str = Field(..., min_length=1)
    observaciones: Optional[str] = None
    fecha_operacion: datetime
    detalles_refaccion: List[DetalleEntradaRefaccionCreate] = []
    detalles_insumo: List[DetalleEntradaInsumoCreate] = []


class LineaEntradaRead(BaseModel):
    tipo_item: TipoItemEnum
    id_item: int
    nombre_item: str
    cantidad: Decimal
    costo_unitario_subtotal: Decimal
    monto_iva_unitario: Decimal
    costo_unitario_final: Decimal
    id_lote: Optional[int] = None


class EntradaResumen(BaseModel):
    id_entrada: int
    id_proveedor: Optional[int] = None
    nombre_proveedor: Optional[str] = None
    factura_proveedor: Optional[str] = None
    vale_interno: Optional[str] = None
    razon_social: str
    recibido_por_id: int
    nombre_empleado: Optional[str] = None
    observaciones: Optional[str] = None
    fecha_operacion: datetime
    valor_neto: Decimal = Decimal(0)

    model_config = ConfigDict(from_attributes=True)


class EntradaDetalle(EntradaResumen):
    detalles: List[LineaEntradaRead] = []


EntradaPagination = Pagination[EntradaResumen]
