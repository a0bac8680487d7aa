# backEnd/app/services/items.py

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ..models.enums import TipoItemEnum
from ..models.insumo import Insumo as DBInsumo
from . import lotes as lote_service
from . import valuacion_insumo
from .errores import ErrorValidacion, NoEncontrado


@dataclass(frozen=True)
class ItemRef:
    """Referencia a un artículo de inventario: insumo (promedio ponderado) o refacción (lotes)."""
    tipo: TipoItemEnum
    id: int

    @classmethod
    def insumo(cls, id_insumo: int) -> "ItemRef":
        return cls(TipoItemEnum.insumo, id_insumo)

    @classmethod
    def refaccion(cls, id_refaccion: int) -> "ItemRef":
        return cls(TipoItemEnum.refaccion, id_refaccion)

    @classmethod
    def desde_ids(cls, id_insumo: Optional[int], id_refaccion: Optional[int]) -> "ItemRef":
        """Para líneas que traen id_insumo o id_refaccion (exactamente uno)."""
        if bool(id_insumo) == bool(id_refaccion):
            raise ErrorValidacion("Cada línea debe indicar id_insumo o id_refaccion, pero no ambos.")
        return cls.insumo(id_insumo) if id_insumo else cls.refaccion(id_refaccion)

    @property
    def es_insumo(self) -> bool:
        return self.tipo == TipoItemEnum.insumo


def nombre_item(db: Session, item: ItemRef) -> str:
    if item.es_insumo:
        insumo = db.query(DBInsumo).filter(DBInsumo.id_insumo == item.id).first()
        if insumo is None:
            raise NoEncontrado(f"El insumo con ID {item.id} no fue encontrado.")
        return insumo.nombre
    return lote_service.obtener_refaccion(db, item.id).nombre


def retirar_para_prestamo(db: Session, item: ItemRef, cantidad: Decimal) -> Optional[int]:
    """
    Saca del inventario lo prestado. Para refacciones usa el lote más antiguo que
    alcance por sí solo y devuelve su id; para insumos devuelve None.
    """
    if item.es_insumo:
        valuacion_insumo.despachar_insumo(db, item.id, cantidad)
        return None
    lote = lote_service.primer_lote_suficiente(db, item.id, cantidad)
    lote_service.descontar_lote(db, lote.id_lote, cantidad)
    return lote.id_lote


def reingresar_devolucion(db: Session, item: ItemRef, cantidad: Decimal) -> Optional[int]:
    """Regresa al inventario lo devuelto en buen estado; en refacciones va al lote más reciente."""
    if item.es_insumo:
        valuacion_insumo.ajustar_stock_insumo(db, item.id, cantidad)
        return None
    lote = lote_service.lote_mas_reciente(db, item.id)
    lote_service.reingresar_lote(db, lote.id_lote, cantidad)
    return lote.id_lote
