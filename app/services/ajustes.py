# backEnd/app/services/ajustes.py

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..models.ajuste import AjusteInventarioMaestro as DBAjuste, AjusteInventarioDetalle as DBAjusteDetalle
from ..models.empleado import Empleado as DBEmpleado
from ..models.enums import TipoAjusteEnum
from ..schemas.ajuste import AjusteCreate, DetalleAjusteCreate
from . import lotes as lote_service
from . import valuacion_insumo
from .errores import NoEncontrado, ErrorValidacion
from .items import ItemRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EfectoAplicado:
    """Lo que una línea hizo realmente al inventario; es lo que se guarda y lo que se revierte."""
    item: ItemRef
    cantidad: Decimal        # con signo: ENTRADA +, SALIDA -, REVALORIZACION 0
    costo_ajuste: Decimal
    id_lote: Optional[int]


def _validar_empleado(db: Session, id_empleado: int) -> None:
    if not db.query(DBEmpleado).filter(DBEmpleado.id_empleado == id_empleado).first():
        raise NoEncontrado(f"El empleado con ID {id_empleado} no fue encontrado.")


def aplicar_detalle(db: Session, tipo_ajuste: TipoAjusteEnum, detalle: DetalleAjusteCreate) -> EfectoAplicado:
    item = ItemRef.desde_ids(detalle.id_insumo, detalle.id_refaccion)
    cantidad = abs(Decimal(str(detalle.cantidad or 0)))
    costo = Decimal(str(detalle.costo_ajuste or 0))

    if tipo_ajuste in (TipoAjusteEnum.ENTRADA, TipoAjusteEnum.SALIDA) and cantidad == 0:
        raise ErrorValidacion(f"Los ajustes de tipo {tipo_ajuste.value} requieren una cantidad distinta de cero.")

    if item.es_insumo:
        if tipo_ajuste == TipoAjusteEnum.ENTRADA:
            valuacion_insumo.ajustar_stock_insumo(db, item.id, cantidad)
            return EfectoAplicado(item, cantidad, costo, None)
        if tipo_ajuste == TipoAjusteEnum.SALIDA:
            valuacion_insumo.ajustar_stock_insumo(db, item.id, -cantidad)
            return EfectoAplicado(item, -cantidad, costo, None)
        valuacion_insumo.ajustar_costo_insumo(db, item.id, costo)
        return EfectoAplicado(item, Decimal(0), costo, None)

    # Refacción: ENTRADA crea lote; SALIDA y REVALORIZACION exigen el lote elegido por el usuario
    if tipo_ajuste == TipoAjusteEnum.ENTRADA:
        if costo < 0:
            raise ErrorValidacion("El costo de un lote nuevo no puede ser negativo.")
        lote = lote_service.crear_lote(db, item.id, cantidad, costo)
        return EfectoAplicado(item, cantidad, costo, lote.id_lote)

    if not detalle.id_lote:
        raise ErrorValidacion(f"Los ajustes de tipo {tipo_ajuste.value} sobre refacciones requieren id_lote.")

    if tipo_ajuste == TipoAjusteEnum.SALIDA:
        lote_service.descontar_lote(db, detalle.id_lote, cantidad, id_refaccion=item.id)
        return EfectoAplicado(item, -cantidad, costo, detalle.id_lote)

    lote_service.revalorizar_lote(db, detalle.id_lote, costo, id_refaccion=item.id)
    return EfectoAplicado(item, Decimal(0), costo, detalle.id_lote)


def revertir_detalle(db: Session, tipo_ajuste: TipoAjusteEnum, efecto: EfectoAplicado) -> None:
    """Deshace exactamente lo que aplicar_detalle hizo."""
    if efecto.item.es_insumo:
        if efecto.cantidad != 0:
            valuacion_insumo.ajustar_stock_insumo(db, efecto.item.id, -efecto.cantidad)
        if tipo_ajuste == TipoAjusteEnum.REVALORIZACION:
            valuacion_insumo.ajustar_costo_insumo(db, efecto.item.id, -efecto.costo_ajuste)
        return

    if efecto.id_lote is None:
        raise NoEncontrado(
            f"La línea de ajuste de la refacción {efecto.item.id} ya no tiene lote asociado; no se puede revertir."
        )

    if tipo_ajuste == TipoAjusteEnum.ENTRADA:
        lote_service.eliminar_lote_intacto(db, efecto.id_lote)
    elif tipo_ajuste == TipoAjusteEnum.SALIDA:
        lote_service.reingresar_lote(db, efecto.id_lote, abs(efecto.cantidad))
    else:
        lote_service.revalorizar_lote(db, efecto.id_lote, -efecto.costo_ajuste)


def _guardar_detalles(db: Session, ajuste: DBAjuste, efectos: List[EfectoAplicado]) -> None:
    for efecto in efectos:
        ajuste.detalles.append(DBAjusteDetalle(
            id_insumo=efecto.item.id if efecto.item.es_insumo else None,
            id_refaccion=None if efecto.item.es_insumo else efecto.item.id,
            id_lote_refaccion=efecto.id_lote,
            cantidad=efecto.cantidad,
            costo_ajuste=efecto.costo_ajuste,
        ))
    db.flush()


def crear_ajuste(db: Session, datos: AjusteCreate) -> DBAjuste:
    """Registra y aplica un ajuste. El llamador hace commit o rollback."""
    if not datos.detalles:
        raise ErrorValidacion("Datos maestros (empleado, tipo, motivo) y detalles son requeridos.")
    _validar_empleado(db, datos.maestro.id_empleado)

    ajuste = DBAjuste(
        id_empleado=datos.maestro.id_empleado,
        tipo_ajuste=datos.maestro.tipo_ajuste,
        motivo=datos.maestro.motivo,
    )
    db.add(ajuste)
    db.flush()

    efectos = [aplicar_detalle(db, datos.maestro.tipo_ajuste, detalle) for detalle in datos.detalles]
    _guardar_detalles(db, ajuste, efectos)

    logger.info(f"Ajuste {ajuste.id_ajuste} ({ajuste.tipo_ajuste.value}) aplicado con {len(efectos)} líneas")
    return ajuste


def obtener_ajuste(db: Session, id_ajuste: int, bloquear: bool = False) -> DBAjuste:
    query = db.query(DBAjuste).filter(DBAjuste.id_ajuste == id_ajuste)
    if bloquear:
        # Relee maestro y líneas ya bloqueados aunque la sesión los tenga en memoria
        query = query.options(selectinload(DBAjuste.detalles)).with_for_update().populate_existing()
    ajuste = query.first()
    if ajuste is None:
        raise NoEncontrado(f"No se encontró un ajuste con el ID {id_ajuste}")
    return ajuste


def actualizar_ajuste(db: Session, id_ajuste: int, datos: AjusteCreate) -> DBAjuste:
    """
    PUT de un ajuste: revierte cada línea original y después aplica las nuevas,
    todo en la misma transacción. No es un diff.
    """
    ajuste = obtener_ajuste(db, id_ajuste, bloquear=True)
    _validar_empleado(db, datos.maestro.id_empleado)

    tipo_original = ajuste.tipo_ajuste
    originales = [
        EfectoAplicado(
            item=ItemRef.desde_ids(d.id_insumo, d.id_refaccion),
            cantidad=Decimal(str(d.cantidad or 0)),
            costo_ajuste=Decimal(str(d.costo_ajuste or 0)),
            id_lote=d.id_lote_refaccion,
        )
        for d in ajuste.detalles
    ]

    # Las líneas se borran antes de revertir para que ninguna quede apuntando a un lote eliminado
    ajuste.detalles.clear()
    db.flush()

    for efecto in originales:
        revertir_detalle(db, tipo_original, efecto)
    logger.info(f"Ajuste {id_ajuste}: {len(originales)} líneas originales revertidas")

    ajuste.id_empleado = datos.maestro.id_empleado
    ajuste.tipo_ajuste = datos.maestro.tipo_ajuste
    ajuste.motivo = datos.maestro.motivo
    ajuste.fecha_modificacion = datetime.now(timezone.utc)

    efectos = [aplicar_detalle(db, datos.maestro.tipo_ajuste, detalle) for detalle in datos.detalles]
    _guardar_detalles(db, ajuste, efectos)

    logger.info(f"Ajuste {id_ajuste} recalculado con {len(efectos)} líneas nuevas")
    return ajuste
