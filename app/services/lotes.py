# backEnd/app/services/lotes.py

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.refaccion import Refaccion as DBRefaccion
from ..models.ajuste import AjusteInventarioDetalle as DBAjusteDetalle
from ..models.lote_refaccion import LoteRefaccion as DBLote
from ..models.prestamo import DetallePrestamo as DBDetallePrestamo
from ..models.salida import DetalleSalida as DBDetalleSalida
from .errores import NoEncontrado, StockInsuficiente, StockLoteInsuficiente, ErrorValidacion, EstadoInvalido

logger = logging.getLogger(__name__)

# Orden PEPS: primero por fecha de ingreso, luego por id (orden de inserción)
ORDEN_PEPS = (DBLote.fecha_ingreso.asc(), DBLote.id_lote.asc())
ORDEN_RECIENTE = (DBLote.fecha_ingreso.desc(), DBLote.id_lote.desc())


@dataclass(frozen=True)
class Consumo:
    """Lo que se tomó de un lote en una salida."""
    id_lote: int
    cantidad: Decimal
    costo_unitario: Decimal

    @property
    def costo_total(self) -> Decimal:
        return self.cantidad * self.costo_unitario


def obtener_refaccion(db: Session, id_refaccion: int) -> DBRefaccion:
    refaccion = db.query(DBRefaccion).filter(DBRefaccion.id_refaccion == id_refaccion).first()
    if refaccion is None:
        raise NoEncontrado(f"La refacción con ID {id_refaccion} no fue encontrada.")
    return refaccion


def stock_refaccion(db: Session, id_refaccion: int) -> Decimal:
    """Existencia agregada: SUM de lotes con disponible > 0. No hay contador guardado."""
    total = db.query(func.coalesce(func.sum(DBLote.cantidad_disponible), 0)).filter(
        DBLote.id_refaccion == id_refaccion,
        DBLote.cantidad_disponible > 0,
    ).scalar()
    return Decimal(str(total or 0))


def valor_inventario_refaccion(db: Session, id_refaccion: int) -> Decimal:
    total = db.query(
        func.coalesce(func.sum(DBLote.cantidad_disponible * DBLote.costo_unitario_final), 0)
    ).filter(
        DBLote.id_refaccion == id_refaccion,
        DBLote.cantidad_disponible > 0,
    ).scalar()
    return Decimal(str(total or 0))


def lotes_disponibles(db: Session, id_refaccion: int, bloquear: bool = False) -> List[DBLote]:
    query = db.query(DBLote).filter(
        DBLote.id_refaccion == id_refaccion,
        DBLote.cantidad_disponible > 0,
    ).order_by(*ORDEN_PEPS)
    if bloquear:
        query = query.with_for_update().populate_existing()
    return query.all()


def bloquear_lote(db: Session, id_lote: int, id_refaccion: Optional[int] = None) -> DBLote:
    lote = db.query(DBLote).filter(DBLote.id_lote == id_lote).with_for_update().populate_existing().first()
    if lote is None:
        raise NoEncontrado(f"El lote con ID {id_lote} no existe.")
    if id_refaccion is not None and lote.id_refaccion != id_refaccion:
        raise ErrorValidacion(f"El lote {id_lote} no pertenece a la refacción {id_refaccion}.")
    return lote


def crear_lote(
    db: Session,
    id_refaccion: int,
    cantidad: Decimal,
    costo_unitario_final: Decimal,
    costo_unitario_subtotal: Optional[Decimal] = None,
    monto_iva_unitario: Decimal = Decimal(0),
    id_detalle_entrada: Optional[int] = None,
) -> DBLote:
    cantidad = Decimal(str(cantidad))
    costo_unitario_final = Decimal(str(costo_unitario_final))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad del lote debe ser mayor a cero.")
    if costo_unitario_final < 0:
        raise ErrorValidacion("El costo unitario del lote no puede ser negativo.")

    obtener_refaccion(db, id_refaccion)
    lote = DBLote(
        id_refaccion=id_refaccion,
        id_detalle_entrada=id_detalle_entrada,
        cantidad_inicial=cantidad,
        cantidad_disponible=cantidad,
        costo_unitario_subtotal=costo_unitario_final if costo_unitario_subtotal is None else costo_unitario_subtotal,
        monto_iva_unitario=monto_iva_unitario,
        costo_unitario_final=costo_unitario_final,
    )
    db.add(lote)
    db.flush()
    logger.info(f"Lote {lote.id_lote} creado para refacción {id_refaccion}: {cantidad} a {costo_unitario_final}")
    return lote


def descontar_lote(db: Session, id_lote: int, cantidad: Decimal, id_refaccion: Optional[int] = None) -> Consumo:
    """Salida de un lote elegido por el usuario. Falla sin tocar nada si no alcanza."""
    cantidad = Decimal(str(cantidad))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad debe ser mayor a cero.")

    lote = bloquear_lote(db, id_lote, id_refaccion)
    disponible = Decimal(str(lote.cantidad_disponible))
    if cantidad > disponible:
        logger.warning(f"Salida rechazada del lote {id_lote}: disponible {disponible}, solicitado {cantidad}")
        raise StockLoteInsuficiente(f"Stock insuficiente en este lote. Disponible: {disponible}")

    lote.cantidad_disponible = disponible - cantidad
    db.flush()
    return Consumo(id_lote=lote.id_lote, cantidad=cantidad, costo_unitario=Decimal(str(lote.costo_unitario_final)))


def planear_peps(lotes: List[DBLote], cantidad: Decimal) -> List[Consumo]:
    """
    Reparte `cantidad` sobre `lotes` (ya ordenados PEPS). Función pura;
    devuelve lo que se tomaría de cada lote o lanza StockInsuficiente.
    """
    pendiente = Decimal(str(cantidad))
    plan = []
    for lote in lotes:
        if pendiente <= 0:
            break
        disponible = Decimal(str(lote.cantidad_disponible))
        if disponible <= 0:
            continue
        tomado = min(disponible, pendiente)
        plan.append(Consumo(id_lote=lote.id_lote, cantidad=tomado, costo_unitario=Decimal(str(lote.costo_unitario_final))))
        pendiente -= tomado

    if pendiente > 0:
        raise StockInsuficiente(
            f"Stock insuficiente. Se necesitan {cantidad}, pero solo hay {Decimal(str(cantidad)) - pendiente}."
        )
    return plan


def descontar_peps(db: Session, id_refaccion: int, cantidad: Decimal) -> List[Consumo]:
    """Descuenta de los lotes más antiguos primero, bloqueándolos todos antes de decidir."""
    cantidad = Decimal(str(cantidad))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad debe ser mayor a cero.")

    obtener_refaccion(db, id_refaccion)
    lotes = lotes_disponibles(db, id_refaccion, bloquear=True)
    plan = planear_peps(lotes, cantidad)

    por_id = {lote.id_lote: lote for lote in lotes}
    for consumo in plan:
        lote = por_id[consumo.id_lote]
        lote.cantidad_disponible = Decimal(str(lote.cantidad_disponible)) - consumo.cantidad
    db.flush()
    return plan


def primer_lote_suficiente(db: Session, id_refaccion: int, cantidad: Decimal) -> DBLote:
    """El lote más antiguo que por sí solo cubre `cantidad`. No reparte entre lotes."""
    lote = db.query(DBLote).filter(
        DBLote.id_refaccion == id_refaccion,
        DBLote.cantidad_disponible >= cantidad,
    ).order_by(*ORDEN_PEPS).with_for_update().populate_existing().first()
    if lote is None:
        refaccion = obtener_refaccion(db, id_refaccion)
        raise StockLoteInsuficiente(f"No hay lote con suficiente stock para la refacción: {refaccion.nombre}")
    return lote


def lote_mas_reciente(db: Session, id_refaccion: int) -> DBLote:
    lote = db.query(DBLote).filter(DBLote.id_refaccion == id_refaccion).order_by(*ORDEN_RECIENTE).with_for_update().populate_existing().first()
    if lote is None:
        raise NoEncontrado(f"La refacción con ID {id_refaccion} no tiene lotes donde reingresar stock.")
    return lote


def reingresar_lote(db: Session, id_lote: int, cantidad: Decimal) -> DBLote:
    lote = bloquear_lote(db, id_lote)
    lote.cantidad_disponible = Decimal(str(lote.cantidad_disponible)) + Decimal(str(cantidad))
    db.flush()
    return lote


def revalorizar_lote(db: Session, id_lote: int, delta_costo: Decimal, id_refaccion: Optional[int] = None) -> DBLote:
    """Suma `delta_costo` (puede ser negativo) al costo final; la cantidad no cambia."""
    delta_costo = Decimal(str(delta_costo))
    lote = bloquear_lote(db, id_lote, id_refaccion)
    nuevo_costo = Decimal(str(lote.costo_unitario_final)) + delta_costo
    if nuevo_costo < 0:
        raise ErrorValidacion(f"La revalorización dejaría el costo del lote {id_lote} en negativo ({nuevo_costo}).")
    lote.costo_unitario_final = nuevo_costo
    db.flush()
    return lote


def eliminar_lote_intacto(db: Session, id_lote: int) -> None:
    """
    Borra un lote solo si ninguna salida lo ha tocado y ningún otro movimiento
    (ajuste, salida o préstamo) lo referencia. Las líneas del ajuste que lo creó
    ya deben estar borradas.
    """
    lote = bloquear_lote(db, id_lote)
    if not lote.intacto:
        raise EstadoInvalido(
            f"El lote {id_lote} ya tuvo salidas ({lote.cantidad_inicial} -> {lote.cantidad_disponible}); "
            "no se puede revertir la entrada que lo creó."
        )
    referencias = (
        (DBAjusteDetalle, DBAjusteDetalle.id_lote_refaccion, "ajustes"),
        (DBDetalleSalida, DBDetalleSalida.id_lote, "salidas"),
        (DBDetallePrestamo, DBDetallePrestamo.id_lote_origen, "préstamos"),
    )
    for modelo, columna, movimiento in referencias:
        if db.query(modelo).filter(columna == id_lote).first() is not None:
            raise EstadoInvalido(
                f"El lote {id_lote} está referenciado por {movimiento}; "
                "no se puede revertir la entrada que lo creó."
            )
    db.delete(lote)
    db.flush()
