# backEnd/app/services/valuacion_insumo.py

import os
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from ..models.insumo import Insumo as DBInsumo
from ..models.enums import TipoCostoEnum
from .errores import NoEncontrado, StockInsuficiente, ErrorValidacion

logger = logging.getLogger(__name__)

TASA_IVA = Decimal(os.getenv("TASA_IVA", "0.16"))

PRECISION_COSTO = Decimal("0.0001")


@dataclass(frozen=True)
class CostoDesglosado:
    subtotal: Decimal
    iva: Decimal
    final: Decimal


def calcular_costo_unitario(
    cantidad: Decimal,
    costo_ingresado: Decimal,
    tipo_costo: TipoCostoEnum,
    aplica_iva: bool,
) -> CostoDesglosado:
    """
    Convierte el costo capturado en la factura a costo unitario con IVA.

    - 'unitario': el costo ingresado ya es por unidad.
    - 'neto': el costo ingresado es el total de la línea y se divide entre la cantidad.

    Ejemplo: 100 unidades, neto $2500, con IVA -> subtotal 25.00, IVA 4.00, final 29.00
    """
    cantidad = Decimal(str(cantidad))
    costo_ingresado = Decimal(str(costo_ingresado))

    if cantidad <= 0:
        raise ErrorValidacion("La cantidad debe ser mayor a cero.")
    if costo_ingresado < 0:
        raise ErrorValidacion("El costo no puede ser negativo.")

    if tipo_costo == TipoCostoEnum.unitario:
        subtotal = costo_ingresado
    elif tipo_costo == TipoCostoEnum.neto:
        subtotal = costo_ingresado / cantidad
    else:
        raise ErrorValidacion(f"Tipo de costo '{tipo_costo}' no es válido.")

    iva = subtotal * TASA_IVA if aplica_iva else Decimal(0)
    return CostoDesglosado(
        subtotal=subtotal.quantize(PRECISION_COSTO),
        iva=iva.quantize(PRECISION_COSTO),
        final=(subtotal + iva).quantize(PRECISION_COSTO),
    )


def calcular_promedio_ponderado(
    stock_anterior: Decimal,
    costo_anterior: Decimal,
    cantidad_nueva: Decimal,
    costo_nuevo: Decimal,
) -> Decimal:
    """(stock*costo + cantidad*costo_nuevo) / (stock + cantidad); 0 si el stock resultante es 0."""
    stock_total = stock_anterior + cantidad_nueva
    if stock_total <= 0:
        return Decimal(0)
    valor_total = stock_anterior * costo_anterior + cantidad_nueva * costo_nuevo
    return (valor_total / stock_total).quantize(PRECISION_COSTO)


def bloquear_insumo(db: Session, id_insumo: int) -> DBInsumo:
    """SELECT ... FOR UPDATE sobre el insumo. Toda mutación de stock/costo pasa por aquí."""
    insumo = db.query(DBInsumo).filter(DBInsumo.id_insumo == id_insumo).with_for_update().populate_existing().first()
    if insumo is None:
        raise NoEncontrado(f"El insumo con ID {id_insumo} no fue encontrado.")
    return insumo


def recibir_insumo(db: Session, id_insumo: int, cantidad: Decimal, costo_unitario_final: Decimal):
    """Suma existencia y recalcula el costo promedio ponderado. Devuelve (stock, promedio)."""
    cantidad = Decimal(str(cantidad))
    costo_unitario_final = Decimal(str(costo_unitario_final))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad recibida debe ser mayor a cero.")
    if costo_unitario_final < 0:
        raise ErrorValidacion("El costo unitario no puede ser negativo.")

    insumo = bloquear_insumo(db, id_insumo)
    stock_anterior = Decimal(str(insumo.stock_actual or 0))
    costo_anterior = Decimal(str(insumo.costo_unitario_promedio or 0))

    nuevo_promedio = calcular_promedio_ponderado(stock_anterior, costo_anterior, cantidad, costo_unitario_final)
    insumo.stock_actual = stock_anterior + cantidad
    insumo.costo_unitario_promedio = nuevo_promedio
    db.flush()

    logger.info(
        f"Insumo {id_insumo}: entrada de {cantidad} a {costo_unitario_final}. "
        f"Stock {stock_anterior} -> {insumo.stock_actual}, promedio {costo_anterior} -> {nuevo_promedio}"
    )
    return insumo.stock_actual, nuevo_promedio


def despachar_insumo(db: Session, id_insumo: int, cantidad: Decimal) -> Decimal:
    """
    Resta existencia sin tocar el promedio. Devuelve el costo promedio vigente,
    que el llamador guarda como costo_al_momento.
    """
    cantidad = Decimal(str(cantidad))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad debe ser un número positivo.")

    insumo = bloquear_insumo(db, id_insumo)
    stock_actual = Decimal(str(insumo.stock_actual or 0))
    if cantidad > stock_actual:
        logger.warning(f"Salida rechazada del insumo {id_insumo}: disponible {stock_actual}, solicitado {cantidad}")
        raise StockInsuficiente(
            f"Stock insuficiente para insumo '{insumo.nombre}'. Disponible: {stock_actual}, Solicitado: {cantidad}"
        )

    insumo.stock_actual = stock_actual - cantidad
    db.flush()
    return Decimal(str(insumo.costo_unitario_promedio or 0))


def ajustar_stock_insumo(db: Session, id_insumo: int, delta: Decimal) -> Decimal:
    """Suma un delta con signo a la existencia (ajustes y préstamos). Nunca deja stock negativo."""
    delta = Decimal(str(delta))
    insumo = bloquear_insumo(db, id_insumo)
    nuevo_stock = Decimal(str(insumo.stock_actual or 0)) + delta
    if nuevo_stock < 0:
        raise StockInsuficiente(
            f"Stock insuficiente para insumo '{insumo.nombre}'. Disponible: {insumo.stock_actual}, movimiento: {delta}"
        )
    insumo.stock_actual = nuevo_stock
    db.flush()
    return nuevo_stock


def ajustar_costo_insumo(db: Session, id_insumo: int, delta_costo: Decimal) -> Decimal:
    """Revalorización del costo promedio. El costo resultante no puede ser negativo."""
    delta_costo = Decimal(str(delta_costo))
    insumo = bloquear_insumo(db, id_insumo)
    nuevo_costo = Decimal(str(insumo.costo_unitario_promedio or 0)) + delta_costo
    if nuevo_costo < 0:
        raise ErrorValidacion(
            f"La revalorización dejaría el costo del insumo '{insumo.nombre}' en negativo ({nuevo_costo})."
        )
    insumo.costo_unitario_promedio = nuevo_costo
    db.flush()
    return nuevo_costo


def fijar_existencia_insumo(db: Session, id_insumo: int, cantidad: Decimal, costo_unitario: Decimal) -> DBInsumo:
    """Conteo físico: sobrescribe existencia y costo (reinicio, no delta)."""
    cantidad = Decimal(str(cantidad))
    costo_unitario = Decimal(str(costo_unitario))
    if cantidad < 0 or costo_unitario < 0:
        raise ErrorValidacion("La cantidad contada y el costo asignado no pueden ser negativos.")
    insumo = bloquear_insumo(db, id_insumo)
    insumo.stock_actual = cantidad
    insumo.costo_unitario_promedio = costo_unitario
    db.flush()
    return insumo
