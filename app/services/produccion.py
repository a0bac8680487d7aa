# backEnd/app/services/produccion.py

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from ..models.produccion import OrdenProduccion as DBOrdenProduccion
from ..models.refaccion import RefaccionComponente as DBComponente
from ..schemas.produccion import OrdenProduccionCreate, OrdenProduccionResultado, ConsumoComponente
from . import lotes as lote_service
from .errores import ErrorValidacion, StockInsuficiente
from .valuacion_insumo import PRECISION_COSTO

logger = logging.getLogger(__name__)


def producir(db: Session, datos: OrdenProduccionCreate, id_empleado_responsable: int) -> OrdenProduccionResultado:
    """
    Produce `cantidad_producida` unidades de una refacción compuesta a partir de su receta.

    1. Verifica que cada componente tenga existencia agregada suficiente (necesaria x cantidad).
    2. Descuenta cada componente por PEPS y acumula el costo consumido.
    3. Crea un lote del producto con costo = costo consumido / cantidad, sin IVA.
    4. Registra la orden de producción.
    """
    cantidad = Decimal(str(datos.cantidad_producida))
    if cantidad <= 0:
        raise ErrorValidacion("Se requiere la refacción a producir y una cantidad válida.")

    lote_service.obtener_refaccion(db, datos.id_refaccion_producida)
    receta = db.query(DBComponente).filter(
        DBComponente.id_refaccion_padre == datos.id_refaccion_producida
    ).order_by(DBComponente.id_componente).all()
    if not receta:
        raise ErrorValidacion("Esta refacción no tiene una receta de componentes definida.")

    # Se valida todo antes de tocar un solo lote
    requeridos = {}
    for componente in receta:
        requeridos[componente.id_refaccion_hijo] = (
            requeridos.get(componente.id_refaccion_hijo, Decimal(0))
            + Decimal(str(componente.cantidad_necesaria)) * cantidad
        )
    for id_hijo, requerido in requeridos.items():
        disponible = lote_service.stock_refaccion(db, id_hijo)
        if disponible < requerido:
            raise StockInsuficiente(
                f"Stock insuficiente para el componente ID {id_hijo}. "
                f"Se necesitan {requerido}, pero solo hay {disponible}."
            )

    costo_total = Decimal(0)
    consumos = []
    for componente in receta:
        requerido = Decimal(str(componente.cantidad_necesaria)) * cantidad
        for consumo in lote_service.descontar_peps(db, componente.id_refaccion_hijo, requerido):
            costo_total += consumo.costo_total
            consumos.append(ConsumoComponente(
                id_refaccion=componente.id_refaccion_hijo,
                id_lote=consumo.id_lote,
                cantidad=consumo.cantidad,
                costo_unitario=consumo.costo_unitario,
            ))

    costo_unitario = (costo_total / cantidad).quantize(PRECISION_COSTO)
    lote = lote_service.crear_lote(
        db,
        datos.id_refaccion_producida,
        cantidad,
        costo_unitario,
        costo_unitario_subtotal=costo_unitario,
    )

    orden = DBOrdenProduccion(
        id_refaccion_producida=datos.id_refaccion_producida,
        id_lote_generado=lote.id_lote,
        cantidad_producida=cantidad,
        costo_total_componentes=costo_total,
        id_empleado_responsable=id_empleado_responsable,
        observaciones=datos.observaciones,
    )
    if datos.fecha_operacion:
        orden.fecha_operacion = datos.fecha_operacion
    db.add(orden)
    db.flush()

    logger.info(
        f"Orden de producción {orden.id_orden}: {cantidad} de refacción {datos.id_refaccion_producida}, "
        f"costo total {costo_total}, unitario {costo_unitario}"
    )
    return OrdenProduccionResultado(
        id_orden=orden.id_orden,
        id_refaccion_producida=orden.id_refaccion_producida,
        id_lote_generado=orden.id_lote_generado,
        cantidad_producida=cantidad,
        costo_total_componentes=costo_total,
        id_empleado_responsable=id_empleado_responsable,
        fecha_operacion=orden.fecha_operacion,
        observaciones=orden.observaciones,
        costo_unitario=costo_unitario,
        consumos=consumos,
    )
