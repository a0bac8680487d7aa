"""
PRUEBAS DE CAJA BLANCA - Ajustes de inventario
Objetivo: Testear la lógica interna conociendo la implementación

Cobertura objetivo:
- aplicar_detalle: ENTRADA / SALIDA / REVALORIZACION sobre insumos y refacciones
- actualizar_ajuste: revertir lo original y aplicar lo nuevo en una transacción
- Protección del lote creado por una ENTRADA que ya tuvo salidas o que otro movimiento referencia
- Dos PUT seguidos sobre el mismo ajuste no pierden la primera corrección
"""
from decimal import Decimal

import pytest

from app.models.ajuste import AjusteInventarioDetalle as DBAjusteDetalle
from app.models.enums import TipoAjusteEnum, TipoItemEnum, EstadoDevolucionEnum
from app.models.insumo import Insumo as DBInsumo
from app.models.lote_refaccion import LoteRefaccion as DBLote
from app.schemas.ajuste import AjusteCreate, AjusteMaestroCreate, DetalleAjusteCreate
from app.schemas.prestamo import PrestamoCreate, DetallePrestamoCreate
from app.services import ajustes as ajuste_service
from app.services import lotes as lote_service
from app.services import prestamos as prestamo_service
from app.services.errores import NoEncontrado, ErrorValidacion, EstadoInvalido, StockInsuficiente


def _ajuste(id_empleado, tipo, *detalles, motivo="Diferencia en revisión"):
    return AjusteCreate(
        maestro=AjusteMaestroCreate(id_empleado=id_empleado, tipo_ajuste=tipo, motivo=motivo),
        detalles=list(detalles),
    )


class TestAplicarDetalleCajaBlanca:
    """
    CAJA BLANCA: aplicar_detalle

    Rutas de ejecución identificadas:
    1. Línea sin item o con ambos → ErrorValidacion
    2. ENTRADA/SALIDA con cantidad 0 → ErrorValidacion
    3. Insumo ENTRADA / SALIDA / REVALORIZACION
    4. Refacción ENTRADA → lote nuevo
    5. Refacción SALIDA/REVALORIZACION sin id_lote → ErrorValidacion
    """

    def test_rama_1_linea_con_dos_items(self, db_session):
        detalle = DetalleAjusteCreate(id_insumo=1, id_refaccion=1, cantidad=Decimal(1))

        with pytest.raises(ErrorValidacion):
            ajuste_service.aplicar_detalle(db_session, TipoAjusteEnum.ENTRADA, detalle)

    def test_rama_2_cantidad_cero(self, db_session, crear_insumo):
        insumo = crear_insumo(stock="5", costo="1")

        with pytest.raises(ErrorValidacion):
            ajuste_service.aplicar_detalle(
                db_session, TipoAjusteEnum.SALIDA, DetalleAjusteCreate(id_insumo=insumo.id_insumo)
            )

    def test_rama_3_insumo_salida_guarda_cantidad_negativa(self, db_session, crear_insumo):
        insumo = crear_insumo(stock="5", costo="1")

        efecto = ajuste_service.aplicar_detalle(
            db_session, TipoAjusteEnum.SALIDA, DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(2))
        )

        assert efecto.cantidad == Decimal(-2)
        assert efecto.id_lote is None
        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(3)

    def test_rama_3_insumo_revalorizacion(self, db_session, crear_insumo):
        insumo = crear_insumo(stock="5", costo="10")

        efecto = ajuste_service.aplicar_detalle(
            db_session, TipoAjusteEnum.REVALORIZACION,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, costo_ajuste=Decimal("1.5")),
        )

        assert efecto.cantidad == 0
        assert db_session.get(DBInsumo, insumo.id_insumo).costo_unitario_promedio == Decimal("11.5")

    def test_rama_4_refaccion_entrada_crea_lote(self, db_session, crear_refaccion):
        refaccion = crear_refaccion()

        efecto = ajuste_service.aplicar_detalle(
            db_session, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(4), costo_ajuste=Decimal(30)),
        )

        lote = db_session.get(DBLote, efecto.id_lote)
        assert lote.cantidad_inicial == Decimal(4)
        assert lote.costo_unitario_final == Decimal(30)

    @pytest.mark.parametrize("tipo", [TipoAjusteEnum.SALIDA, TipoAjusteEnum.REVALORIZACION])
    def test_rama_5_refaccion_sin_lote(self, db_session, crear_refaccion, tipo):
        refaccion = crear_refaccion()

        with pytest.raises(ErrorValidacion) as exc_info:
            ajuste_service.aplicar_detalle(
                db_session, tipo, DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(1))
            )

        assert "id_lote" in str(exc_info.value)


class TestCrearAjusteCajaBlanca:

    def test_sin_detalles(self, db_session, empleado):
        with pytest.raises(ErrorValidacion):
            ajuste_service.crear_ajuste(db_session, _ajuste(empleado.id_empleado, TipoAjusteEnum.ENTRADA))

    def test_empleado_inexistente(self, db_session, crear_insumo):
        insumo = crear_insumo()
        datos = _ajuste(999, TipoAjusteEnum.ENTRADA, DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(1)))

        with pytest.raises(NoEncontrado):
            ajuste_service.crear_ajuste(db_session, datos)

    def test_salida_de_refaccion_por_lote(self, db_session, empleado, crear_refaccion, crear_lote):
        refaccion = crear_refaccion()
        lote = crear_lote(refaccion.id_refaccion, 10, "7")

        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.SALIDA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, id_lote=lote.id_lote, cantidad=Decimal(3)),
        ))
        db_session.commit()

        assert [d.cantidad for d in ajuste.detalles] == [Decimal(-3)]
        assert ajuste.detalles[0].id_lote_refaccion == lote.id_lote
        db_session.refresh(lote)
        assert lote.cantidad_disponible == Decimal(7)


class TestActualizarAjusteCajaBlanca:
    """
    CAJA BLANCA: actualizar_ajuste

    Rutas:
    1. Ajuste inexistente → NoEncontrado
    2. Revertir y reaplicar: el inventario queda como si solo existiera el ajuste nuevo
    3. Lote de ENTRADA con salidas → EstadoInvalido y nada cambia
    4. Cambio de tipo (ENTRADA → SALIDA) en el mismo PUT
    """

    def test_rama_1_inexistente(self, db_session, empleado):
        datos = _ajuste(empleado.id_empleado, TipoAjusteEnum.ENTRADA)

        with pytest.raises(NoEncontrado):
            ajuste_service.actualizar_ajuste(db_session, 12345, datos)

    def test_rama_2_revertir_y_reaplicar_insumo(self, db_session, empleado, crear_insumo):
        # ARRANGE: stock 10, ajuste de ENTRADA de 5 → 15
        insumo = crear_insumo(stock="10", costo="2")
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(5)),
        ))
        db_session.commit()
        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(15)

        # ACT: se corrige a ENTRADA de 2
        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(2)),
            motivo="Corrección de captura",
        ))
        db_session.commit()

        # ASSERT: 10 + 2, una sola línea y fecha de modificación
        db_session.refresh(ajuste)
        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(12)
        assert len(ajuste.detalles) == 1
        assert ajuste.motivo == "Corrección de captura"
        assert ajuste.fecha_modificacion is not None

    def test_rama_2_revalorizacion_de_lote_revertida(self, db_session, empleado, crear_refaccion, crear_lote):
        refaccion = crear_refaccion()
        lote = crear_lote(refaccion.id_refaccion, 3, "10")
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.REVALORIZACION,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, id_lote=lote.id_lote, costo_ajuste=Decimal(4)),
        ))
        db_session.commit()

        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.REVALORIZACION,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, id_lote=lote.id_lote, costo_ajuste=Decimal(-1)),
        ))
        db_session.commit()

        db_session.refresh(lote)
        assert lote.costo_unitario_final == Decimal(9)

    def test_rama_3_lote_de_entrada_ya_consumido(self, db_session, empleado, crear_refaccion):
        # ARRANGE: ENTRADA de 5 piezas crea un lote; después se despacha 1
        refaccion = crear_refaccion()
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(5), costo_ajuste=Decimal(10)),
        ))
        db_session.commit()
        id_lote = ajuste.detalles[0].id_lote_refaccion
        lote_service.descontar_lote(db_session, id_lote, Decimal(1))
        db_session.commit()

        # ACT & ASSERT
        with pytest.raises(EstadoInvalido):
            ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
                empleado.id_empleado, TipoAjusteEnum.ENTRADA,
                DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(2), costo_ajuste=Decimal(10)),
            ))
        db_session.rollback()

        lote = db_session.get(DBLote, id_lote)
        assert lote.cantidad_disponible == Decimal(4)
        assert db_session.query(DBAjusteDetalle).filter(DBAjusteDetalle.id_ajuste == ajuste.id_ajuste).count() == 1

    def test_rama_4_cambio_de_tipo(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo(stock="10", costo="2")
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(5)),
        ))
        db_session.commit()

        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.SALIDA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(4)),
        ))
        db_session.commit()

        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(6)
        assert ajuste.tipo_ajuste == TipoAjusteEnum.SALIDA

    def test_reaplicar_sin_stock_suficiente(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo(stock="1", costo="2")
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(1)),
        ))
        db_session.commit()

        with pytest.raises(StockInsuficiente):
            ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
                empleado.id_empleado, TipoAjusteEnum.SALIDA,
                DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(3)),
            ))
        db_session.rollback()

        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(2)

    def test_rama_2_entrada_de_refaccion_ida_y_vuelta(self, db_session, empleado, crear_refaccion, crear_lote):
        # ARRANGE: un lote ajeno de 4 a 8; la ENTRADA agrega otro de 5 a 10
        refaccion = crear_refaccion()
        ajeno = crear_lote(refaccion.id_refaccion, 4, "8", dia=1)
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(5), costo_ajuste=Decimal(10)),
        ))
        db_session.commit()
        lote_creado = ajuste.detalles[0].id_lote_refaccion
        assert lote_service.stock_refaccion(db_session, refaccion.id_refaccion) == Decimal(9)

        # ACT: otra línea distinta
        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(2), costo_ajuste=Decimal(11)),
        ))
        db_session.commit()

        # ASSERT: el lote original desaparece y queda uno nuevo de 2
        assert db_session.get(DBLote, lote_creado) is None
        assert lote_service.stock_refaccion(db_session, refaccion.id_refaccion) == Decimal(6)
        segundo_lote = ajuste.detalles[0].id_lote_refaccion

        # ACT: sin líneas
        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(empleado.id_empleado, TipoAjusteEnum.ENTRADA))
        db_session.commit()

        # ASSERT: todo como antes de la ENTRADA
        assert db_session.get(DBLote, segundo_lote) is None
        assert lote_service.stock_refaccion(db_session, refaccion.id_refaccion) == Decimal(4)
        db_session.refresh(ajeno)
        assert ajeno.cantidad_disponible == Decimal(4)
        assert ajeno.costo_unitario_final == Decimal(8)

    def test_rama_3_lote_de_entrada_revalorizado_por_otro_ajuste(self, db_session, empleado, crear_refaccion):
        # ARRANGE: A crea el lote, B lo revaloriza (+2); la cantidad no cambia
        refaccion = crear_refaccion()
        entrada = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(5), costo_ajuste=Decimal(10)),
        ))
        db_session.commit()
        id_lote = entrada.detalles[0].id_lote_refaccion
        revalorizacion = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.REVALORIZACION,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, id_lote=id_lote, costo_ajuste=Decimal(2)),
        ))
        db_session.commit()

        # ACT & ASSERT: A ya no puede borrar el lote
        with pytest.raises(EstadoInvalido) as exc_info:
            ajuste_service.actualizar_ajuste(db_session, entrada.id_ajuste, _ajuste(empleado.id_empleado, TipoAjusteEnum.ENTRADA))
        db_session.rollback()
        assert "ajustes" in str(exc_info.value)

        # B sigue siendo editable
        ajuste_service.actualizar_ajuste(db_session, revalorizacion.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.REVALORIZACION,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, id_lote=id_lote, costo_ajuste=Decimal(1)),
        ))
        db_session.commit()
        assert db_session.get(DBLote, id_lote).costo_unitario_final == Decimal(11)

    def test_rama_3_lote_prestado_y_devuelto(self, db_session, empleado, crear_refaccion):
        # ARRANGE: el lote sale en préstamo y vuelve completo; vuelve a parecer intacto
        refaccion = crear_refaccion()
        entrada = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_refaccion=refaccion.id_refaccion, cantidad=Decimal(5), costo_ajuste=Decimal(10)),
        ))
        db_session.commit()
        id_lote = entrada.detalles[0].id_lote_refaccion
        prestamo = prestamo_service.crear_prestamo(db_session, PrestamoCreate(
            nombre_solicitante_manual="Mecánico turno A",
            detalles=[DetallePrestamoCreate(tipo_item=TipoItemEnum.refaccion, id_item=refaccion.id_refaccion, cantidad=Decimal(2))],
        ), empleado.id_empleado)
        db_session.commit()
        prestamo_service.registrar_devolucion(
            db_session, prestamo.detalles[0].id_detalle_prestamo, Decimal(2), EstadoDevolucionEnum.BUENO
        )
        db_session.commit()
        assert db_session.get(DBLote, id_lote).intacto

        # ACT & ASSERT
        with pytest.raises(EstadoInvalido) as exc_info:
            ajuste_service.actualizar_ajuste(db_session, entrada.id_ajuste, _ajuste(empleado.id_empleado, TipoAjusteEnum.ENTRADA))
        db_session.rollback()

        assert "préstamos" in str(exc_info.value)
        assert db_session.get(DBLote, id_lote) is not None


class TestActualizarAjusteConcurrenteCajaBlanca:
    """
    CAJA BLANCA: dos PUT sobre el mismo ajuste

    La segunda petición leyó el ajuste antes de que la primera hiciera commit.
    Al bloquear debe releer las líneas vigentes y revertir esas, no las que tenía en memoria.
    """

    def test_segundo_put_revierte_lineas_vigentes(self, db_session, otra_sesion, empleado, crear_insumo):
        # ARRANGE: stock 10, ENTRADA de 5 → 15
        insumo = crear_insumo(stock="10", costo="2")
        ajuste = ajuste_service.crear_ajuste(db_session, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(5)),
        ))
        db_session.commit()

        # La otra petición ya tiene el ajuste y sus líneas en memoria
        previo = ajuste_service.obtener_ajuste(otra_sesion, ajuste.id_ajuste)
        assert [d.cantidad for d in previo.detalles] == [Decimal(5)]

        # ACT: primer PUT a +2 (stock 12) y después el segundo a +3
        ajuste_service.actualizar_ajuste(db_session, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(2)),
        ))
        db_session.commit()
        ajuste_service.actualizar_ajuste(otra_sesion, ajuste.id_ajuste, _ajuste(
            empleado.id_empleado, TipoAjusteEnum.ENTRADA,
            DetalleAjusteCreate(id_insumo=insumo.id_insumo, cantidad=Decimal(3)),
        ))
        otra_sesion.commit()

        # ASSERT: 10 + 3, con una sola línea
        db_session.expire_all()
        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(13)
        lineas = db_session.query(DBAjusteDetalle).filter(DBAjusteDetalle.id_ajuste == ajuste.id_ajuste).all()
        assert [l.cantidad for l in lineas] == [Decimal(3)]
