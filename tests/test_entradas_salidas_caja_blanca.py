"""
PRUEBAS DE CAJA BLANCA - Entradas y salidas de almacén
Objetivo: Testear la lógica interna conociendo la implementación

Cobertura objetivo:
- crear_entrada: un lote por línea de refacción, promedio ponderado por línea de insumo
- crear_salida: PEPS o lote elegido, una línea por lote tocado, costo al momento
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from app.models.enums import TipoCostoEnum
from app.models.insumo import Insumo as DBInsumo
from app.models.lote_refaccion import LoteRefaccion as DBLote
from app.schemas.entrada import EntradaCreate, DetalleEntradaRefaccionCreate, DetalleEntradaInsumoCreate
from app.schemas.salida import SalidaCreate, DetalleSalidaRefaccionCreate, DetalleSalidaInsumoCreate
from app.services import entradas as entrada_service
from app.services import salidas as salida_service
from app.services.errores import ErrorValidacion, StockInsuficiente


class TestCrearEntradaCajaBlanca:
    """
    CAJA BLANCA: crear_entrada

    Rutas:
    1. Fecha futura → ErrorValidacion
    2. Sin líneas → ErrorValidacion
    3. Línea de refacción → detalle + lote enlazado
    4. Línea de insumo → promedio ponderado
    """

    def test_rama_1_fecha_futura(self, db_session, empleado):
        datos = EntradaCreate(
            recibido_por_id=empleado.id_empleado, razon_social="Refaccionaria del Norte",
            fecha_operacion=datetime.now() + timedelta(days=2),
        )

        with pytest.raises(ErrorValidacion) as exc_info:
            entrada_service.crear_entrada(db_session, datos)

        assert "futura" in str(exc_info.value)

    def test_rama_2_sin_lineas(self, db_session, empleado):
        datos = EntradaCreate(
            recibido_por_id=empleado.id_empleado, razon_social="Refaccionaria del Norte",
            fecha_operacion=datetime(2024, 3, 1),
        )

        with pytest.raises(ErrorValidacion):
            entrada_service.crear_entrada(db_session, datos)

    def test_rama_3_y_4_entrada_mixta(self, db_session, empleado, crear_refaccion, crear_insumo):
        # ARRANGE
        refaccion = crear_refaccion()
        insumo = crear_insumo(stock="10", costo="5")
        datos = EntradaCreate(
            recibido_por_id=empleado.id_empleado,
            razon_social="Refaccionaria del Norte",
            factura_proveedor="F-1001",
            fecha_operacion=datetime(2024, 3, 1),
            detalles_refaccion=[DetalleEntradaRefaccionCreate(
                id_refaccion=refaccion.id_refaccion, cantidad_recibida=100,
                costo_ingresado=2500, tipo_costo=TipoCostoEnum.neto, aplica_iva=True,
            )],
            detalles_insumo=[DetalleEntradaInsumoCreate(
                id_insumo=insumo.id_insumo, cantidad_recibida=5,
                costo_ingresado=8, tipo_costo=TipoCostoEnum.unitario, aplica_iva=False,
            )],
        )

        # ACT
        entrada = entrada_service.crear_entrada(db_session, datos)
        db_session.commit()

        # ASSERT: lote a 29.00 (25 + IVA) enlazado a su línea
        lote = db_session.query(DBLote).filter(DBLote.id_refaccion == refaccion.id_refaccion).one()
        assert lote.costo_unitario_subtotal == Decimal(25)
        assert lote.monto_iva_unitario == Decimal(4)
        assert lote.costo_unitario_final == Decimal(29)
        assert lote.id_detalle_entrada == entrada.detalles_refaccion[0].id_detalle_entrada

        # Insumo: (10*5 + 5*8) / 15
        db_session.refresh(insumo)
        assert insumo.stock_actual == Decimal(15)
        assert insumo.costo_unitario_promedio == Decimal(6)

        detalle = entrada_service.obtener_entrada(db_session, entrada.id_entrada)
        assert detalle.valor_neto == Decimal(100 * 29 + 5 * 8)
        assert {l.tipo_item.value for l in detalle.detalles} == {"refaccion", "insumo"}

    def test_listar_entradas_por_factura(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        for factura in ("F-1", "F-2"):
            entrada_service.crear_entrada(db_session, EntradaCreate(
                recibido_por_id=empleado.id_empleado, razon_social="Proveedor", factura_proveedor=factura,
                fecha_operacion=datetime(2024, 3, 1),
                detalles_insumo=[DetalleEntradaInsumoCreate(id_insumo=insumo.id_insumo, cantidad_recibida=1, costo_ingresado=1)],
            ))
        db_session.commit()

        items, total = entrada_service.listar_entradas(db_session, search="F-2")

        assert total == 1
        assert items[0].factura_proveedor == "F-2"


class TestCrearSalidaCajaBlanca:
    """
    CAJA BLANCA: crear_salida

    Rutas:
    1. Sin líneas → ErrorValidacion
    2. Refacción sin lote → PEPS, una línea por lote
    3. Refacción con lote elegido → solo ese lote
    4. Insumo → costo_al_momento = promedio vigente
    5. Cualquier línea sin stock → nada cambia
    """

    def test_rama_1_sin_lineas(self, db_session, empleado):
        with pytest.raises(ErrorValidacion):
            salida_service.crear_salida(db_session, SalidaCreate(solicitado_por_id=empleado.id_empleado))

    def test_rama_2_3_4_salida_mixta(self, db_session, empleado, crear_refaccion, crear_lote, crear_insumo):
        # ARRANGE
        balata = crear_refaccion(nombre="Balata")
        filtro = crear_refaccion(nombre="Filtro")
        crear_lote(balata.id_refaccion, 2, "10", dia=1)
        crear_lote(balata.id_refaccion, 5, "20", dia=2)
        crear_lote(filtro.id_refaccion, 3, "7", dia=1)
        filtro_elegido = crear_lote(filtro.id_refaccion, 3, "9", dia=2)
        aceite = crear_insumo(stock="20", costo="6")

        # ACT
        salida = salida_service.crear_salida(db_session, SalidaCreate(
            solicitado_por_id=empleado.id_empleado,
            id_autobus=14,
            kilometraje_autobus=120500,
            detalles_refaccion=[
                DetalleSalidaRefaccionCreate(id_refaccion=balata.id_refaccion, cantidad=3),
                DetalleSalidaRefaccionCreate(id_refaccion=filtro.id_refaccion, cantidad=1, id_lote=filtro_elegido.id_lote),
            ],
            detalles_insumo=[DetalleSalidaInsumoCreate(id_insumo=aceite.id_insumo, cantidad_usada=4)],
        ))
        db_session.commit()

        # ASSERT: balata cruza dos lotes, filtro sale del lote elegido
        lineas = [(d.id_refaccion, d.cantidad_despachada, d.costo_unitario) for d in salida.detalles_refaccion]
        assert lineas == [
            (balata.id_refaccion, Decimal(2), Decimal(10)),
            (balata.id_refaccion, Decimal(1), Decimal(20)),
            (filtro.id_refaccion, Decimal(1), Decimal(9)),
        ]
        assert salida.detalles_insumo[0].costo_al_momento == Decimal(6)
        # 2*10 + 1*20 + 1*9 + 4*6
        assert salida_service.obtener_salida(db_session, salida.id_salida).costo_total == Decimal(73)

    def test_rama_5_sin_stock_no_cambia_nada(self, db_session, empleado, crear_refaccion, crear_lote, crear_insumo):
        balata = crear_refaccion(nombre="Balata")
        lote = crear_lote(balata.id_refaccion, 5, "10")
        aceite = crear_insumo(stock="1", costo="6")

        with pytest.raises(StockInsuficiente):
            salida_service.crear_salida(db_session, SalidaCreate(
                solicitado_por_id=empleado.id_empleado,
                detalles_refaccion=[DetalleSalidaRefaccionCreate(id_refaccion=balata.id_refaccion, cantidad=2)],
                detalles_insumo=[DetalleSalidaInsumoCreate(id_insumo=aceite.id_insumo, cantidad_usada=3)],
            ))
        db_session.rollback()

        assert db_session.get(DBLote, lote.id_lote).cantidad_disponible == Decimal(5)
        assert db_session.get(DBInsumo, aceite.id_insumo).stock_actual == Decimal(1)
