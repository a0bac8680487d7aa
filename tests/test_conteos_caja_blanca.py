"""
PRUEBAS DE CAJA BLANCA - Conteos físicos e inventario inicial
Objetivo: Testear la lógica interna conociendo la implementación

Cobertura objetivo:
- Máquina de estados EN_PROCESO → COMPLETADO → APLICADO
- aplicar_conteo sobrescribe existencia y costo, una sola vez
- cargar_inventario_inicial crea lotes e inicializa insumos
"""
from datetime import datetime
from decimal import Decimal

import pytest

from app.models.enums import EstadoConteoEnum
from app.models.insumo import Insumo as DBInsumo
from app.models.lote_refaccion import LoteRefaccion as DBLote
from app.schemas.conteo import (
    ConteoCreate, ConteoMaestroCreate, DetalleConteoInsumoCreate,
    InventarioInicialCreate, InventarioInicialMaestro, InventarioInicialRefaccion, InventarioInicialInsumo,
)
from app.services import conteos as conteo_service
from app.services.errores import ErrorValidacion, EstadoInvalido, NoEncontrado


def _conteo(id_empleado, estado, *detalles, observaciones="Conteo mensual"):
    return ConteoCreate(
        maestro=ConteoMaestroCreate(id_empleado=id_empleado, estado=estado, observaciones=observaciones),
        detalles=list(detalles),
    )


class TestCrearYActualizarConteoCajaBlanca:
    """
    CAJA BLANCA: crear_conteo / actualizar_conteo

    Rutas:
    1. Crear directamente en APLICADO → ErrorValidacion
    2. Insumo inexistente → NoEncontrado
    3. Editar un conteo APLICADO → EstadoInvalido
    4. Editar pasando a APLICADO → ErrorValidacion
    5. Editar reemplaza los detalles
    """

    def test_rama_1_crear_aplicado(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        datos = _conteo(empleado.id_empleado, EstadoConteoEnum.APLICADO,
                        DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=1, costo_unitario_asignado=1))

        with pytest.raises(ErrorValidacion):
            conteo_service.crear_conteo(db_session, datos)

    def test_rama_2_insumo_inexistente(self, db_session, empleado):
        datos = _conteo(empleado.id_empleado, EstadoConteoEnum.EN_PROCESO,
                        DetalleConteoInsumoCreate(id_insumo=321, cantidad_contada=1, costo_unitario_asignado=1))

        with pytest.raises(NoEncontrado) as exc_info:
            conteo_service.crear_conteo(db_session, datos)

        assert "321" in str(exc_info.value)

    def test_rama_3_editar_aplicado(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        detalle = DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=4, costo_unitario_asignado=2)
        conteo = conteo_service.crear_conteo(db_session, _conteo(empleado.id_empleado, EstadoConteoEnum.COMPLETADO, detalle))
        conteo_service.aplicar_conteo(db_session, conteo.id_conteo)
        db_session.commit()

        with pytest.raises(EstadoInvalido):
            conteo_service.actualizar_conteo(
                db_session, conteo.id_conteo, _conteo(empleado.id_empleado, EstadoConteoEnum.EN_PROCESO, detalle)
            )

    def test_rama_4_editar_hacia_aplicado(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        detalle = DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=4, costo_unitario_asignado=2)
        conteo = conteo_service.crear_conteo(db_session, _conteo(empleado.id_empleado, EstadoConteoEnum.COMPLETADO, detalle))
        db_session.commit()

        with pytest.raises(ErrorValidacion) as exc_info:
            conteo_service.actualizar_conteo(
                db_session, conteo.id_conteo, _conteo(empleado.id_empleado, EstadoConteoEnum.APLICADO, detalle)
            )

        assert "/aplicar" in str(exc_info.value)

    def test_rama_5_reemplaza_detalles(self, db_session, empleado, crear_insumo):
        insumo_a = crear_insumo(nombre="Grasa")
        insumo_b = crear_insumo(nombre="Estopa")
        conteo = conteo_service.crear_conteo(db_session, _conteo(
            empleado.id_empleado, EstadoConteoEnum.EN_PROCESO,
            DetalleConteoInsumoCreate(id_insumo=insumo_a.id_insumo, cantidad_contada=4, costo_unitario_asignado=2),
        ))
        db_session.commit()

        conteo_service.actualizar_conteo(db_session, conteo.id_conteo, _conteo(
            empleado.id_empleado, EstadoConteoEnum.COMPLETADO,
            DetalleConteoInsumoCreate(id_insumo=insumo_b.id_insumo, cantidad_contada=9, costo_unitario_asignado=1),
        ))
        db_session.commit()

        db_session.refresh(conteo)
        assert conteo.estado == EstadoConteoEnum.COMPLETADO
        assert [d.id_insumo for d in conteo.detalles_insumo] == [insumo_b.id_insumo]


class TestAplicarConteoCajaBlanca:
    """
    CAJA BLANCA: aplicar_conteo

    Rutas:
    1. Conteo EN_PROCESO → EstadoInvalido
    2. COMPLETADO → sobrescribe existencia y costo, queda APLICADO
    3. Segunda aplicación → EstadoInvalido y el inventario no cambia
    """

    def test_rama_1_en_proceso(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        conteo = conteo_service.crear_conteo(db_session, _conteo(
            empleado.id_empleado, EstadoConteoEnum.EN_PROCESO,
            DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=4, costo_unitario_asignado=2),
        ))

        with pytest.raises(EstadoInvalido) as exc_info:
            conteo_service.aplicar_conteo(db_session, conteo.id_conteo)

        assert "COMPLETADO" in str(exc_info.value)

    def test_rama_2_y_3_aplica_una_sola_vez(self, db_session, empleado, crear_insumo):
        # ARRANGE: el sistema dice 40 a $3; el conteo encontró 37 a $3.10
        insumo = crear_insumo(stock="40", costo="3")
        conteo = conteo_service.crear_conteo(db_session, _conteo(
            empleado.id_empleado, EstadoConteoEnum.COMPLETADO,
            DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=Decimal(37),
                                      costo_unitario_asignado=Decimal("3.10")),
        ))
        db_session.commit()

        # ACT
        conteo_service.aplicar_conteo(db_session, conteo.id_conteo)
        db_session.commit()

        # ASSERT
        db_session.refresh(insumo)
        assert insumo.stock_actual == Decimal(37)
        assert insumo.costo_unitario_promedio == Decimal("3.1")
        assert conteo.estado == EstadoConteoEnum.APLICADO
        assert conteo.fecha_aplicacion is not None

        # Entre tanto el stock se mueve; re-aplicar no debe pisarlo
        insumo.stock_actual = Decimal(30)
        db_session.commit()
        with pytest.raises(EstadoInvalido) as exc_info:
            conteo_service.aplicar_conteo(db_session, conteo.id_conteo)
        db_session.rollback()

        assert "ya fue aplicado" in str(exc_info.value)
        assert db_session.get(DBInsumo, insumo.id_insumo).stock_actual == Decimal(30)

    def test_conteo_inexistente(self, db_session):
        with pytest.raises(NoEncontrado):
            conteo_service.aplicar_conteo(db_session, 55)


class TestListarConteosCajaBlanca:

    def test_filtra_por_estado_y_busqueda(self, db_session, empleado, crear_insumo):
        insumo = crear_insumo()
        detalle = DetalleConteoInsumoCreate(id_insumo=insumo.id_insumo, cantidad_contada=1, costo_unitario_asignado=1)
        conteo_service.crear_conteo(db_session, _conteo(empleado.id_empleado, EstadoConteoEnum.EN_PROCESO, detalle,
                                                        observaciones="Pasillo norte"))
        conteo_service.crear_conteo(db_session, _conteo(empleado.id_empleado, EstadoConteoEnum.COMPLETADO, detalle,
                                                        observaciones="Pasillo sur"))
        db_session.commit()

        items, total = conteo_service.listar_conteos(db_session, estado=EstadoConteoEnum.COMPLETADO)
        assert total == 1
        assert items[0].observaciones == "Pasillo sur"
        assert items[0].total_detalles == 1
        assert items[0].nombre_empleado == empleado.nombre

        items, total = conteo_service.listar_conteos(db_session, search="norte")
        assert total == 1
        assert items[0].estado == EstadoConteoEnum.EN_PROCESO


class TestInventarioInicialCajaBlanca:

    def test_sin_detalles(self, db_session, empleado):
        datos = InventarioInicialCreate(maestro=InventarioInicialMaestro(
            id_empleado=empleado.id_empleado, fecha_conteo=datetime(2024, 1, 1), motivo="Arranque",
        ))

        with pytest.raises(ErrorValidacion):
            conteo_service.cargar_inventario_inicial(db_session, datos)

    def test_crea_lotes_y_fija_insumos(self, db_session, empleado, crear_refaccion, crear_insumo):
        # ARRANGE
        refaccion = crear_refaccion()
        insumo = crear_insumo(stock="0", costo="0")
        datos = InventarioInicialCreate(
            maestro=InventarioInicialMaestro(
                id_empleado=empleado.id_empleado, fecha_conteo=datetime(2024, 1, 1), motivo="Arranque del sistema",
            ),
            detalles_refacciones=[InventarioInicialRefaccion(id_refaccion=refaccion.id_refaccion, cantidad=8, costo=45)],
            detalles_insumos=[InventarioInicialInsumo(id_insumo=insumo.id_insumo, cantidad=20, costo=Decimal("2.5"))],
        )

        # ACT
        conteo = conteo_service.cargar_inventario_inicial(db_session, datos)
        db_session.commit()

        # ASSERT
        assert conteo.estado == EstadoConteoEnum.APLICADO
        lote = db_session.get(DBLote, conteo.detalles_refaccion[0].id_lote)
        assert lote.cantidad_disponible == Decimal(8)
        assert lote.costo_unitario_final == Decimal(45)
        assert lote.monto_iva_unitario == 0
        db_session.refresh(insumo)
        assert insumo.stock_actual == Decimal(20)
        assert insumo.costo_unitario_promedio == Decimal("2.5")
