"""
Configuración global para todas las pruebas pytest
"""
import os

# La aplicación lee estas variables al importarse; deben existir antes del import de app.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas")
os.environ.setdefault("ALGORITHM", "HS256")

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import auth
from app.database import get_db
from app.main import app
from app.models.base import Base
from app.models.rol import Rol as DBRol
from app.models.empleado import Empleado as DBEmpleado
from app.models.insumo import Insumo as DBInsumo
from app.models.refaccion import Refaccion as DBRefaccion, RefaccionComponente as DBComponente
from app.models.lote_refaccion import LoteRefaccion as DBLote
from app.models.enums import EstadoCuentaEnum
from app.services.audit_service import AuditService

# SQLite en memoria compartida entre sesiones; se recrea en cada test
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Crea las tablas, entrega una sesión y al final borra todo.
    Las rutas hacen commit, por eso no basta con un rollback.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    original_factory = AuditService.session_factory
    AuditService.session_factory = TestingSessionLocal

    try:
        yield session
    finally:
        AuditService.session_factory = original_factory
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def otra_sesion(db_session):
    """Segunda sesión sobre la misma base: otra petición que trabaja en paralelo."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """
    Cliente HTTP de pruebas con la base de datos en memoria.
    La autenticación es la real (JWT + sesiones_activas).
    """
    def get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    # Limpiar overrides después del test
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, mock_user):
    """Cliente con el usuario autenticado reemplazado por mock_user (rol Admin)."""
    app.dependency_overrides[auth.get_current_user] = lambda: mock_user
    yield client


@pytest.fixture
def crear_empleado(db_session):
    """
    Factory function para crear empleados (con rol) en la BD.
    """
    def _crear_empleado(nombre="Empleado Prueba", rol="Admin", nombre_usuario=None, password=None,
                        estado=EstadoCuentaEnum.activo):
        db_rol = db_session.query(DBRol).filter(DBRol.nombre_rol == rol).first()
        if db_rol is None:
            db_rol = DBRol(nombre_rol=rol)
            db_session.add(db_rol)
            db_session.flush()
        empleado = DBEmpleado(
            nombre=nombre,
            puesto="Almacén",
            nombre_usuario=nombre_usuario,
            contrasena_hash=auth.get_password_hash(password) if password else None,
            id_rol=db_rol.id_rol,
            estado_cuenta=estado,
        )
        db_session.add(empleado)
        db_session.commit()
        db_session.refresh(empleado)
        return empleado

    return _crear_empleado


@pytest.fixture
def empleado(crear_empleado):
    return crear_empleado(nombre="Jefe de Almacén")


@pytest.fixture
def mock_user(empleado):
    """
    Usuario mockeado para pruebas que requieren autenticación.
    Apunta a un empleado real para que las llaves foráneas sean válidas.
    """
    user = MagicMock()
    user.id_empleado = empleado.id_empleado
    user.nombre = empleado.nombre
    user.nombre_usuario = "admin"
    user.nombre_rol = "Admin"
    return user


@pytest.fixture
def crear_insumo(db_session):
    """
    Factory function para crear insumos con existencia y costo promedio iniciales.
    """
    def _crear_insumo(nombre="Aceite 15W40", stock="0", costo="0", stock_minimo="0"):
        insumo = DBInsumo(
            nombre=nombre,
            unidad_medida="Litro",
            stock_minimo=Decimal(stock_minimo),
            stock_actual=Decimal(stock),
            costo_unitario_promedio=Decimal(costo),
        )
        db_session.add(insumo)
        db_session.commit()
        db_session.refresh(insumo)
        return insumo

    return _crear_insumo


@pytest.fixture
def crear_refaccion(db_session):
    """
    Factory function para crear refacciones del catálogo.
    """
    def _crear_refaccion(nombre="Balata delantera", stock_minimo="0"):
        refaccion = DBRefaccion(nombre=nombre, unidad_medida="Pieza", stock_minimo=Decimal(stock_minimo))
        db_session.add(refaccion)
        db_session.commit()
        db_session.refresh(refaccion)
        return refaccion

    return _crear_refaccion


@pytest.fixture
def crear_lote(db_session):
    """
    Factory function para crear lotes. `dia` fija la fecha de ingreso (orden PEPS).
    """
    def _crear_lote(id_refaccion, cantidad, costo, dia=1):
        lote = DBLote(
            id_refaccion=id_refaccion,
            cantidad_inicial=Decimal(str(cantidad)),
            cantidad_disponible=Decimal(str(cantidad)),
            costo_unitario_subtotal=Decimal(str(costo)),
            monto_iva_unitario=Decimal(0),
            costo_unitario_final=Decimal(str(costo)),
            fecha_ingreso=datetime(2024, 1, dia, 8, 0, 0),
        )
        db_session.add(lote)
        db_session.commit()
        db_session.refresh(lote)
        return lote

    return _crear_lote


@pytest.fixture
def crear_receta(db_session):
    """
    Factory function para registrar componentes: crear_receta(padre, [(hijo, cantidad), ...]).
    """
    def _crear_receta(id_padre, componentes):
        for id_hijo, cantidad in componentes:
            db_session.add(DBComponente(
                id_refaccion_padre=id_padre,
                id_refaccion_hijo=id_hijo,
                cantidad_necesaria=Decimal(str(cantidad)),
            ))
        db_session.commit()

    return _crear_receta
