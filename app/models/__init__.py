#aqui se el __init__.py para importar las clases y funciones necesarias
from .base import Base
from .enums import (
    EstadoCuentaEnum, EstadoSesionEnum, TipoItemEnum, TipoCostoEnum, TipoAjusteEnum,
    EstadoConteoEnum, EstadoPrestamoEnum, EstadoDevolucionEnum, TipoSalidaEnum,
)
from .rol import Rol
from .empleado import Empleado
from .sesion import SesionActiva
from .proveedor import Proveedor
from .refaccion import Refaccion, RefaccionComponente
from .lote_refaccion import LoteRefaccion
from .insumo import Insumo
from .entrada import EntradaAlmacen, DetalleEntrada, DetalleEntradaInsumo
from .salida import SalidaAlmacen, DetalleSalida, DetalleSalidaInsumo
from .ajuste import AjusteInventarioMaestro, AjusteInventarioDetalle
from .conteo import ConteoInventarioMaestro, ConteoInventarioDetalle, ConteoInventarioDetalleInsumo
from .prestamo import Prestamo, DetallePrestamo
from .produccion import OrdenProduccion
from .audit_log import AuditoriaAccion
