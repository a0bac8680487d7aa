from enum import Enum

class EstadoCuentaEnum(str, Enum):
    activo = "Activo"
    inactivo = "Inactivo"

class EstadoSesionEnum(str, Enum):
    activo = "activo"
    cerrado = "cerrado"
    expirado = "expirado"

class TipoItemEnum(str, Enum): # insumo (promedio ponderado) o refaccion (lotes PEPS)
    insumo = "insumo"
    refaccion = "refaccion"

class TipoCostoEnum(str, Enum):
    unitario = "unitario"
    neto = "neto"

class TipoAjusteEnum(str, Enum):
    ENTRADA = "ENTRADA"
    SALIDA = "SALIDA"
    REVALORIZACION = "REVALORIZACION"

class EstadoConteoEnum(str, Enum):
    EN_PROCESO = "EN_PROCESO"
    COMPLETADO = "COMPLETADO"
    APLICADO = "APLICADO"

class EstadoPrestamoEnum(str, Enum):
    ACTIVO = "ACTIVO"
    CERRADO = "CERRADO"

class EstadoDevolucionEnum(str, Enum):
    BUENO = "BUENO"     # regresa al stock
    ROTO = "ROTO"
    VACIO = "VACIO"
    PERDIDO = "PERDIDO"

class TipoSalidaEnum(str, Enum):
    mantenimiento = "Mantenimiento"
    consumo_interno = "Consumo Interno"
    traslado = "Traslado"


# Transiciones permitidas del conteo. APLICADO es terminal y solo se alcanza con /aplicar.
TRANSICIONES_CONTEO = {
    EstadoConteoEnum.EN_PROCESO: {EstadoConteoEnum.EN_PROCESO, EstadoConteoEnum.COMPLETADO},
    EstadoConteoEnum.COMPLETADO: {EstadoConteoEnum.EN_PROCESO, EstadoConteoEnum.COMPLETADO, EstadoConteoEnum.APLICADO},
    EstadoConteoEnum.APLICADO: set(),
}
