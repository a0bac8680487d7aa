from fastapi import HTTPException, status

from ..services.errores import (
    InventarioError, NoEncontrado, StockInsuficiente, StockLoteInsuficiente,
    DevolucionExcedida, EstadoInvalido, ErrorValidacion,
)

# Errores de dominio -> código HTTP
CODIGOS_HTTP = {
    NoEncontrado: status.HTTP_404_NOT_FOUND,
    ErrorValidacion: status.HTTP_400_BAD_REQUEST,
    StockInsuficiente: status.HTTP_400_BAD_REQUEST,
    StockLoteInsuficiente: status.HTTP_400_BAD_REQUEST,
    DevolucionExcedida: status.HTTP_400_BAD_REQUEST,
    EstadoInvalido: status.HTTP_409_CONFLICT,
}


def a_http(error: InventarioError) -> HTTPException:
    """Convierte un error de dominio en la HTTPException que responde la ruta."""
    codigo = CODIGOS_HTTP.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=codigo, detail=error.mensaje)
