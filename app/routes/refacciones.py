# backEnd/app/routes/refacciones.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.inventario import StockRefaccion
from ..services import lotes as lote_service
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

router = APIRouter(
    prefix="/refacciones",
    tags=["Refacciones"]
)


@router.get("/{id_refaccion}/stock", response_model=StockRefaccion)
def read_stock_refaccion(
    id_refaccion: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    """Existencia y valor de inventario, calculados sobre los lotes en esta misma consulta."""
    try:
        refaccion = lote_service.obtener_refaccion(db, id_refaccion)
    except InventarioError as e:
        raise a_http(e)

    stock = lote_service.stock_refaccion(db, id_refaccion)
    return StockRefaccion(
        id_refaccion=refaccion.id_refaccion,
        nombre=refaccion.nombre,
        numero_parte=refaccion.numero_parte,
        stock_actual=stock,
        valor_inventario=lote_service.valor_inventario_refaccion(db, id_refaccion),
        stock_minimo=refaccion.stock_minimo,
        bajo_minimo=stock < refaccion.stock_minimo,
    )
