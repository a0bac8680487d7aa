# backEnd/app/routes/audit_logs.py

from typing import Optional
from datetime import datetime, date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import desc

from ..database import get_db
from .. import auth as auth_utils
from ..models.audit_log import AuditoriaAccion
from ..schemas.audit_log import AuditoriaPagination

router = APIRouter(
    prefix="/auditoria",
    tags=["Auditoría"]
)


@router.get("/", response_model=AuditoriaPagination)
def get_auditoria(
    # Filtros de búsqueda
    id_usuario: Optional[int] = Query(None, description="Filtrar por ID de usuario"),
    recurso: Optional[str] = Query(None, description="Filtrar por recurso afectado"),
    tipo_accion: Optional[str] = Query(None, description="Filtrar por tipo de acción"),
    fecha_desde: Optional[date] = Query(None, description="Fecha desde (YYYY-MM-DD)"),
    fecha_hasta: Optional[date] = Query(None, description="Fecha hasta (YYYY-MM-DD)"),

    # Paginación
    skip: int = Query(0, ge=0, description="Número de registros a omitir"),
    limit: int = Query(50, gt=0, le=500, description="Número máximo de registros a devolver"),

    # Dependencias
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    """
    Obtiene la bitácora de acciones con filtros y paginación.
    Solo accesible para administradores.
    """
    query = db.query(AuditoriaAccion)

    if id_usuario:
        query = query.filter(AuditoriaAccion.id_usuario == id_usuario)
    if recurso:
        query = query.filter(AuditoriaAccion.recurso_afectado.ilike(f"%{recurso}%"))
    if tipo_accion:
        query = query.filter(AuditoriaAccion.tipo_accion == tipo_accion)
    if fecha_desde:
        query = query.filter(AuditoriaAccion.fecha >= fecha_desde)
    if fecha_hasta:
        # Incluir todo el día hasta las 23:59:59
        query = query.filter(AuditoriaAccion.fecha <= datetime.combine(fecha_hasta, datetime.max.time()))

    total = query.count()
    registros = query.order_by(desc(AuditoriaAccion.fecha), desc(AuditoriaAccion.id_auditoria)).offset(skip).limit(limit).all()
    return {"items": registros, "total": total}
