# backEnd/app/routes/auth.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session, joinedload

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.token import Token
from ..models.empleado import Empleado
from ..models.sesion import SesionActiva
from ..models.enums import EstadoCuentaEnum, EstadoSesionEnum
from ..services.audit_service import AuditService, EventoAuditoria

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)


@router.post("/login", response_model=Token)
def login_for_access_token(
    request: Request,
    background_tasks: BackgroundTasks,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    Autentica un empleado y devuelve un token de acceso JWT.
    Cada token queda registrado en sesiones_activas para poder revocarlo.
    """
    user = db.query(Empleado).options(joinedload(Empleado.rol)).filter(
        Empleado.nombre_usuario == form_data.username
    ).first()

    if not user or not user.contrasena_hash or not auth_utils.verify_password(form_data.password, user.contrasena_hash):
        background_tasks.add_task(AuditService.registrar, EventoAuditoria(
            id_usuario=user.id_empleado if user else None,
            tipo_accion="LOGIN_FALLIDO",
            recurso_afectado="empleado",
            detalles_cambio={"usuario_intentado": form_data.username},
            ip_address=AuditService.obtener_ip(request),
        ))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.estado_cuenta != EstadoCuentaEnum.activo:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="La cuenta de usuario se encuentra inactiva. Comuníquese con un administrador.",
        )

    access_token, expira = auth_utils.create_access_token(
        data={"sub": user.nombre_usuario, "id": user.id_empleado, "rol": user.nombre_rol}
    )
    try:
        db.add(SesionActiva(
            id_usuario=user.id_empleado,
            token_jwt=access_token,
            user_agent=request.headers.get("User-Agent", ""),
            ip_address=AuditService.obtener_ip(request),
            fecha_expiracion_token=expira,
            estado=EstadoSesionEnum.activo,
        ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error al registrar la sesión de {user.nombre_usuario}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="No se pudo iniciar la sesión.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        user, "LOGIN", "empleado", user.id_empleado, {"rol": user.nombre_rol}, request,
    ))
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "id_usuario": user.id_empleado,
        "nombre": user.nombre,
        "rol": user.nombre_rol or "",
    }


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(
    request: Request,
    background_tasks: BackgroundTasks,
    token: str = Depends(auth_utils.oauth2_scheme),
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    """Cierra la sesión: el token deja de ser aceptado aunque su JWT no haya expirado."""
    sesion = db.query(SesionActiva).filter(
        SesionActiva.token_jwt == token,
        SesionActiva.estado == EstadoSesionEnum.activo,
    ).first()
    if sesion:
        sesion.estado = EstadoSesionEnum.cerrado
        db.commit()

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "LOGOUT", "empleado", current_user.id_empleado, None, request,
    ))
    return {"message": "Sesión cerrada correctamente."}
