# backEnd/app/services/errores.py


class InventarioError(Exception):
    """Errores de dominio del motor de inventario. No conocen HTTP."""

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class NoEncontrado(InventarioError):
    """Refacción, insumo, lote, préstamo, ajuste o conteo inexistente."""


class StockInsuficiente(InventarioError):
    """La cantidad pedida excede la existencia agregada."""


class StockLoteInsuficiente(InventarioError):
    """La cantidad pedida excede lo disponible en un lote concreto."""


class DevolucionExcedida(InventarioError):
    """Se intenta devolver más de lo pendiente en una línea de préstamo."""


class EstadoInvalido(InventarioError):
    """El objeto está en un estado que no permite la operación."""


class ErrorValidacion(InventarioError):
    """Entrada mal formada o incompleta."""
