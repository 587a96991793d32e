# mantenimiento/core/errors.py
from typing import Any, Optional


class WorkflowError(Exception):
    """
    Error base del núcleo. Misma forma que una HTTPException (status_code + detail)
    para que el host pueda mapearlo directamente a su respuesta.
    """
    status_code: int = 400

    def __init__(self, detail: Any = None, status_code: Optional[int] = None):
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail if detail is not None else self.__class__.__name__
        super().__init__(self.detail)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_code={self.status_code!r}, detail={self.detail!r})"


class InvalidCredentials(WorkflowError):
    status_code = 401


class NotFound(WorkflowError):
    status_code = 404


class ValidationError(WorkflowError):
    status_code = 422


class InvalidTransition(WorkflowError):
    status_code = 400

    def __init__(self, old: str, new: str):
        self.old = old
        self.new = new
        super().__init__(f"Transición no permitida: {old} → {new}")


def from_pydantic(exc) -> ValidationError:
    """Convierte un pydantic.ValidationError en el ValidationError del núcleo."""
    msgs = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = err.get("msg", "valor inválido")
        msgs.append(f"{loc}: {msg}" if loc else msg)
    return ValidationError("; ".join(msgs) or "Datos inválidos")
