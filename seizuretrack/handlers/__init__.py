"""
Handler modules with automatic API registration
Every @api_handler function is registered as a FastAPI route at startup
"""

import inspect
from datetime import datetime
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
)

from seizuretrack.core.logger import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

    from seizuretrack.system.runtime import Runtime

logger = get_logger(__name__)

F = TypeVar('F', bound=Callable[..., Any])

# Global API handler registry
_handler_registry: Dict[str, Dict[str, Any]] = {}


def api_handler(
    body: Optional[Type] = None,
    method: str = "POST",
    path: Optional[str] = None,
    tags: Optional[List[str]] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
):
    """
    API handler decorator

    @param body - Optional request model type for parameter validation
    @param method - HTTP method (GET, POST, PUT, DELETE, etc.)
    @param path - Custom path, defaults to /<function name>
    @param tags - API tags
    @param summary - API summary
    @param description - API description
    """

    def decorator(func: F) -> F:
        # Get function information
        func_name = getattr(func, '__name__', 'unknown')
        func_module = getattr(func, '__module__', '')
        module_name = func_module.split(".")[-1] if func_module else 'unknown'
        func_doc = getattr(func, '__doc__', None)

        # Register handler information
        _handler_registry[func_name] = {
            "func": func,
            "body": body,
            "method": method.upper(),
            "path": path or f"/{func_name}",
            "tags": tags or [module_name],
            "module": module_name,
            "summary": summary or (func_doc.split("\n")[0] if func_doc else func_name),
            "description": description or func_doc or "",
            "docstring": func_doc or "",
            "signature": inspect.signature(func),
        }

        # Keep original function unchanged
        return func

    return decorator


def get_registered_handlers() -> Dict[str, Dict[str, Any]]:
    """
    Snapshot of the handler registry

    @returns Handler info keyed by function name; mutating it leaves the registry untouched
    """
    return _handler_registry.copy()


def get_runtime(request: "Request") -> "Runtime":
    """Runtime built by the application lifespan"""
    return request.app.state.runtime


def success_response(
    runtime: "Runtime", data: Any = None, message: Optional[str] = None
) -> Dict[str, Any]:
    """Success envelope, carries any storage warnings raised while handling"""
    response: Dict[str, Any] = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    response["warnings"] = runtime.store.pop_warnings()
    response["timestamp"] = datetime.now().isoformat()
    return response


def error_response(message: str) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "timestamp": datetime.now().isoformat(),
    }


def register_fastapi_routes(app: "FastAPI", prefix: str = "/api") -> None:
    """
    Automatically register all functions decorated with @api_handler as FastAPI routes

    @param app - FastAPI application instance
    @param prefix - Route prefix
    """
    handlers = get_registered_handlers()
    logger.info(f"Starting FastAPI route registration, {len(handlers)} handlers")

    for handler_name, handler_info in handlers.items():
        func = handler_info["func"]
        method = handler_info.get("method", "POST")
        path = handler_info.get("path", f"/{handler_name}")
        tags = handler_info.get("tags", [])
        summary = handler_info.get("summary", handler_name)
        description = handler_info.get("description", "")
        module = handler_info.get("module", "unknown")

        try:
            # Build full path
            full_path = f"{prefix}{path}"

            route_params: Dict[str, Any] = {
                "path": full_path,
                "tags": tags,
                "summary": summary,
                "description": description,
                "response_model": None,
            }

            if method == "GET":
                app.get(**route_params)(func)  # type: ignore
            elif method == "POST":
                app.post(**route_params)(func)  # type: ignore
            elif method == "PUT":
                app.put(**route_params)(func)  # type: ignore
            elif method == "DELETE":
                app.delete(**route_params)(func)  # type: ignore
            elif method == "PATCH":
                app.patch(**route_params)(func)  # type: ignore
            else:
                logger.warning(f"Unknown HTTP method: {method} for {handler_name}")
                continue

            logger.debug(
                f"✓ Registered route: {method} {full_path} ({handler_name} from {module})"
            )

        except Exception as e:
            logger.error(
                f"✗ Failed to register route {handler_name}: {e}", exc_info=True
            )

    logger.info(f"FastAPI route registration completed: {len(handlers)} routes")


# Import all handler modules to trigger decorator registration
# Note: These imports must be after all decorator definitions to avoid circular imports
# ruff: noqa: E402
from . import (
    appointments,
    contacts,
    dashboard,
    journal,
    medications,
    reminders,
    reports,
    seizures,
    system,
)

__all__ = [
    "api_handler",
    "register_fastapi_routes",
    "get_registered_handlers",
    "get_runtime",
    "success_response",
    "error_response",
    "appointments",
    "contacts",
    "dashboard",
    "journal",
    "medications",
    "reminders",
    "reports",
    "seizures",
    "system",
]
