from rest_framework.permissions import SAFE_METHODS
from rest_framework.permissions import BasePermission

from fiscalflow.users.access import can_delete
from fiscalflow.users.access import can_read
from fiscalflow.users.access import can_write


class HasModulePermission(BasePermission):
    """Gate a view on the requesting user's stored access to its module.

    The view names its module with ``module_key`` or ``get_module_key()``.
    Safe methods need read, writes need write or full, DELETE needs full.
    """

    message = "You do not have access to this module."

    def _module_key(self, request, view):
        getter = getattr(view, "get_module_key", None)
        if callable(getter):
            return getter()
        return getattr(view, "module_key", None)

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        module_key = self._module_key(request, view)
        if module_key is None:
            # Views that resolve the module from the object defer to
            # has_object_permission.
            return True
        return self._allowed(request, user, module_key)

    def has_object_permission(self, request, view, obj) -> bool:
        getter = getattr(view, "get_object_module_key", None)
        if not callable(getter):
            return True
        return self._allowed(request, request.user, getter(obj))

    def _allowed(self, request, user, module_key: str) -> bool:
        if request.method in SAFE_METHODS:
            return can_read(user, module_key)
        if request.method == "DELETE":
            return can_delete(user, module_key)
        return can_write(user, module_key)
