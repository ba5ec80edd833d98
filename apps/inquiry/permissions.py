# apps/inquiry/permissions.py
from rest_framework.permissions import SAFE_METHODS, BasePermission

from .exceptions import AuthorizationError

VIEW_PERM = "inquiry.view_inquiry"
CHANGE_PERM = "inquiry.change_inquiry"


class PermissionAuthorizer:
    """
    I answer "may this user act on inquiries?" from Django model permissions.
    Superusers pass through `has_perm`. Inactive or anonymous users never pass.
    """

    def _allowed(self, user, perm: str) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if not getattr(user, "is_active", False):
            return False
        return user.has_perm(perm)

    def can_view(self, user) -> bool:
        return self._allowed(user, VIEW_PERM) or self._allowed(user, CHANGE_PERM)

    def can_edit(self, user, inquiry_id=None) -> bool:
        # Per-object rules would hook in on inquiry_id; today every inquiry shares the model perm.
        return self._allowed(user, CHANGE_PERM)

    def require_view(self, user) -> None:
        if not self.can_view(user):
            raise AuthorizationError("You do not have permission to view inquiries.")

    def require_edit(self, user, inquiry_id=None) -> None:
        if not self.can_edit(user, inquiry_id):
            raise AuthorizationError()


class CanManageInquiries(BasePermission):
    """
    Reads need view (or change) permission; everything else needs change.
    Views may list POST actions that only read in `read_actions`.
    """

    message = "You do not have permission to perform this action."
    authorizer = PermissionAuthorizer()

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if request.method in SAFE_METHODS or self._reads(view):
            return self.authorizer.can_view(user)
        return self.authorizer.can_edit(user)

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if request.method in SAFE_METHODS or self._reads(view):
            return self.authorizer.can_view(user)
        return self.authorizer.can_edit(user, obj.pk)

    @staticmethod
    def _reads(view) -> bool:
        return getattr(view, "action", None) in getattr(view, "read_actions", ())
