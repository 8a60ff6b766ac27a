"""Custom permissions for enforcing object-level ownership."""

from rest_framework.permissions import BasePermission


class IsCategoryOwner(BasePermission):
    """
    Object-level permission for category writes.

    Only the owner may modify or delete a category.  Nobody owns a default
    category, so nobody may change one.  Reads never reach this check: they
    are scoped to own + default categories by the queryset.
    """

    message = "You do not have permission to modify this category."

    def has_object_permission(self, request, view, obj):
        if obj.user_id is not None and obj.user_id == request.user.pk:
            return True

        verb = "delete" if request.method == "DELETE" else "update"
        if obj.user_id is None:
            self.message = f"Cannot {verb} default categories"
        else:
            self.message = f"Cannot {verb} another user's category"
        return False
