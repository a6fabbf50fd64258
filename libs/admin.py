"""
Admin base class for warehouse-owned tables.

The universe and ledger tables are written by the upstream warehouse only, so
their admin pages allow browsing and exporting but never editing.
"""

from __future__ import annotations

from django.contrib import admin


class WarehouseReadOnlyAdmin(admin.ModelAdmin):
    """ModelAdmin that refuses add, change and delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
